"""Typed interfaces for adapter-layer responsibilities."""

from typing import Protocol


class ContainerRuntimePort(Protocol):
    """Port definition for managing one named service set."""

    def runtime_label(self) -> str:
        """Return a human-readable label of the managed service set.

        Returns:
            str: Label used in diagnostics and operator hints.

        Raises:
            RuntimeError: Raised when label metadata is unavailable.
        """

    def runtime_teardown(self) -> None:
        """Stop and remove the service set; absence of a running set is not an error.

        Raises:
            ServiceTeardownError: Raised when the teardown command fails.
        """

    def runtime_bring_up(self) -> None:
        """Build if needed and start the service set detached.

        Raises:
            ServiceBringUpError: Raised when the bring-up command fails.
        """

    def runtime_is_running(self) -> bool:
        """Return whether every declared service of the set is running.

        Returns:
            bool: True when the whole service set reports running.

        Raises:
            ServiceStatusError: Raised when status cannot be queried.
        """

    def runtime_logs(self, tail: int | None = None) -> str:
        """Return service-set log output for diagnosis.

        Args:
            tail: Optional number of trailing lines per service.

        Returns:
            str: Log text, or a failure note when logs are unavailable.
        """


class NetworkProbePort(Protocol):
    """Port definition for single-attempt TCP reachability checks."""

    def probe_is_open(self, host: str, port: int) -> bool:
        """Return whether one TCP connection attempt to host:port succeeds.

        Args:
            host: Target host.
            port: Target TCP port.

        Returns:
            bool: True when the connection was accepted.
        """
