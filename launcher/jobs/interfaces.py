"""Typed interfaces for job-layer orchestration responsibilities."""

from typing import Protocol

from launcher.domain import ReadinessOutcome, RuntimeConfiguration, SupervisionOutcome


class ReadinessOrchestratorPort(Protocol):
    """Port definition for bringing a service set to a ready state."""

    def job_run(self, config: RuntimeConfiguration) -> ReadinessOutcome:
        """Tear down, bring up, and wait for container and network readiness.

        Args:
            config: Resolved runtime configuration.

        Returns:
            ReadinessOutcome: `Ready` or `TimedOut(phase)`.

        Raises:
            ServiceBringUpError: Raised when the bring-up command fails.
        """

    def job_teardown(self) -> bool:
        """Tear down the service set unconditionally.

        Returns:
            bool: True when teardown succeeded, False when it failed and was logged.
        """


class ServiceSetSupervisorPort(Protocol):
    """Port definition for post-ready supervision of a service set."""

    def job_monitor(self) -> SupervisionOutcome:
        """Block while the service set runs and report once it stops.

        Returns:
            SupervisionOutcome: Poll count and tail of logs after the stop.
        """
