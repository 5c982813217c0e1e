"""Project-native typed exceptions for container runtime failures."""

from __future__ import annotations


class ContainerRuntimeError(Exception):
    """Base exception for container runtime command failures.

    Attributes:
        command: Rendered command line that failed, when known.
        return_code: Process exit status, when the command ran.
        logs: Service-set logs captured for diagnosis, when available.
    """

    def __init__(
        self,
        message: str,
        command: str | None = None,
        return_code: int | None = None,
        logs: str = "",
    ):
        super().__init__(message)
        self.command = command
        self.return_code = return_code
        self.logs = logs


class ServiceBringUpError(ContainerRuntimeError, RuntimeError):
    """Build-and-start of the service set failed; fatal, never retried."""


class ServiceTeardownError(ContainerRuntimeError):
    """Stop-and-remove of the service set failed; callers treat it as best-effort."""


class ServiceStatusError(ContainerRuntimeError):
    """Service-set status could not be queried."""
