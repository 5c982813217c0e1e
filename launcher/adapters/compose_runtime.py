"""Docker Compose adapter implementation for service-set lifecycle commands."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Final, Sequence

from launcher.domain import RuntimeConfiguration

from .interfaces import ContainerRuntimePort
from .runtime_errors import (
    ContainerRuntimeError,
    ServiceBringUpError,
    ServiceStatusError,
    ServiceTeardownError,
)

logger = logging.getLogger(__name__)


class DockerComposeRuntime(ContainerRuntimePort):
    """Adapter driving `docker compose -f <file>` for one service set."""

    _BRING_UP_TIMEOUT_SECONDS: Final[float] = 1800.0
    _TEARDOWN_TIMEOUT_SECONDS: Final[float] = 120.0
    _STATUS_TIMEOUT_SECONDS: Final[float] = 30.0
    _LOGS_TIMEOUT_SECONDS: Final[float] = 60.0

    def __init__(
        self,
        config: RuntimeConfiguration,
        docker_binary: str = "docker",
        base_environment: dict[str, str] | None = None,
    ):
        """Initialize compose runtime adapter.

        Args:
            config: Resolved runtime configuration.
            docker_binary: Docker CLI executable name or path.
            base_environment: Optional base environment, defaults to a copy of `os.environ`.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when required values are invalid.
        """

        if config is None:
            raise ValueError("config must not be None")
        normalized_binary = docker_binary.strip()
        if not normalized_binary:
            raise ValueError("docker_binary must not be blank")

        self._project_root = Path(config.project_root)
        self._compose_file = config.compose_file_path
        self._docker_binary = normalized_binary
        environment = dict(os.environ if base_environment is None else base_environment)
        environment.update(config.configuration_environment())
        self._environment = environment

    def runtime_label(self) -> str:
        """Return the compose invocation prefix used for operator hints.

        Returns:
            str: Rendered `docker compose -f <file>` prefix.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return shlex.join(self._runtime_compose_prefix())

    def runtime_teardown(self) -> None:
        """Run `down --remove-orphans` for the service set.

        Raises:
            ServiceTeardownError: Raised when the command fails or cannot start.
        """

        self._runtime_run_checked(
            arguments=("down", "--remove-orphans"),
            timeout_seconds=self._TEARDOWN_TIMEOUT_SECONDS,
            error_type=ServiceTeardownError,
            failure_label="service set teardown failed",
        )

    def runtime_bring_up(self) -> None:
        """Run `up --build -d` for the service set.

        Raises:
            ServiceBringUpError: Raised when the command fails or cannot start.
        """

        self._runtime_run_checked(
            arguments=("up", "--build", "-d"),
            timeout_seconds=self._BRING_UP_TIMEOUT_SECONDS,
            error_type=ServiceBringUpError,
            failure_label="service set bring-up failed",
        )

    def runtime_is_running(self) -> bool:
        """Return whether every declared service reports state `running`.

        Returns:
            bool: True when the declared and running service sets match and are non-empty.

        Raises:
            ServiceStatusError: Raised when compose status queries fail.
        """

        declared_services = self._runtime_service_names(arguments=("config", "--services"))
        running_services = self._runtime_service_names(arguments=("ps", "--status", "running", "--services"))
        if not declared_services or not running_services:
            return False
        return declared_services.issubset(running_services)

    def runtime_logs(self, tail: int | None = None) -> str:
        """Return combined service-set logs without color codes.

        Args:
            tail: Optional number of trailing lines per service.

        Returns:
            str: Log text, or a failure note when logs could not be fetched.

        Raises:
            ValueError: Raised when tail is not positive.
        """

        arguments: list[str] = ["logs", "--no-color"]
        if tail is not None:
            if tail < 1:
                raise ValueError("tail must be >= 1")
            arguments.append(f"--tail={tail}")

        try:
            completed = self._runtime_run(arguments=arguments, timeout_seconds=self._LOGS_TIMEOUT_SECONDS)
        except ContainerRuntimeError as error:
            return f"failed to fetch service set logs: {error}"

        if completed.returncode != 0:
            return f"failed to fetch service set logs: {(completed.stderr or completed.stdout).strip()}"
        return completed.stdout + completed.stderr

    def _runtime_compose_prefix(self) -> list[str]:
        return [self._docker_binary, "compose", "-f", str(self._compose_file)]

    def _runtime_service_names(self, arguments: Sequence[str]) -> set[str]:
        completed = self._runtime_run_checked(
            arguments=arguments,
            timeout_seconds=self._STATUS_TIMEOUT_SECONDS,
            error_type=ServiceStatusError,
            failure_label="service set status query failed",
        )
        return {line.strip() for line in completed.stdout.splitlines() if line.strip()}

    def _runtime_run_checked(
        self,
        arguments: Sequence[str],
        timeout_seconds: float,
        error_type: type[ContainerRuntimeError],
        failure_label: str,
    ) -> subprocess.CompletedProcess:
        """Run one compose command and raise the given error type on non-zero exit.

        Args:
            arguments: Compose sub-command and its arguments.
            timeout_seconds: Command timeout.
            error_type: Exception type raised on failure.
            failure_label: Message prefix for raised errors.

        Returns:
            subprocess.CompletedProcess: Completed process with captured output.

        Raises:
            ContainerRuntimeError: Raised as `error_type` when the command fails.
        """

        try:
            completed = self._runtime_run(arguments=arguments, timeout_seconds=timeout_seconds)
        except ContainerRuntimeError as error:
            raise error_type(f"{failure_label}: {error}", command=error.command) from error

        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip()
            raise error_type(
                f"{failure_label}: exit status {completed.returncode}: {detail}",
                command=shlex.join(completed.args),
                return_code=completed.returncode,
            )
        return completed

    def _runtime_run(self, arguments: Sequence[str], timeout_seconds: float) -> subprocess.CompletedProcess:
        """Execute one compose command with captured text output.

        Args:
            arguments: Compose sub-command and its arguments.
            timeout_seconds: Command timeout.

        Returns:
            subprocess.CompletedProcess: Completed process.

        Raises:
            ContainerRuntimeError: Raised when the command times out or cannot be started.
        """

        command = [*self._runtime_compose_prefix(), *arguments]
        rendered_command = shlex.join(command)
        logger.debug("Running %s", rendered_command)
        try:
            return subprocess.run(
                command,
                cwd=self._project_root,
                env=self._environment,
                capture_output=True,
                text=True,
                timeout=timeout_seconds,
                check=False,
            )
        except subprocess.TimeoutExpired as error:
            raise ContainerRuntimeError(
                f"command timed out after {timeout_seconds:g}s",
                command=rendered_command,
            ) from error
        except OSError as error:
            raise ContainerRuntimeError(f"command could not start: {error}", command=rendered_command) from error
