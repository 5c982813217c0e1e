"""Typed domain models shared across launcher layers.

This module provides immutable data contracts for the runtime configuration,
poll cadence, and readiness results exchanged between the config, adapter,
and job layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final

READINESS_STATUS_READY: Final[str] = "ready"
READINESS_STATUS_TIMED_OUT: Final[str] = "timed_out"


class ReadinessPhase(str, Enum):
    """Wait phase that exceeded its budget."""

    CONTAINER_STATE = "container_state"
    NETWORK_PROBE = "network_probe"


def _domain_render_flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass(frozen=True)
class RuntimeConfiguration:
    """Resolved launcher configuration, constructed once per invocation.

    Attributes:
        backend_host: Backend bind address inside the container.
        backend_port: Published backend port.
        frontend_host: Frontend bind address.
        frontend_port: Published frontend port.
        serve_frontend: Whether the backend serves the built frontend.
        debug: Backend debug flag.
        cors_allowed_origins: CORS origin policy.
        runtime: OpenHands sandbox runtime name.
        install_docker: Whether the container installs a docker client.
        project_root: Directory holding compose file and templates.
        workspace_base: Host workspace directory.
        sandbox_user_id: Numeric user id for the in-container user.
        compose_file_name: Compose file name relative to `project_root`.
        service_name: Primary compose service name.
        probe_host: Host used for the backend readiness probe.
        build_date: Timestamp stamp exported as `DATE`.
    """

    backend_host: str = "0.0.0.0"
    backend_port: int = 3000
    frontend_host: str = "0.0.0.0"
    frontend_port: int = 3001
    serve_frontend: bool = True
    debug: bool = True
    cors_allowed_origins: str = "*"
    runtime: str = "local"
    install_docker: bool = False
    project_root: Path = field(default_factory=Path.cwd)
    workspace_base: Path = field(default_factory=lambda: Path.cwd() / "workspace")
    sandbox_user_id: int = 0
    compose_file_name: str = "docker-compose.websocket.yml"
    service_name: str = "openhands"
    probe_host: str = "localhost"
    build_date: str = ""

    def __post_init__(self) -> None:
        for port_name in ("backend_port", "frontend_port"):
            port_value = getattr(self, port_name)
            if not 1 <= int(port_value) <= 65535:
                raise ValueError(f"{port_name} must be within 1..65535, got {port_value}")
        if self.sandbox_user_id < 0:
            raise ValueError("sandbox_user_id must be >= 0")
        if not self.compose_file_name.strip():
            raise ValueError("compose_file_name must not be blank")

    @property
    def compose_file_path(self) -> Path:
        """Return absolute compose file path."""

        return self.project_root / self.compose_file_name

    def configuration_environment(self) -> dict[str, str]:
        """Render the variables exported to the container runtime.

        Returns:
            dict[str, str]: Environment mapping consumed by compose interpolation.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        return {
            "INSTALL_DOCKER": "1" if self.install_docker else "0",
            "RUNTIME": self.runtime,
            "BACKEND_HOST": self.backend_host,
            "BACKEND_PORT": str(self.backend_port),
            "FRONTEND_HOST": self.frontend_host,
            "FRONTEND_PORT": str(self.frontend_port),
            "SERVE_FRONTEND": _domain_render_flag(self.serve_frontend),
            "DEBUG": _domain_render_flag(self.debug),
            "CORS_ALLOWED_ORIGINS": self.cors_allowed_origins,
            "WORKSPACE_BASE": str(self.workspace_base),
            "SANDBOX_USER_ID": str(self.sandbox_user_id),
            "DATE": self.build_date,
        }


@dataclass(frozen=True)
class ReadinessPolicy:
    """Poll cadence and budgets for readiness waits and supervision.

    Attributes:
        teardown_settle_seconds: Pause after the pre-run teardown.
        container_poll_interval_seconds: Interval between container-state polls.
        container_poll_ceiling_seconds: Total container-state wait budget.
        network_poll_interval_seconds: Interval between backend port probes.
        network_poll_ceiling_seconds: Total backend port wait budget.
        monitor_interval_seconds: Interval between post-ready supervision polls.
        monitor_log_tail_lines: Log lines fetched when the set stops unexpectedly.
    """

    teardown_settle_seconds: float = 2.0
    container_poll_interval_seconds: float = 2.0
    container_poll_ceiling_seconds: float = 60.0
    network_poll_interval_seconds: float = 1.0
    network_poll_ceiling_seconds: float = 30.0
    monitor_interval_seconds: float = 5.0
    monitor_log_tail_lines: int = 50

    def __post_init__(self) -> None:
        if self.teardown_settle_seconds < 0:
            raise ValueError("teardown_settle_seconds must be >= 0")
        if self.container_poll_interval_seconds <= 0 or self.network_poll_interval_seconds <= 0:
            raise ValueError("poll intervals must be > 0")
        if self.container_poll_ceiling_seconds < self.container_poll_interval_seconds:
            raise ValueError("container_poll_ceiling_seconds must be >= container_poll_interval_seconds")
        if self.network_poll_ceiling_seconds < self.network_poll_interval_seconds:
            raise ValueError("network_poll_ceiling_seconds must be >= network_poll_interval_seconds")
        if self.monitor_interval_seconds <= 0:
            raise ValueError("monitor_interval_seconds must be > 0")
        if self.monitor_log_tail_lines < 1:
            raise ValueError("monitor_log_tail_lines must be >= 1")


@dataclass(frozen=True)
class RetryOutcome:
    """Result of one bounded polling loop.

    Attributes:
        satisfied: Whether the predicate held before the budget ran out.
        attempts: Number of predicate evaluations performed.
        consumed_seconds: Monotonic wall-clock time spent in the loop, checks included.
    """

    satisfied: bool
    attempts: int
    consumed_seconds: float


@dataclass(frozen=True)
class ReadinessOutcome:
    """Tagged result of one orchestration run: `Ready` or `TimedOut(phase)`.

    Attributes:
        status: `ready` or `timed_out`.
        phase: Phase that exceeded its budget; None when ready.
        container_poll: Container-state wait result.
        network_poll: Backend port wait result; None when phase A timed out.
        logs: Service-set logs captured on timeout.
        timeline: Structured stage events recorded during the run.
    """

    status: str
    phase: ReadinessPhase | None = None
    container_poll: RetryOutcome | None = None
    network_poll: RetryOutcome | None = None
    logs: str = ""
    timeline: tuple[dict[str, object], ...] = ()

    @classmethod
    def outcome_ready(
        cls,
        container_poll: RetryOutcome,
        network_poll: RetryOutcome,
        timeline: tuple[dict[str, object], ...] = (),
    ) -> ReadinessOutcome:
        """Build a `Ready` outcome."""

        return cls(
            status=READINESS_STATUS_READY,
            container_poll=container_poll,
            network_poll=network_poll,
            timeline=timeline,
        )

    @classmethod
    def outcome_timed_out(
        cls,
        phase: ReadinessPhase,
        container_poll: RetryOutcome,
        network_poll: RetryOutcome | None = None,
        logs: str = "",
        timeline: tuple[dict[str, object], ...] = (),
    ) -> ReadinessOutcome:
        """Build a `TimedOut(phase)` outcome."""

        return cls(
            status=READINESS_STATUS_TIMED_OUT,
            phase=phase,
            container_poll=container_poll,
            network_poll=network_poll,
            logs=logs,
            timeline=timeline,
        )

    def outcome_is_ready(self) -> bool:
        """Return whether both readiness phases succeeded."""

        return self.status == READINESS_STATUS_READY

    def outcome_exit_code(self) -> int:
        """Return process exit code for this outcome: 0 when ready, otherwise 1."""

        return 0 if self.outcome_is_ready() else 1

    def outcome_failed_poll(self) -> RetryOutcome | None:
        """Return the poll result of the phase that timed out, if any."""

        if self.phase is ReadinessPhase.CONTAINER_STATE:
            return self.container_poll
        if self.phase is ReadinessPhase.NETWORK_PROBE:
            return self.network_poll
        return None


@dataclass(frozen=True)
class SupervisionOutcome:
    """Result of post-ready supervision once the service set stops running.

    Attributes:
        polls: Number of running checks that reported the set alive, plus the final one.
        logs: Tail of service-set logs captured after the stop.
    """

    polls: int
    logs: str


@dataclass(frozen=True)
class MaterializationResult:
    """Paths touched by config template materialization.

    Attributes:
        created: Effective config files produced from templates in this run.
        skipped: Effective config files that already existed and were kept.
    """

    created: tuple[Path, ...] = ()
    skipped: tuple[Path, ...] = ()
