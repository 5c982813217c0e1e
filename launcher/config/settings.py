"""Typed launcher settings with dotenv support and startup validation."""

import os
from datetime import datetime
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from launcher.domain import ReadinessPolicy, RuntimeConfiguration


class SettingsLoadError(RuntimeError):
    """Raised when launcher settings cannot be loaded or validated."""


def _settings_default_user_id() -> int:
    """Return the numeric user id of the invoking process.

    Returns:
        int: Current process uid, or `0` on platforms without `os.getuid`.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    getuid = getattr(os, "getuid", None)
    if getuid is None:
        return 0
    return int(getuid())


class LauncherSettings(BaseSettings):
    """Launcher settings for the OpenHands WebSocket service set.

    Environment variable names map directly to field names in uppercase.
    Example: `backend_port` reads from `BACKEND_PORT`.

    Attributes:
        backend_host: Bind address for the backend server inside the container.
        backend_port: Published backend port.
        frontend_host: Bind address for the frontend dev server.
        frontend_port: Published frontend port.
        serve_frontend: Whether the backend serves the built frontend.
        debug: Backend debug flag.
        cors_allowed_origins: CORS origin policy passed to the backend.
        runtime: OpenHands sandbox runtime name.
        install_docker: Whether the container installs a docker client.
        project_root: Directory holding the compose file and config templates.
        workspace_base: Host workspace directory mounted into the container; relative paths resolve against `project_root`.
        sandbox_user_id: Numeric user id the container runs the app as.
        compose_file_name: Compose file name relative to `project_root`.
        service_name: Primary compose service used for `exec` hints.
        probe_host: Host used for the backend TCP readiness probe.
        teardown_settle_seconds: Pause after pre-run teardown.
        container_poll_interval_seconds: Container-state poll interval.
        container_poll_ceiling_seconds: Container-state wait budget.
        network_poll_interval_seconds: Backend port probe interval.
        network_poll_ceiling_seconds: Backend port probe wait budget.
        monitor_interval_seconds: Post-ready supervision poll interval.
        monitor_log_tail_lines: Log lines surfaced when the set stops unexpectedly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    backend_host: str = Field(default="0.0.0.0", min_length=1)
    backend_port: int = Field(default=3000, ge=1, le=65535)
    frontend_host: str = Field(default="0.0.0.0", min_length=1)
    frontend_port: int = Field(default=3001, ge=1, le=65535)
    serve_frontend: bool = Field(default=True)
    debug: bool = Field(default=True)
    cors_allowed_origins: str = Field(default="*", min_length=1)
    runtime: str = Field(default="local", min_length=1)
    install_docker: bool = Field(default=False)
    project_root: Path = Field(default_factory=Path.cwd)
    workspace_base: Path | None = Field(default=None)
    sandbox_user_id: int = Field(default_factory=_settings_default_user_id, ge=0)
    compose_file_name: str = Field(default="docker-compose.websocket.yml", min_length=1)
    service_name: str = Field(default="openhands", min_length=1)
    probe_host: str = Field(default="localhost", min_length=1)
    teardown_settle_seconds: float = Field(default=2.0, ge=0)
    container_poll_interval_seconds: float = Field(default=2.0, gt=0)
    container_poll_ceiling_seconds: float = Field(default=60.0, gt=0)
    network_poll_interval_seconds: float = Field(default=1.0, gt=0)
    network_poll_ceiling_seconds: float = Field(default=30.0, gt=0)
    monitor_interval_seconds: float = Field(default=5.0, gt=0)
    monitor_log_tail_lines: int = Field(default=50, ge=1)

    @field_validator(
        "backend_host",
        "frontend_host",
        "cors_allowed_origins",
        "runtime",
        "compose_file_name",
        "service_name",
        "probe_host",
    )
    @classmethod
    def _validate_non_empty_string(cls, value: str) -> str:
        stripped_value = value.strip()
        if not stripped_value:
            raise ValueError("value must not be blank")
        return stripped_value

    @field_validator("container_poll_ceiling_seconds")
    @classmethod
    def _validate_container_ceiling_bounds(cls, value: float, info) -> float:
        interval_seconds = float(info.data.get("container_poll_interval_seconds", 2.0))
        if value < interval_seconds:
            raise ValueError("container_poll_ceiling_seconds must be greater than or equal to the poll interval")
        return value

    @field_validator("network_poll_ceiling_seconds")
    @classmethod
    def _validate_network_ceiling_bounds(cls, value: float, info) -> float:
        interval_seconds = float(info.data.get("network_poll_interval_seconds", 1.0))
        if value < interval_seconds:
            raise ValueError("network_poll_ceiling_seconds must be greater than or equal to the poll interval")
        return value

    def settings_build_runtime_configuration(self, now: datetime | None = None) -> RuntimeConfiguration:
        """Freeze validated settings into the immutable runtime configuration.

        Args:
            now: Optional clock override used for the build `DATE` stamp.

        Returns:
            RuntimeConfiguration: Configuration passed to every launcher stage.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        project_root = Path(self.project_root).expanduser().resolve()
        workspace_base = Path(self.workspace_base or "workspace").expanduser()
        if not workspace_base.is_absolute():
            workspace_base = (project_root / workspace_base).resolve()
        build_date = (now or datetime.now()).strftime("%Y%m%d%H%M%S")
        return RuntimeConfiguration(
            backend_host=self.backend_host,
            backend_port=self.backend_port,
            frontend_host=self.frontend_host,
            frontend_port=self.frontend_port,
            serve_frontend=self.serve_frontend,
            debug=self.debug,
            cors_allowed_origins=self.cors_allowed_origins,
            runtime=self.runtime,
            install_docker=self.install_docker,
            project_root=project_root,
            workspace_base=workspace_base,
            sandbox_user_id=self.sandbox_user_id,
            compose_file_name=self.compose_file_name,
            service_name=self.service_name,
            probe_host=self.probe_host,
            build_date=build_date,
        )

    def settings_build_readiness_policy(self) -> ReadinessPolicy:
        """Build poll cadence policy from validated settings.

        Returns:
            ReadinessPolicy: Intervals and ceilings for both readiness phases.

        Raises:
            ValueError: Raised when policy bounds are inconsistent.
        """

        return ReadinessPolicy(
            teardown_settle_seconds=self.teardown_settle_seconds,
            container_poll_interval_seconds=self.container_poll_interval_seconds,
            container_poll_ceiling_seconds=self.container_poll_ceiling_seconds,
            network_poll_interval_seconds=self.network_poll_interval_seconds,
            network_poll_ceiling_seconds=self.network_poll_ceiling_seconds,
            monitor_interval_seconds=self.monitor_interval_seconds,
            monitor_log_tail_lines=self.monitor_log_tail_lines,
        )


def config_load_settings() -> LauncherSettings:
    """Load and validate launcher settings from environment and dotenv.

    Returns:
        LauncherSettings: Validated launcher settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return LauncherSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Launcher configuration validation failed. Update .env or environment variables. Details: {error}"
        ) from error


def config_load_runtime_configuration(settings: LauncherSettings | None = None) -> RuntimeConfiguration:
    """Load settings once and freeze them into a runtime configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        RuntimeConfiguration: Immutable configuration for one launcher invocation.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    return (settings or config_load_settings()).settings_build_runtime_configuration()
