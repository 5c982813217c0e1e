"""Launcher bootstrap wiring for startup validation and dependency assembly."""

from __future__ import annotations

from dataclasses import dataclass

from launcher.adapters import DockerComposeRuntime, TcpNetworkProbe
from launcher.config import LauncherSettings, config_load_runtime_configuration, config_load_settings
from launcher.domain import ReadinessPolicy, RuntimeConfiguration
from launcher.jobs import ReadinessOrchestrator, ServiceSetSupervisor


@dataclass(frozen=True)
class LauncherComponents:
    """Fully wired launcher dependencies for one invocation.

    Attributes:
        config: Immutable runtime configuration.
        policy: Poll cadence and budgets.
        container_runtime: Service-set runtime adapter.
        orchestrator: Readiness orchestrator.
        supervisor: Post-ready supervisor.
    """

    config: RuntimeConfiguration
    policy: ReadinessPolicy
    container_runtime: DockerComposeRuntime
    orchestrator: ReadinessOrchestrator
    supervisor: ServiceSetSupervisor


def bootstrap_create_launcher(settings: LauncherSettings | None = None) -> LauncherComponents:
    """Assemble launcher components after validating startup configuration.

    Args:
        settings: Optional pre-loaded settings; loaded from environment when omitted.

    Returns:
        LauncherComponents: Wired configuration, adapters, and jobs.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    config = config_load_runtime_configuration(resolved_settings)
    policy = resolved_settings.settings_build_readiness_policy()
    container_runtime = DockerComposeRuntime(config=config)
    network_probe = TcpNetworkProbe()
    return LauncherComponents(
        config=config,
        policy=policy,
        container_runtime=container_runtime,
        orchestrator=ReadinessOrchestrator(
            container_runtime=container_runtime,
            network_probe=network_probe,
            policy=policy,
        ),
        supervisor=ServiceSetSupervisor(container_runtime=container_runtime, policy=policy),
    )
