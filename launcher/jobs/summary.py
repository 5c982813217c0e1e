"""Operator-facing text for configuration, access URLs, and failures."""

from __future__ import annotations

from typing import Final

from launcher.adapters import ServiceBringUpError
from launcher.domain import ReadinessOutcome, ReadinessPhase, ReadinessPolicy, RuntimeConfiguration

BRING_UP_PHASE: Final[str] = "bring_up"


def job_render_configuration_banner(config: RuntimeConfiguration) -> str:
    """Render the resolved configuration shown before bring-up.

    Args:
        config: Resolved runtime configuration.

    Returns:
        str: Multi-line configuration banner.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return "\n".join(
        [
            "Configuration:",
            f"  Backend: {config.backend_host}:{config.backend_port}",
            f"  Frontend: {config.frontend_host}:{config.frontend_port}",
            f"  Runtime: {config.runtime}",
            f"  WebSocket: Enabled with CORS support (origins: {config.cors_allowed_origins})",
            f"  Debug: {'enabled' if config.debug else 'disabled'}",
            f"  Workspace: {config.workspace_base}",
            f"  User ID: {config.sandbox_user_id}",
        ]
    )


def job_render_access_summary(config: RuntimeConfiguration, runtime_label: str) -> str:
    """Render access URLs and operator hints once the service set is ready.

    Args:
        config: Resolved runtime configuration.
        runtime_label: Compose invocation prefix, e.g. `docker compose -f <file>`.

    Returns:
        str: Multi-line access summary.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    application_url = f"http://localhost:{config.backend_port}"
    lines = [
        "OpenHands is ready!",
        "",
        "Access URLs:",
        f"  Application: {application_url}",
        f"  Backend API: {application_url}/api",
    ]
    if not config.serve_frontend:
        lines.append(f"  Frontend: http://localhost:{config.frontend_port}")
    lines.extend(
        [
            "",
            "WebSocket Configuration:",
            f"  - Socket.IO enabled with CORS support (allowed origins: {config.cors_allowed_origins})",
            "  - Real-time communication between frontend and backend",
            f"  - Debug mode {'enabled for troubleshooting' if config.debug else 'disabled'}",
            "",
            "To stop the application:",
            f"  {runtime_label} down",
            "",
            "To view logs:",
            f"  {runtime_label} logs -f",
            "",
            "To access the container:",
            f"  {runtime_label} exec {config.service_name} /bin/bash",
        ]
    )
    return "\n".join(lines)


def job_render_failure_report(outcome: ReadinessOutcome, policy: ReadinessPolicy) -> str:
    """Render the failed phase, consumed budget, and captured logs of a timeout.

    Args:
        outcome: Timed-out readiness outcome.
        policy: Poll cadence used for the run.

    Returns:
        str: Multi-line failure report.

    Raises:
        ValueError: Raised when the outcome is not a timeout.
    """

    if outcome.outcome_is_ready() or outcome.phase is None:
        raise ValueError("failure report requires a timed-out outcome")

    ceiling_seconds = _job_phase_ceiling_seconds(outcome.phase, policy)
    if outcome.phase is ReadinessPhase.CONTAINER_STATE:
        headline = f"OpenHands failed to start within {ceiling_seconds:g} seconds"
    else:
        headline = f"Backend failed to respond within {ceiling_seconds:g} seconds"

    failed_poll = outcome.outcome_failed_poll()
    lines = [headline, f"  Phase: {outcome.phase.value}"]
    if failed_poll is not None:
        lines.append(f"  Polls: {failed_poll.attempts}, elapsed: {failed_poll.consumed_seconds:.1f}s of {ceiling_seconds:g}s budget")
    lines.extend(["Container logs:", outcome.logs.rstrip() or "  (no log output)"])
    return "\n".join(lines)


def job_render_bring_up_failure_report(error: ServiceBringUpError) -> str:
    """Render the bring-up failure with its exit status and captured logs.

    Args:
        error: Bring-up error raised by the orchestrator.

    Returns:
        str: Multi-line failure report naming the `bring_up` phase.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    lines = ["OpenHands failed to build or start", f"  Phase: {BRING_UP_PHASE}", f"  Error: {error}"]
    if error.return_code is not None:
        lines.append(f"  Exit status: {error.return_code}")
    lines.extend(["Container logs:", error.logs.rstrip() or "  (no log output)"])
    return "\n".join(lines)


def _job_phase_ceiling_seconds(phase: ReadinessPhase, policy: ReadinessPolicy) -> float:
    if phase is ReadinessPhase.CONTAINER_STATE:
        return policy.container_poll_ceiling_seconds
    return policy.network_poll_ceiling_seconds
