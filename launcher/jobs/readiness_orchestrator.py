"""Job-layer readiness orchestrator with a two-phase bounded wait."""

from __future__ import annotations

import logging
import time
from typing import Callable

from launcher.adapters import (
    ContainerRuntimePort,
    NetworkProbePort,
    ServiceBringUpError,
    ServiceStatusError,
    ServiceTeardownError,
)
from launcher.config import config_ensure_workspace, config_materialize_templates
from launcher.domain import (
    ReadinessOutcome,
    ReadinessPhase,
    ReadinessPolicy,
    RuntimeConfiguration,
    domain_build_stage_event,
    domain_retry_until,
)

from .interfaces import ReadinessOrchestratorPort

logger = logging.getLogger(__name__)


def job_container_is_running(container_runtime: ContainerRuntimePort) -> bool:
    """Return container running state, treating status query failures as not running.

    Args:
        container_runtime: Container runtime adapter.

    Returns:
        bool: True when the service set reports running.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    try:
        return bool(container_runtime.runtime_is_running())
    except ServiceStatusError as error:
        logger.debug("Service set status unavailable: %s", error)
        return False


class ReadinessOrchestrator(ReadinessOrchestratorPort):
    """Concrete orchestrator bringing a backend service set to readiness.

    Phase A polls the container state, phase B probes the backend TCP port.
    A container reported running does not imply a bound listening socket.
    """

    def __init__(
        self,
        container_runtime: ContainerRuntimePort,
        network_probe: NetworkProbePort,
        policy: ReadinessPolicy | None = None,
        sleep_function: Callable[[float], None] | None = None,
        materialize_config: bool = True,
        clock_function: Callable[[], float] | None = None,
    ):
        """Initialize readiness orchestrator dependencies.

        Args:
            container_runtime: Adapter managing the service set.
            network_probe: Adapter probing backend TCP reachability.
            policy: Poll cadence and budgets, defaults to `ReadinessPolicy()`.
            sleep_function: Optional sleep override, defaults to `time.sleep`.
            materialize_config: Whether `job_run` produces effective config files first.
            clock_function: Optional monotonic clock override, defaults to `time.monotonic`.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when dependencies are missing.
        """

        if container_runtime is None:
            raise ValueError("container_runtime must not be None")
        if network_probe is None:
            raise ValueError("network_probe must not be None")

        self._container_runtime = container_runtime
        self._network_probe = network_probe
        self._policy = policy or ReadinessPolicy()
        self._sleep = sleep_function or time.sleep
        self._materialize_config = materialize_config
        self._clock = clock_function or time.monotonic

    def job_run(self, config: RuntimeConfiguration) -> ReadinessOutcome:
        """Bring the service set up and wait for container and network readiness.

        Args:
            config: Resolved runtime configuration.

        Returns:
            ReadinessOutcome: `Ready`, or `TimedOut(phase)` with captured logs.

        Raises:
            ServiceBringUpError: Raised when bring-up fails; carries captured logs.
            TemplateMissingError: Raised when a config template is missing.
        """

        timeline: list[dict[str, object]] = []

        if self._materialize_config:
            materialization = config_materialize_templates(config)
            config_ensure_workspace(config)
            timeline.append(
                domain_build_stage_event(
                    stage="materialize",
                    status="completed",
                    details={
                        "created": [str(path) for path in materialization.created],
                        "skipped": [str(path) for path in materialization.skipped],
                    },
                )
            )

        self._job_cleanup_previous(timeline=timeline)
        self._job_bring_up(timeline=timeline)

        logger.info("Waiting for %s to report running", self._container_runtime.runtime_label())
        timeline.append(domain_build_stage_event(stage=ReadinessPhase.CONTAINER_STATE.value, status="started"))
        container_poll = domain_retry_until(
            predicate=lambda: job_container_is_running(self._container_runtime),
            interval_seconds=self._policy.container_poll_interval_seconds,
            ceiling_seconds=self._policy.container_poll_ceiling_seconds,
            sleep_function=self._sleep,
            clock_function=self._clock,
        )
        if not container_poll.satisfied:
            timeline.append(
                domain_build_stage_event(
                    stage=ReadinessPhase.CONTAINER_STATE.value,
                    status="timed_out",
                    details={"attempts": container_poll.attempts, "consumed_seconds": container_poll.consumed_seconds},
                )
            )
            logger.error("Service set failed to start within %g seconds", self._policy.container_poll_ceiling_seconds)
            return ReadinessOutcome.outcome_timed_out(
                phase=ReadinessPhase.CONTAINER_STATE,
                container_poll=container_poll,
                logs=self._container_runtime.runtime_logs(),
                timeline=tuple(timeline),
            )
        timeline.append(
            domain_build_stage_event(
                stage=ReadinessPhase.CONTAINER_STATE.value,
                status="completed",
                details={"attempts": container_poll.attempts},
            )
        )

        logger.info("Waiting for backend at %s:%d", config.probe_host, config.backend_port)
        timeline.append(domain_build_stage_event(stage=ReadinessPhase.NETWORK_PROBE.value, status="started"))
        network_poll = domain_retry_until(
            predicate=lambda: self._network_probe.probe_is_open(config.probe_host, config.backend_port),
            interval_seconds=self._policy.network_poll_interval_seconds,
            ceiling_seconds=self._policy.network_poll_ceiling_seconds,
            sleep_function=self._sleep,
            clock_function=self._clock,
        )
        if not network_poll.satisfied:
            timeline.append(
                domain_build_stage_event(
                    stage=ReadinessPhase.NETWORK_PROBE.value,
                    status="timed_out",
                    details={"attempts": network_poll.attempts, "consumed_seconds": network_poll.consumed_seconds},
                )
            )
            logger.error("Backend failed to respond within %g seconds", self._policy.network_poll_ceiling_seconds)
            return ReadinessOutcome.outcome_timed_out(
                phase=ReadinessPhase.NETWORK_PROBE,
                container_poll=container_poll,
                network_poll=network_poll,
                logs=self._container_runtime.runtime_logs(),
                timeline=tuple(timeline),
            )
        timeline.append(
            domain_build_stage_event(
                stage=ReadinessPhase.NETWORK_PROBE.value,
                status="completed",
                details={"attempts": network_poll.attempts},
            )
        )

        logger.info("Service set is ready")
        return ReadinessOutcome.outcome_ready(
            container_poll=container_poll,
            network_poll=network_poll,
            timeline=tuple(timeline),
        )

    def job_teardown(self) -> bool:
        """Tear down the service set, logging instead of raising on failure.

        Returns:
            bool: True when teardown succeeded.

        Raises:
            RuntimeError: This method does not raise runtime errors.
        """

        try:
            self._container_runtime.runtime_teardown()
        except ServiceTeardownError as error:
            logger.warning("Teardown of %s failed: %s", self._container_runtime.runtime_label(), error)
            return False
        return True

    def _job_cleanup_previous(self, timeline: list[dict[str, object]]) -> None:
        """Remove any previous instance of the service set before bring-up.

        Args:
            timeline: Mutable diagnostics timeline list.

        Returns:
            None: Appends to timeline as side effect.

        Raises:
            RuntimeError: Teardown failures are logged and swallowed.
        """

        logger.info("Cleaning up existing containers")
        timeline.append(domain_build_stage_event(stage="teardown", status="started"))
        teardown_succeeded = self.job_teardown()
        timeline.append(domain_build_stage_event(stage="teardown", status="completed" if teardown_succeeded else "failed"))
        if self._policy.teardown_settle_seconds > 0:
            self._sleep(self._policy.teardown_settle_seconds)

    def _job_bring_up(self, timeline: list[dict[str, object]]) -> None:
        """Request build-and-start of the service set.

        Args:
            timeline: Mutable diagnostics timeline list.

        Returns:
            None: Appends to timeline as side effect.

        Raises:
            ServiceBringUpError: Raised with captured logs when bring-up fails.
        """

        logger.info("Building and starting %s", self._container_runtime.runtime_label())
        timeline.append(domain_build_stage_event(stage="bring_up", status="started"))
        try:
            self._container_runtime.runtime_bring_up()
        except ServiceBringUpError as error:
            timeline.append(domain_build_stage_event(stage="bring_up", status="failed", details={"error": str(error)}))
            raise ServiceBringUpError(
                str(error),
                command=error.command,
                return_code=error.return_code,
                logs=self._container_runtime.runtime_logs(),
            ) from error
        timeline.append(domain_build_stage_event(stage="bring_up", status="completed"))
