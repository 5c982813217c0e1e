"""Post-ready supervision and interrupt-scoped teardown of a service set."""

from __future__ import annotations

import logging
import time
from types import TracebackType
from typing import Callable

from launcher.adapters import ContainerRuntimePort, ServiceTeardownError
from launcher.domain import ReadinessPolicy, SupervisionOutcome

from .interfaces import ServiceSetSupervisorPort
from .readiness_orchestrator import job_container_is_running

logger = logging.getLogger(__name__)


class ServiceSetSupervisor(ServiceSetSupervisorPort):
    """Passive monitor detecting unexpected termination of a ready service set."""

    def __init__(
        self,
        container_runtime: ContainerRuntimePort,
        policy: ReadinessPolicy | None = None,
        sleep_function: Callable[[float], None] | None = None,
    ):
        """Initialize supervisor dependencies.

        Args:
            container_runtime: Adapter managing the service set.
            policy: Poll cadence, defaults to `ReadinessPolicy()`.
            sleep_function: Optional sleep override, defaults to `time.sleep`.

        Raises:
            ValueError: Raised when container_runtime is None.
        """

        if container_runtime is None:
            raise ValueError("container_runtime must not be None")
        self._container_runtime = container_runtime
        self._policy = policy or ReadinessPolicy()
        self._sleep = sleep_function or time.sleep

    def job_monitor(self) -> SupervisionOutcome:
        """Poll the container-state signal until the service set stops running.

        Returns:
            SupervisionOutcome: Poll count and tail of logs captured after the stop.

        Raises:
            KeyboardInterrupt: Propagated when the operator interrupts supervision.
        """

        logger.info("Monitoring container status every %g seconds", self._policy.monitor_interval_seconds)
        polls = 0
        while True:
            polls += 1
            if not job_container_is_running(self._container_runtime):
                break
            self._sleep(self._policy.monitor_interval_seconds)

        logger.error("Service set stopped unexpectedly after %d polls", polls)
        return SupervisionOutcome(
            polls=polls,
            logs=self._container_runtime.runtime_logs(tail=self._policy.monitor_log_tail_lines),
        )


class ServiceSetLease:
    """Context manager guaranteeing teardown when the operator interrupts the launcher.

    Timeouts and other errors propagate untouched and leave the service set
    running for inspection; only `KeyboardInterrupt` triggers teardown and is
    then suppressed, with `interrupted` set for the caller.
    """

    def __init__(self, container_runtime: ContainerRuntimePort):
        if container_runtime is None:
            raise ValueError("container_runtime must not be None")
        self._container_runtime = container_runtime
        self.interrupted = False

    def __enter__(self) -> ServiceSetLease:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool:
        if exc_type is None or not issubclass(exc_type, KeyboardInterrupt):
            return False

        self.interrupted = True
        logger.info("Shutting down %s", self._container_runtime.runtime_label())
        try:
            self._container_runtime.runtime_teardown()
        except ServiceTeardownError as error:
            logger.warning("Teardown during shutdown failed: %s", error)
        return True
