"""Tests for post-ready supervision and interrupt-scoped teardown."""

from __future__ import annotations

import pytest

from launcher.adapters import ServiceTeardownError
from launcher.domain import ReadinessPolicy
from launcher.jobs import ServiceSetLease, ServiceSetSupervisor


class _RuntimeStub:
    """Container runtime stub for supervision scenarios."""

    def __init__(self, running_states: list[bool] | None = None, teardown_error: Exception | None = None):
        self.running_states = list(running_states or [False])
        self.teardown_error = teardown_error
        self.status_calls = 0
        self.teardown_calls = 0
        self.log_tails: list[int | None] = []

    def runtime_label(self) -> str:
        return "docker compose -f docker-compose.websocket.yml"

    def runtime_teardown(self) -> None:
        self.teardown_calls += 1
        if self.teardown_error is not None:
            raise self.teardown_error

    def runtime_is_running(self) -> bool:
        index = min(self.status_calls, len(self.running_states) - 1)
        self.status_calls += 1
        return self.running_states[index]

    def runtime_logs(self, tail: int | None = None) -> str:
        self.log_tails.append(tail)
        return "openhands  | Killed\n"


def test_jobs_supervision_returns_when_service_set_stops() -> None:
    """Poll every monitor interval until stopped, then fetch the log tail.

    Returns:
        None: Assertions validate supervision loop.

    Raises:
        AssertionError: Raised when cadence or diagnostics are wrong.
    """

    runtime = _RuntimeStub(running_states=[True, True, False])
    sleep_calls: list[float] = []

    outcome = ServiceSetSupervisor(
        container_runtime=runtime,
        policy=ReadinessPolicy(),
        sleep_function=sleep_calls.append,
    ).job_monitor()

    assert outcome.polls == 3
    assert sleep_calls == [5.0, 5.0]
    assert runtime.log_tails == [50]
    assert outcome.logs == "openhands  | Killed\n"


def test_jobs_lease_tears_down_on_interrupt_and_suppresses_it() -> None:
    """Tear down synchronously when the operator interrupts.

    Returns:
        None: Assertions validate release-on-interrupt.

    Raises:
        AssertionError: Raised when teardown is skipped or the interrupt escapes.
    """

    runtime = _RuntimeStub()

    with ServiceSetLease(container_runtime=runtime) as lease:
        raise KeyboardInterrupt

    assert lease.interrupted
    assert runtime.teardown_calls == 1


def test_jobs_lease_leaves_service_set_running_on_other_errors() -> None:
    """Propagate non-interrupt errors without tearing the service set down."""

    runtime = _RuntimeStub()

    with pytest.raises(SystemExit):
        with ServiceSetLease(container_runtime=runtime):
            raise SystemExit(1)

    assert runtime.teardown_calls == 0


def test_jobs_lease_swallows_teardown_failure_during_shutdown() -> None:
    """Log and ignore teardown failures raised while shutting down."""

    runtime = _RuntimeStub(teardown_error=ServiceTeardownError("daemon down"))

    with ServiceSetLease(container_runtime=runtime) as lease:
        raise KeyboardInterrupt

    assert lease.interrupted
    assert runtime.teardown_calls == 1
