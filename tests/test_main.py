"""Tests for launcher command surface exit behavior."""

from __future__ import annotations

import signal
from pathlib import Path

import pytest

import launcher.main as main_module
from launcher.adapters import ServiceBringUpError, ServiceTeardownError
from launcher.bootstrap import LauncherComponents
from launcher.config import SettingsLoadError
from launcher.domain import ReadinessPolicy, RuntimeConfiguration
from launcher.jobs import ReadinessOrchestrator, ServiceSetSupervisor


class _RuntimeStub:
    """Container runtime stub used by command-surface scenarios."""

    def __init__(
        self,
        running_states: list[bool] | None = None,
        bring_up_error: ServiceBringUpError | None = None,
        teardown_error: ServiceTeardownError | None = None,
    ):
        self.running_states = list(running_states or [True])
        self.bring_up_error = bring_up_error
        self.teardown_error = teardown_error
        self.status_calls = 0
        self.teardown_calls = 0

    def runtime_label(self) -> str:
        return "docker compose -f docker-compose.websocket.yml"

    def runtime_teardown(self) -> None:
        self.teardown_calls += 1
        if self.teardown_error is not None:
            raise self.teardown_error

    def runtime_bring_up(self) -> None:
        if self.bring_up_error is not None:
            raise self.bring_up_error

    def runtime_is_running(self) -> bool:
        index = min(self.status_calls, len(self.running_states) - 1)
        self.status_calls += 1
        return self.running_states[index]

    def runtime_logs(self, tail: int | None = None) -> str:
        _ = tail
        return "openhands  | log line\n"


class _ProbeStub:
    """Network probe stub returning a fixed state."""

    def __init__(self, is_open: bool = True):
        self.is_open = is_open

    def probe_is_open(self, host: str, port: int) -> bool:
        _ = (host, port)
        return self.is_open


class _ManualClock:
    """Monotonic clock stub advanced by sleeps."""

    def __init__(self) -> None:
        self.current = 0.0

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.current += seconds


class _InterruptingSupervisor:
    """Supervisor stub simulating an operator interrupt."""

    def job_monitor(self):
        raise KeyboardInterrupt


class _TerminatedSupervisor:
    """Supervisor stub delivering SIGTERM to the current process while monitoring."""

    def __init__(self) -> None:
        self.handler_during_monitor = None

    def job_monitor(self):
        self.handler_during_monitor = signal.getsignal(signal.SIGTERM)
        signal.raise_signal(signal.SIGTERM)
        raise AssertionError("SIGTERM did not interrupt monitoring")


def _install_components(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
    runtime: _RuntimeStub,
    probe: _ProbeStub | None = None,
    supervisor=None,
) -> None:
    policy = ReadinessPolicy(teardown_settle_seconds=0)
    clock = _ManualClock()
    components = LauncherComponents(
        config=RuntimeConfiguration(project_root=tmp_path, workspace_base=tmp_path / "workspace"),
        policy=policy,
        container_runtime=runtime,
        orchestrator=ReadinessOrchestrator(
            container_runtime=runtime,
            network_probe=probe or _ProbeStub(),
            policy=policy,
            sleep_function=clock.sleep,
            materialize_config=False,
            clock_function=clock.now,
        ),
        supervisor=supervisor
        or ServiceSetSupervisor(container_runtime=runtime, policy=policy, sleep_function=lambda _seconds: None),
    )
    monkeypatch.setattr(main_module, "bootstrap_create_launcher", lambda: components)


def test_main_down_exits_zero_even_when_teardown_fails(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Return normally from `down` regardless of teardown outcome.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate idempotent teardown command.

    Raises:
        AssertionError: Raised when `down` exits non-zero.
    """

    runtime = _RuntimeStub(teardown_error=ServiceTeardownError("no such project"))
    _install_components(monkeypatch, tmp_path, runtime)

    main_module.main(["down"])

    assert runtime.teardown_calls == 1


def test_main_up_without_monitor_prints_access_urls(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """Print configuration and access URLs and exit 0 once ready.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        capsys: Pytest output capture fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate ready output.

    Raises:
        AssertionError: Raised when output or exit is wrong.
    """

    _install_components(monkeypatch, tmp_path, _RuntimeStub())

    main_module.main(["up", "--no-monitor"])

    output = capsys.readouterr().out
    assert "Backend: 0.0.0.0:3000" in output
    assert "Application: http://localhost:3000" in output
    assert "Backend API: http://localhost:3000/api" in output
    assert "docker compose -f docker-compose.websocket.yml exec openhands /bin/bash" in output
    assert "WebSocket Configuration:" in output
    assert "Socket.IO enabled with CORS support (allowed origins: *)" in output
    assert "Debug mode enabled for troubleshooting" in output


def test_main_up_timeout_exits_one_with_phase_and_logs(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """Exit 1 and report phase, budget, and logs when the backend never opens.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        capsys: Pytest output capture fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate failure report.

    Raises:
        AssertionError: Raised when exit code or report is wrong.
    """

    _install_components(monkeypatch, tmp_path, _RuntimeStub(), probe=_ProbeStub(is_open=False))

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["up", "--no-monitor"])

    output = capsys.readouterr().out
    assert exit_info.value.code == 1
    assert "Backend failed to respond within 30 seconds" in output
    assert "Phase: network_probe" in output
    assert "Polls: 30, elapsed: 30.0s of 30s budget" in output
    assert "openhands  | log line" in output


def test_main_up_bring_up_failure_exits_one(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """Exit 1 and surface logs when bring-up fails."""

    runtime = _RuntimeStub(bring_up_error=ServiceBringUpError("service set bring-up failed: exit status 17", return_code=17))
    _install_components(monkeypatch, tmp_path, runtime)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["up"])

    output = capsys.readouterr().out
    assert exit_info.value.code == 1
    assert "Phase: bring_up" in output
    assert "Exit status: 17" in output
    assert "openhands  | log line" in output


def test_main_up_unexpected_stop_during_monitoring_exits_one(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """Exit 1 when the supervised service set stops after readiness.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        capsys: Pytest output capture fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate supervision failure handling.

    Raises:
        AssertionError: Raised when unexpected stop is not reported.
    """

    runtime = _RuntimeStub(running_states=[True, True, False])
    _install_components(monkeypatch, tmp_path, runtime)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["up"])

    assert exit_info.value.code == 1
    assert "Container stopped unexpectedly" in capsys.readouterr().out
    assert runtime.teardown_calls == 1


def test_main_up_interrupt_tears_down_and_exits_zero(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    """Tear down and return normally when the operator interrupts supervision."""

    runtime = _RuntimeStub()
    _install_components(monkeypatch, tmp_path, runtime, supervisor=_InterruptingSupervisor())

    main_module.main(["up"])

    assert runtime.teardown_calls == 2


def test_main_invalid_configuration_exits_one(monkeypatch: pytest.MonkeyPatch) -> None:
    """Exit 1 when settings validation fails."""

    def _raise_settings_error():
        raise SettingsLoadError("Launcher configuration validation failed")

    monkeypatch.setattr(main_module, "bootstrap_create_launcher", _raise_settings_error)

    with pytest.raises(SystemExit) as exit_info:
        main_module.main(["up"])

    assert exit_info.value.code == 1


def test_main_up_sigterm_tears_down_exits_zero_and_restores_handler(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    tmp_path: Path,
) -> None:
    """Treat SIGTERM during supervision like an interrupt and restore the prior handler.

    Args:
        monkeypatch: Pytest monkeypatch fixture.
        capsys: Pytest output capture fixture.
        tmp_path: Pytest temporary directory fixture.

    Returns:
        None: Assertions validate termination handling.

    Raises:
        AssertionError: Raised when teardown, exit status, or handler restoration is wrong.
    """

    def _previous_handler(signal_number, frame) -> None:
        _ = (signal_number, frame)

    runtime = _RuntimeStub()
    supervisor = _TerminatedSupervisor()
    _install_components(monkeypatch, tmp_path, runtime, supervisor=supervisor)
    original_handler = signal.signal(signal.SIGTERM, _previous_handler)
    try:
        main_module.main(["up"])
        handler_after_run = signal.getsignal(signal.SIGTERM)
    finally:
        signal.signal(signal.SIGTERM, original_handler)

    assert supervisor.handler_during_monitor is main_module.main_raise_keyboard_interrupt
    assert handler_after_run is _previous_handler
    assert runtime.teardown_calls == 2
    assert "Service set stopped." in capsys.readouterr().out


def test_main_raise_keyboard_interrupt_names_signal() -> None:
    """Translate a delivered signal number into `KeyboardInterrupt`."""

    with pytest.raises(KeyboardInterrupt, match=str(int(signal.SIGTERM))):
        main_module.main_raise_keyboard_interrupt(int(signal.SIGTERM), None)
