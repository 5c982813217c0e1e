"""Main module entrypoint for the OpenHands WebSocket launcher.

This module validates startup configuration, brings the service set to
readiness, and supervises it until it stops or the operator interrupts.
"""

from __future__ import annotations

import argparse
import logging
import signal
from typing import Sequence

from launcher.adapters import ServiceBringUpError
from launcher.bootstrap import LauncherComponents, bootstrap_create_launcher
from launcher.config import SettingsLoadError, TemplateMissingError
from launcher.jobs import (
    ServiceSetLease,
    job_render_access_summary,
    job_render_bring_up_failure_report,
    job_render_configuration_banner,
    job_render_failure_report,
)

logger = logging.getLogger("launcher")


def main(argv: Sequence[str] | None = None) -> None:
    """Run selected launcher command with validated startup configuration.

    Args:
        argv: Optional argument list, defaults to `sys.argv[1:]`.

    Returns:
        None: Returns normally for exit status 0.

    Raises:
        SystemExit: Raised with status 1 on configuration, bring-up, readiness, or supervision failure.
    """

    argument_parser = argparse.ArgumentParser(description="OpenHands WebSocket service set launcher")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="up",
        choices=("up", "down"),
        help="Launcher command: `up` brings the service set to readiness and supervises it, "
        "`down` tears the service set down",
        type=str,
    )
    argument_parser.add_argument(
        "--no-monitor",
        dest="no_monitor",
        action="store_true",
        help="Exit after readiness instead of supervising the service set",
    )
    argument_parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parsed_arguments = argument_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if parsed_arguments.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        components = bootstrap_create_launcher()
    except SettingsLoadError as error:
        logger.error("%s", error)
        raise SystemExit(1) from error

    if parsed_arguments.command == "down":
        if not components.orchestrator.job_teardown():
            logger.warning("Teardown reported a failure; nothing else to clean up")
        return

    previous_sigterm_handler = signal.signal(signal.SIGTERM, main_raise_keyboard_interrupt)
    try:
        main_run_up(components=components, monitor=not parsed_arguments.no_monitor)
    finally:
        signal.signal(signal.SIGTERM, previous_sigterm_handler)


def main_run_up(components: LauncherComponents, monitor: bool = True) -> None:
    """Bring the service set to readiness, print the summary, and optionally supervise.

    Args:
        components: Wired launcher components.
        monitor: Whether to supervise the service set after readiness.

    Returns:
        None: Returns normally for exit status 0, including operator interrupts.

    Raises:
        SystemExit: Raised with status 1 on bring-up failure, timeout, or unexpected stop.
    """

    print(job_render_configuration_banner(components.config))

    try:
        with ServiceSetLease(container_runtime=components.container_runtime) as lease:
            outcome = components.orchestrator.job_run(components.config)
            if not outcome.outcome_is_ready():
                print(job_render_failure_report(outcome=outcome, policy=components.policy))
                raise SystemExit(outcome.outcome_exit_code())

            print(job_render_access_summary(components.config, components.container_runtime.runtime_label()))
            if not monitor:
                return

            print("Monitoring container status (Ctrl+C to stop)...")
            supervision = components.supervisor.job_monitor()
            print("Container stopped unexpectedly")
            print("Container logs:")
            print(supervision.logs.rstrip())
            raise SystemExit(1)
    except ServiceBringUpError as error:
        logger.error("%s", error)
        print(job_render_bring_up_failure_report(error))
        raise SystemExit(1) from error
    except TemplateMissingError as error:
        logger.error("%s", error)
        raise SystemExit(1) from error

    if lease.interrupted:
        print("Service set stopped.")


def main_raise_keyboard_interrupt(signal_number: int, frame) -> None:
    """Translate SIGTERM into `KeyboardInterrupt` so the lease tears the set down."""

    _ = frame
    raise KeyboardInterrupt(f"received signal {signal_number}")


if __name__ == "__main__":
    main()
