"""Bounded fixed-interval polling shared by readiness and supervision waits."""

from __future__ import annotations

import math
import time
from typing import Callable, Final

from .models import RetryOutcome

_FLOAT_TOLERANCE: Final[float] = 1e-9


def domain_retry_max_attempts(interval_seconds: float, ceiling_seconds: float) -> int:
    """Return how many evaluations fit in the budget at the given interval.

    Args:
        interval_seconds: Delay between evaluations.
        ceiling_seconds: Total wait budget.

    Returns:
        int: `floor(ceiling / interval)`, tolerant to float representation error.

    Raises:
        ValueError: Raised when interval or ceiling are invalid.
    """

    if interval_seconds <= 0:
        raise ValueError("interval_seconds must be > 0")
    if ceiling_seconds < interval_seconds:
        raise ValueError("ceiling_seconds must be >= interval_seconds")
    return max(1, math.floor(ceiling_seconds / interval_seconds + _FLOAT_TOLERANCE))


def domain_retry_until(
    predicate: Callable[[], bool],
    interval_seconds: float,
    ceiling_seconds: float,
    sleep_function: Callable[[float], None] | None = None,
    clock_function: Callable[[], float] | None = None,
) -> RetryOutcome:
    """Evaluate a predicate at a fixed interval until it holds or the budget runs out.

    Two bounds apply: at most `ceiling_seconds / interval_seconds`
    evaluations, and a wall-clock deadline of `ceiling_seconds` measured
    with a monotonic clock. The deadline also counts time spent inside the
    predicate, so slow checks end the wait early instead of overrunning it.

    Args:
        predicate: Zero-argument readiness check.
        interval_seconds: Delay between evaluations.
        ceiling_seconds: Total wait budget.
        sleep_function: Optional sleep override, defaults to `time.sleep`.
        clock_function: Optional monotonic clock override, defaults to `time.monotonic`.

    Returns:
        RetryOutcome: Satisfied flag, evaluation count, and elapsed seconds.

    Raises:
        ValueError: Raised when interval or ceiling are invalid.
    """

    max_attempts = domain_retry_max_attempts(interval_seconds=interval_seconds, ceiling_seconds=ceiling_seconds)
    sleep = sleep_function or time.sleep
    clock = clock_function or time.monotonic
    started_at = clock()

    def _elapsed() -> float:
        return clock() - started_at

    def _deadline_reached() -> bool:
        return _elapsed() + _FLOAT_TOLERANCE >= ceiling_seconds

    attempts = 0
    while attempts < max_attempts:
        attempts += 1
        if predicate():
            return RetryOutcome(satisfied=True, attempts=attempts, consumed_seconds=_elapsed())
        if _deadline_reached():
            break
        sleep(interval_seconds)
        if _deadline_reached():
            break

    return RetryOutcome(satisfied=False, attempts=attempts, consumed_seconds=_elapsed())
