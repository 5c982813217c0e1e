"""Stage event builder for orchestration diagnostics timelines."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


def domain_build_stage_event(
    stage: str,
    status: str,
    details: dict[str, Any] | None = None,
) -> dict[str, object]:
    """Build one structured launcher stage event.

    Args:
        stage: Stage name, e.g. `teardown`, `bring_up`, `container_state`.
        status: Stage status marker (`started`, `completed`, `failed`, `timed_out`).
        details: Optional structured details such as poll counts.

    Returns:
        dict[str, object]: Timeline event with a UTC timestamp.

    Raises:
        ValueError: Raised when stage or status are blank.
    """

    if not stage.strip():
        raise ValueError("stage must not be blank")
    if not status.strip():
        raise ValueError("status must not be blank")

    stage_event: dict[str, object] = {
        "stage": stage.strip(),
        "status": status.strip(),
        "at_utc": datetime.now(timezone.utc).isoformat(),
    }
    if details:
        stage_event["details"] = dict(details)
    return stage_event
