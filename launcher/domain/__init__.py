"""Domain models used across launcher layer boundaries."""

from .models import (
    READINESS_STATUS_READY,
    READINESS_STATUS_TIMED_OUT,
    MaterializationResult,
    ReadinessOutcome,
    ReadinessPhase,
    ReadinessPolicy,
    RetryOutcome,
    RuntimeConfiguration,
    SupervisionOutcome,
)
from .retry import domain_retry_max_attempts, domain_retry_until
from .timeline import domain_build_stage_event

__all__ = [
    "READINESS_STATUS_READY",
    "READINESS_STATUS_TIMED_OUT",
    "MaterializationResult",
    "ReadinessOutcome",
    "ReadinessPhase",
    "ReadinessPolicy",
    "RetryOutcome",
    "RuntimeConfiguration",
    "SupervisionOutcome",
    "domain_build_stage_event",
    "domain_retry_max_attempts",
    "domain_retry_until",
]
