"""Job layer package for readiness orchestration and supervision."""

from .interfaces import ReadinessOrchestratorPort, ServiceSetSupervisorPort
from .readiness_orchestrator import ReadinessOrchestrator, job_container_is_running
from .summary import (
    job_render_access_summary,
    job_render_bring_up_failure_report,
    job_render_configuration_banner,
    job_render_failure_report,
)
from .supervision import ServiceSetLease, ServiceSetSupervisor

__all__ = [
	"ReadinessOrchestrator",
	"ReadinessOrchestratorPort",
	"ServiceSetLease",
	"ServiceSetSupervisor",
	"ServiceSetSupervisorPort",
	"job_container_is_running",
	"job_render_access_summary",
	"job_render_bring_up_failure_report",
	"job_render_configuration_banner",
	"job_render_failure_report",
]
