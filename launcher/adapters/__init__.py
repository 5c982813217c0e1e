"""Adapter layer package for container runtime and network probe boundaries."""

from .compose_runtime import DockerComposeRuntime
from .interfaces import ContainerRuntimePort, NetworkProbePort
from .network_probe import TcpNetworkProbe
from .runtime_errors import (
	ContainerRuntimeError,
	ServiceBringUpError,
	ServiceStatusError,
	ServiceTeardownError,
)

__all__ = [
	"ContainerRuntimeError",
	"ContainerRuntimePort",
	"DockerComposeRuntime",
	"NetworkProbePort",
	"ServiceBringUpError",
	"ServiceStatusError",
	"ServiceTeardownError",
	"TcpNetworkProbe",
]
