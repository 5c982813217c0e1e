"""TCP network probe adapter for backend port readiness."""

from __future__ import annotations

import socket

from .interfaces import NetworkProbePort


class TcpNetworkProbe(NetworkProbePort):
    """Single-attempt TCP connect probe, equivalent to `nc -z host port`."""

    def __init__(self, connect_timeout_seconds: float = 1.0):
        """Initialize TCP probe.

        Args:
            connect_timeout_seconds: Timeout for one connection attempt.

        Raises:
            ValueError: Raised when timeout is not positive.
        """

        if connect_timeout_seconds <= 0:
            raise ValueError("connect_timeout_seconds must be > 0")
        self._connect_timeout_seconds = connect_timeout_seconds

    def probe_is_open(self, host: str, port: int) -> bool:
        """Return whether host:port accepts a TCP connection.

        Args:
            host: Target host.
            port: Target TCP port.

        Returns:
            bool: True when the connection succeeded, False on any socket error.

        Raises:
            ValueError: Raised when host is blank or port is out of range.
        """

        normalized_host = host.strip()
        if not normalized_host:
            raise ValueError("host must not be blank")
        if not 1 <= port <= 65535:
            raise ValueError("port must be within 1..65535")

        try:
            with socket.create_connection((normalized_host, port), timeout=self._connect_timeout_seconds):
                return True
        except OSError:
            return False
