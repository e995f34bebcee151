"""IPv4 socket address value type."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InetAddr:
    """An IPv4 address and port; the default is the wildcard address, port 0."""

    port: int = 0
    ip: str = "0.0.0.0"

    def __post_init__(self) -> None:
        if not isinstance(self.port, int) or not 0 <= self.port <= 0xFFFF:
            raise ValueError(f"invalid port: {self.port!r}")
        if self.ip is None:
            object.__setattr__(self, "ip", "0.0.0.0")
        normalised = str(ipaddress.IPv4Address(self.ip))
        object.__setattr__(self, "ip", normalised)

    @classmethod
    def from_sockaddr(cls, sockaddr: tuple[Any, ...]) -> InetAddr:
        """Build from a ``(host, port)`` tuple as returned by the socket module."""
        host, port = sockaddr[0], sockaddr[1]
        return cls(port, host)

    def to_sockaddr(self) -> tuple[str, int]:
        """Return a ``(host, port)`` tuple usable with ``bind`` and ``connect``."""
        return (self.ip, self.port)

    def to_ip(self) -> str:
        return self.ip

    def to_port(self) -> int:
        return self.port

    def to_ip_port(self) -> str:
        """Return ``"ip:port"``."""
        return f"{self.ip}:{self.port}"

    def __str__(self) -> str:
        return self.to_ip_port()