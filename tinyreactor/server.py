"""TCP server that owns an acceptor and all live connections."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .acceptor import Acceptor
from .connection import (
    Connection,
    ConnectionCallback,
    MessageCallback,
    WriteCompleteCallback,
)
from .inet_addr import InetAddr
from .sockets import Socket, get_local_addr

if TYPE_CHECKING:
    from .event_loop import EventLoop

logger = logging.getLogger(__name__)


class Server:
    """Accepts connections on ``listen_addr`` and keeps them keyed by fd.

    Set ``message_callback``, ``connection_callback`` and
    ``write_complete_callback`` before :meth:`start`; every new connection
    receives them.
    """

    def __init__(self, listen_addr: InetAddr, loop: EventLoop) -> None:
        self.loop = loop
        self.ip_port = listen_addr.to_ip_port()
        self.message_callback: Optional[MessageCallback] = None
        self.connection_callback: Optional[ConnectionCallback] = None
        self.write_complete_callback: Optional[WriteCompleteCallback] = None
        self._connections: dict[int, Connection] = {}
        self._acceptor = Acceptor(listen_addr, loop)
        self._acceptor.new_connection_callback = self._new_connection

    def start(self) -> None:
        """Begin accepting connections."""
        self._acceptor.listen()

    def address(self) -> InetAddr:
        """The address actually listened on."""
        return self._acceptor.listen_address()

    def connection_count(self) -> int:
        return len(self._connections)

    def close(self) -> None:
        """Destroy every connection and stop listening."""
        connections = list(self._connections.values())
        self._connections.clear()
        for conn in connections:
            conn.connect_destroyed()
        self._acceptor.close()

    def _new_connection(self, sock: Socket, peer_addr: InetAddr) -> None:
        sock.set_nonblock()
        local_addr = get_local_addr(sock.sock)
        conn = Connection(self.loop, sock, local_addr, peer_addr)
        self._connections[conn.fileno()] = conn
        logger.debug("new connection %r", conn)
        conn.message_callback = self.message_callback
        conn.close_callback = self._remove_connection
        conn.connection_callback = self.connection_callback
        conn.write_complete_callback = self.write_complete_callback
        conn.connect_established()

    def _remove_connection(self, conn: Connection) -> None:
        removed = self._connections.pop(conn.fileno(), None)
        if removed is not conn:
            raise RuntimeError(f"{conn!r} is not owned by this server")
        conn.connect_destroyed()