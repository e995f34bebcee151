"""Listening socket that hands each accepted connection to a callback."""

from __future__ import annotations

import logging
import socket
from typing import TYPE_CHECKING, Callable, Optional

from .channel import Channel
from .inet_addr import InetAddr
from .sockets import Socket

if TYPE_CHECKING:
    from .event_loop import EventLoop

logger = logging.getLogger(__name__)

NewConnectionCallback = Callable[[Socket, InetAddr], None]


class Acceptor:
    """Binds to ``listen_addr`` and accepts connections inside ``loop``.

    Each accepted socket is passed to ``new_connection_callback`` together
    with the peer address; without a callback the socket is closed at once.
    """

    def __init__(self, listen_addr: InetAddr, loop: EventLoop) -> None:
        self.loop = loop
        self.new_connection_callback: Optional[NewConnectionCallback] = None
        self.listening = False
        self._socket = Socket()
        try:
            self._socket.sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._socket.bind(listen_addr)
            self._socket.set_nonblock()
        except OSError:
            self._socket.close()
            raise
        self._channel = Channel(loop, self._socket.sock)
        self._channel.read_callback = self._handle_read

    def listen(self) -> None:
        """Start listening and watching for incoming connections."""
        if self.listening:
            return
        self._socket.listen()
        self.listening = True
        self._channel.enable_reading()

    def listen_address(self) -> InetAddr:
        """The address the socket is bound to, with the real port."""
        return InetAddr.from_sockaddr(self._socket.sock.getsockname())

    def close(self) -> None:
        """Stop accepting and close the listening socket."""
        if self._channel.in_poller:
            self._channel.disable_all()
            self._channel.remove()
        self.listening = False
        self._socket.close()

    def _handle_read(self) -> None:
        try:
            conn, peer = self._socket.accept()
        except BlockingIOError:
            return
        if self.new_connection_callback:
            self.new_connection_callback(conn, peer)
        else:
            logger.info("no handler for connection from %s, closing it", peer)
            conn.close()