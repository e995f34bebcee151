"""TCP socket wrapper and socket helper functions."""

from __future__ import annotations

import logging
import socket

from .inet_addr import InetAddr

logger = logging.getLogger(__name__)

DEFAULT_BACKLOG = 128


class Socket:
    """Owns an IPv4 stream socket and closes it when done."""

    def __init__(self, sock: socket.socket | None = None) -> None:
        self.sock = sock if sock is not None else socket.socket(
            socket.AF_INET, socket.SOCK_STREAM
        )

    def fileno(self) -> int:
        return self.sock.fileno()

    def bind(self, addr: InetAddr) -> None:
        self.sock.bind(addr.to_sockaddr())

    def listen(self, backlog: int = DEFAULT_BACKLOG) -> None:
        self.sock.listen(backlog)

    def accept(self) -> tuple[Socket, InetAddr]:
        """Accept one connection and return its socket and peer address."""
        conn, sockaddr = self.sock.accept()
        peer = InetAddr.from_sockaddr(sockaddr)
        logger.debug(
            "new client fd %d ip:%s port:%d connected",
            conn.fileno(),
            peer.to_ip(),
            peer.to_port(),
        )
        return Socket(conn), peer

    def set_nonblock(self) -> None:
        set_nonblock(self.sock)

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> Socket:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Socket(fd={self.fileno()})"


def set_nonblock(sock: socket.socket) -> None:
    """Put ``sock`` in non-blocking mode."""
    sock.setblocking(False)


def shutdown_write(sock: socket.socket) -> None:
    """Close the writing half of ``sock``; raises ``OSError`` on failure."""
    sock.shutdown(socket.SHUT_WR)


def get_socket_error(sock: socket.socket) -> int:
    """Return the pending error code of ``sock`` (0 when there is none)."""
    try:
        return sock.getsockopt(socket.SOL_SOCKET, socket.SO_ERROR)
    except OSError as exc:
        return exc.errno or 0


def get_local_addr(sock: socket.socket) -> InetAddr:
    """Return the local address of ``sock``, or the zero address on failure."""
    try:
        return InetAddr.from_sockaddr(sock.getsockname())
    except OSError as exc:
        logger.warning("getsockname failed: %s", exc)
        return InetAddr()


def get_peer_addr(sock: socket.socket) -> InetAddr:
    """Return the peer address of ``sock``, or the zero address on failure."""
    try:
        return InetAddr.from_sockaddr(sock.getpeername())
    except OSError as exc:
        logger.warning("getpeername failed: %s", exc)
        return InetAddr()