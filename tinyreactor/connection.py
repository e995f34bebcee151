"""One established TCP connection with its input and output buffers."""

from __future__ import annotations

import enum
import logging
import socket
from typing import TYPE_CHECKING, Callable, Optional, Union

from .buffer import Buffer
from .channel import Channel
from .inet_addr import InetAddr
from .sockets import Socket, get_socket_error, shutdown_write

if TYPE_CHECKING:
    from .event_loop import EventLoop

logger = logging.getLogger(__name__)

ConnectionCallback = Callable[["Connection"], None]
CloseCallback = Callable[["Connection"], None]
WriteCompleteCallback = Callable[["Connection"], None]
MessageCallback = Callable[["Connection", Buffer], None]


class ConnectionState(enum.Enum):
    DISCONNECTED = enum.auto()
    CONNECTING = enum.auto()
    CONNECTED = enum.auto()
    DISCONNECTING = enum.auto()


class Connection:
    """A connected socket driven by an event loop.

    Incoming data is collected in ``input_buffer`` and handed to
    ``message_callback``. Outgoing data is written directly when possible;
    whatever the kernel does not take is queued in ``output_buffer`` and
    flushed when the socket becomes writable.
    """

    def __init__(
        self,
        loop: EventLoop,
        sock: Union[Socket, socket.socket],
        local_addr: InetAddr,
        peer_addr: InetAddr,
    ) -> None:
        self.loop = loop
        self.socket = sock if isinstance(sock, Socket) else Socket(sock)
        self.local_address = local_addr
        self.peer_address = peer_addr
        self.state = ConnectionState.CONNECTING
        self.input_buffer = Buffer()
        self.output_buffer = Buffer()

        self.message_callback: Optional[MessageCallback] = None
        self.close_callback: Optional[CloseCallback] = None
        self.connection_callback: Optional[ConnectionCallback] = None
        self.write_complete_callback: Optional[WriteCompleteCallback] = None

        self.channel = Channel(loop, self.socket.sock)
        self.channel.read_callback = self._handle_read
        self.channel.write_callback = self._handle_write
        self.channel.close_callback = self._handle_close
        self.channel.error_callback = self._handle_error

    def __repr__(self) -> str:
        return (
            f"Connection({self.peer_address} -> {self.local_address}, "
            f"state={self.state.name})"
        )

    def fileno(self) -> int:
        return self.socket.fileno()

    def connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def disconnected(self) -> bool:
        return self.state is ConnectionState.DISCONNECTED

    def send(self, data: Union[bytes, bytearray, memoryview, str, Buffer]) -> None:
        """Send ``data``; a :class:`Buffer` is drained, a string UTF-8 encoded.

        Nothing is sent once the connection is disconnected.
        """
        if isinstance(data, Buffer):
            payload = data.peek()
            data.retrieve_all()
        elif isinstance(data, str):
            payload = data.encode("utf-8")
        else:
            payload = bytes(data)
        self._send_bytes(payload)

    def _send_bytes(self, data: bytes) -> None:
        if self.state is ConnectionState.DISCONNECTED:
            return
        fault = False
        nwrote = 0
        remaining = len(data)
        if not self.channel.is_writing() and self.output_buffer.readable_bytes() == 0:
            try:
                nwrote = self.socket.sock.send(data)
            except BlockingIOError:
                nwrote = 0
            except (BrokenPipeError, ConnectionResetError) as exc:
                logger.warning("send on fd %d failed: %s", self.fileno(), exc)
                fault = True
            except OSError as exc:
                logger.warning("send on fd %d failed: %s", self.fileno(), exc)
            else:
                remaining = len(data) - nwrote
                if remaining == 0 and self.write_complete_callback:
                    self.write_complete_callback(self)
        if not fault and remaining > 0:
            self.output_buffer.append(memoryview(data)[nwrote:])
            if not self.channel.is_writing():
                self.channel.enable_writing()

    def shutdown(self) -> None:
        """Close the writing half once nothing is waiting to be written."""
        if self.state is ConnectionState.CONNECTED:
            self.state = ConnectionState.DISCONNECTING
            if not self.channel.is_writing():
                try:
                    shutdown_write(self.socket.sock)
                except OSError as exc:
                    logger.warning("shutdown of fd %d failed: %s", self.fileno(), exc)

    def force_close(self) -> None:
        """Close the connection at once, dropping anything unsent."""
        if self.state in (ConnectionState.CONNECTED, ConnectionState.DISCONNECTING):
            self.state = ConnectionState.DISCONNECTING
            self._handle_close()

    def connect_established(self) -> None:
        """Mark the connection as up and start watching it for input."""
        if self.state is not ConnectionState.CONNECTING:
            raise RuntimeError(f"cannot establish a connection in state {self.state.name}")
        self.state = ConnectionState.CONNECTED
        self.channel.tie(self)
        self.channel.enable_reading()
        if self.connection_callback:
            self.connection_callback(self)

    def connect_destroyed(self) -> None:
        """Detach from the loop and close the socket."""
        if self.state is ConnectionState.CONNECTED:
            self.state = ConnectionState.DISCONNECTED
            self.channel.disable_all()
            if self.connection_callback:
                self.connection_callback(self)
        if self.channel.in_poller:
            self.channel.remove()
        self.socket.close()

    def _handle_read(self) -> None:
        try:
            n = self.input_buffer.read_from(self.socket.sock)
        except BlockingIOError:
            return
        except OSError as exc:
            logger.error("read on fd %d failed: %s", self.fileno(), exc)
            return
        if n > 0:
            if self.message_callback:
                self.message_callback(self, self.input_buffer)
            else:
                self.input_buffer.retrieve_all()
        else:
            self._handle_close()

    def _handle_write(self) -> None:
        if not self.channel.is_writing():
            logger.info("connection fd %d is down, no more writing", self.fileno())
            return
        try:
            n = self.output_buffer.write_to(self.socket.sock)
        except BlockingIOError:
            return
        except OSError as exc:
            logger.error("write on fd %d failed: %s", self.fileno(), exc)
            return
        if n > 0:
            self.output_buffer.retrieve(n)
            if self.output_buffer.readable_bytes() == 0:
                self.channel.disable_writing()
            else:
                logger.debug("fd %d has more data to write", self.fileno())
        else:
            logger.error("write on fd %d wrote nothing", self.fileno())

    def _handle_close(self) -> None:
        if self.state not in (ConnectionState.CONNECTED, ConnectionState.DISCONNECTING):
            raise RuntimeError(f"cannot close a connection in state {self.state.name}")
        self.state = ConnectionState.DISCONNECTED
        self.channel.disable_all()
        if self.close_callback:
            self.close_callback(self)

    def _handle_error(self) -> None:
        err = get_socket_error(self.socket.sock)
        logger.error("connection fd %d error %d", self.fileno(), err)