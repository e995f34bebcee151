"""Growable byte buffer with separate read and write positions."""

from __future__ import annotations

import socket

CHEAP_PREPEND = 8
INITIAL_SIZE = 1024
_EXTRA_READ = 65535


class Buffer:
    """Byte buffer with a small reserved prefix area.

    Readable data lies between the reader and writer positions. Writing past
    the end either compacts the readable data to the front or grows the
    underlying storage.
    """

    def __init__(self, initial_size: int = INITIAL_SIZE) -> None:
        if initial_size < 0:
            raise ValueError("initial_size must not be negative")
        self._buffer = bytearray(CHEAP_PREPEND + initial_size)
        self._reader = CHEAP_PREPEND
        self._writer = CHEAP_PREPEND

    def __len__(self) -> int:
        return self.readable_bytes()

    def __repr__(self) -> str:
        return (
            f"Buffer(readable={self.readable_bytes()}, "
            f"writable={self.writable_bytes()}, "
            f"prependable={self.prependable_bytes()})"
        )

    def readable_bytes(self) -> int:
        """Number of bytes waiting to be read."""
        return self._writer - self._reader

    def writable_bytes(self) -> int:
        """Number of bytes that fit without reallocating or compacting."""
        return len(self._buffer) - self._writer

    def prependable_bytes(self) -> int:
        """Number of bytes in front of the readable region."""
        return self._reader

    def peek(self) -> bytes:
        """Return the readable bytes without consuming them."""
        return bytes(self._buffer[self._reader:self._writer])

    def retrieve(self, length: int) -> None:
        """Consume ``length`` bytes; consuming everything resets the buffer."""
        if length < 0:
            raise ValueError("length must not be negative")
        if length < self.readable_bytes():
            self._reader += length
        else:
            self.retrieve_all()

    def retrieve_all(self) -> None:
        """Discard all readable bytes."""
        self._reader = CHEAP_PREPEND
        self._writer = CHEAP_PREPEND

    def retrieve_as_bytes(self, length: int) -> bytes:
        """Consume and return ``length`` bytes."""
        if length < 0 or length > self.readable_bytes():
            raise ValueError(
                f"cannot retrieve {length} bytes, only {self.readable_bytes()} readable"
            )
        result = bytes(self._buffer[self._reader:self._reader + length])
        self.retrieve(length)
        return result

    def retrieve_all_as_bytes(self) -> bytes:
        """Consume and return every readable byte."""
        return self.retrieve_as_bytes(self.readable_bytes())

    def append(self, data: bytes | bytearray | memoryview) -> None:
        """Append ``data`` after the readable bytes."""
        length = len(data)
        if self.writable_bytes() < length:
            self._make_space(length)
        self._buffer[self._writer:self._writer + length] = data
        self._writer += length

    def read_from(self, sock: socket.socket) -> int:
        """Receive from ``sock`` into the buffer.

        Returns the number of bytes read; 0 means the peer closed the stream.
        Socket errors propagate as ``OSError``.
        """
        writable = self.writable_bytes()
        limit = writable + _EXTRA_READ if writable < _EXTRA_READ else writable
        data = sock.recv(limit)
        if data:
            self.append(data)
        return len(data)

    def write_to(self, sock: socket.socket) -> int:
        """Send readable bytes to ``sock`` and return how many were sent.

        The bytes are not consumed; call :meth:`retrieve` with the result.
        """
        return sock.send(self._buffer[self._reader:self._writer])

    def _make_space(self, length: int) -> None:
        if self.writable_bytes() + self.prependable_bytes() < length + CHEAP_PREPEND:
            self._buffer.extend(bytes(self._writer + length - len(self._buffer)))
        else:
            readable = self.readable_bytes()
            self._buffer[CHEAP_PREPEND:CHEAP_PREPEND + readable] = self._buffer[
                self._reader:self._writer
            ]
            self._reader = CHEAP_PREPEND
            self._writer = CHEAP_PREPEND + readable