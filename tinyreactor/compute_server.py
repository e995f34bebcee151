"""Server that answers a number ``n`` with the sum of ``0 .. n-1``."""

from __future__ import annotations

import argparse
import logging
import re
import threading
from typing import Optional, Sequence

from .buffer import Buffer
from .connection import Connection
from .event_loop import EventLoop
from .inet_addr import InetAddr
from .server import Server
from .thread_pool import ThreadPool

logger = logging.getLogger(__name__)

DEFAULT_PORT = 10000
DEFAULT_THREADS = 4

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def sum_below(count: int) -> int:
    """Return the sum of all integers ``i`` with ``0 <= i < count``."""
    if count <= 0:
        return 0
    return count * (count - 1) // 2


def _parse_count(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"no integer at the start of {text!r}")
    return int(match.group(1))


class ComputeServer:
    """Reads a count from each message and replies with :func:`sum_below`.

    The summing runs on a thread pool so the event loop stays responsive.
    """

    def __init__(
        self, loop: EventLoop, listen_addr: InetAddr, num_threads: int = DEFAULT_THREADS
    ) -> None:
        self.server = Server(listen_addr, loop)
        self.thread_pool = ThreadPool()
        self.num_threads = num_threads
        self.server.connection_callback = self._on_connection
        self.server.message_callback = self._on_message

    def start(self) -> None:
        self.thread_pool.start(self.num_threads)
        self.server.start()

    def stop(self) -> None:
        self.thread_pool.stop()
        self.server.close()

    def _on_connection(self, conn: Connection) -> None:
        state = "UP" if conn.connected() else "DOWN"
        print(
            f"{conn.peer_address.to_ip_port()}->{conn.local_address.to_ip_port()}"
            f" is {state}",
            flush=True,
        )

    def _on_message(self, conn: Connection, buf: Buffer) -> None:
        text = buf.retrieve_all_as_bytes().decode("utf-8", errors="replace")
        try:
            count = _parse_count(text)
        except ValueError as exc:
            logger.warning("ignoring message from %s: %s", conn.peer_address, exc)
            return

        def task() -> None:
            total = sum_below(count)
            logger.debug("computed in thread %s", threading.current_thread().name)
            conn.send(str(total))

        self.thread_pool.add(task)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the summing server.")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--threads", type=int, default=DEFAULT_THREADS)
    args = parser.parse_args(argv)

    loop = EventLoop()
    server = ComputeServer(loop, InetAddr(args.port, args.host), args.threads)
    server.start()
    try:
        loop.loop()
    except KeyboardInterrupt:
        pass
    finally:
        server.stop()
        loop.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())