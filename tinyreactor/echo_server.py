"""Echo server built on the reactor: every received message is sent back."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from .buffer import Buffer
from .connection import Connection
from .event_loop import EventLoop
from .inet_addr import InetAddr
from .server import Server

DEFAULT_PORT = 8888
DEFAULT_HOST = "0.0.0.0"


def on_message(conn: Connection, buf: Buffer) -> None:
    """Drain ``buf``, report what arrived and send it straight back."""
    msg = buf.retrieve_all_as_bytes()
    text = msg.decode("utf-8", errors="replace")
    print(f"onMessage() {len(msg)} bytes received:{text}", flush=True)
    conn.send(msg)


def build_server(
    loop: EventLoop, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST
) -> Server:
    """Create an echo server on ``host:port`` and start listening."""
    server = Server(InetAddr(port, host), loop)
    server.message_callback = on_message
    server.start()
    return server


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a TCP echo server.")
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    args = parser.parse_args(argv)

    loop = EventLoop()
    server = build_server(loop, args.port, args.host)
    try:
        loop.loop()
    except KeyboardInterrupt:
        pass
    finally:
        server.close()
        loop.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())