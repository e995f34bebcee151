"""Thread-per-connection server and simple blocking clients."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
import threading
import time
from typing import Callable, Optional, Sequence, TextIO

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8888
READ_SIZE = 1024
_POLL_INTERVAL = 0.1


def _serve_client(
    conn: socket.socket, emit: Callable[[str], None], stop_event: threading.Event
) -> None:
    with conn:
        fd = conn.fileno()
        conn.settimeout(_POLL_INTERVAL)
        while not stop_event.is_set():
            try:
                data = conn.recv(READ_SIZE)
            except TimeoutError:
                continue
            except OSError as exc:
                emit(f"[{fd}] read error: {exc}")
                break
            if not data:
                emit(f"[{fd}] disconnected")
                break
            emit(f"[{fd}] {data.decode('utf-8', errors='replace')}")


def serve_threaded(
    host: str = "0.0.0.0",
    port: int = DEFAULT_PORT,
    out: Optional[TextIO] = None,
    stop_event: Optional[threading.Event] = None,
) -> int:
    """Accept clients, reading each on its own thread, until ``stop_event`` is set.

    Everything received is written to ``out``. Returns the number of clients
    accepted.
    """
    stream = out if out is not None else sys.stdout
    stop = stop_event if stop_event is not None else threading.Event()
    lock = threading.Lock()

    def emit(line: str) -> None:
        with lock:
            stream.write(line + "\n")
            stream.flush()

    workers: list[threading.Thread] = []
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind((host, port))
        listener.listen(10)
        listener.settimeout(_POLL_INTERVAL)
        while not stop.is_set():
            try:
                conn, (ip, client_port) = listener.accept()
            except TimeoutError:
                continue
            except OSError as exc:
                logger.warning("accept failed: %s", exc)
                continue
            emit(
                f"new client fd accepted. fd: {conn.fileno()}, ip:{ip}, port:{client_port}"
            )
            worker = threading.Thread(
                target=_serve_client, args=(conn, emit, stop), daemon=True
            )
            worker.start()
            workers.append(worker)
    for worker in workers:
        worker.join()
    return len(workers)


def stream_client(
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
    count: Optional[int] = None,
    interval: float = 1.0,
) -> int:
    """Send numbered greetings every ``interval`` seconds; ``None`` means forever.

    Returns the number of messages sent.
    """
    sent = 0
    tid = threading.get_ident()
    with socket.create_connection((host, port)) as sock:
        while count is None or sent < count:
            sock.sendall(f"tid:{tid}, hello world {sent}\n".encode())
            sent += 1
            if count is None or sent < count:
                time.sleep(interval)
    return sent


def request_client(
    host: str = "127.0.0.1",
    port: int = DEFAULT_PORT,
    count: Optional[int] = None,
    interval: float = 1.0,
) -> list[str]:
    """Send numbered requests and wait for a reply to each.

    Stops after ``count`` requests, or earlier when the server disconnects
    or reading fails. Returns the replies received.
    """
    replies: list[str] = []
    n = 0
    with socket.create_connection((host, port)) as sock:
        while count is None or n < count:
            sock.sendall(f"hi, I am client...{n}\n".encode())
            n += 1
            try:
                data = sock.recv(512)
            except OSError as exc:
                logger.error("read failed: %s", exc)
                break
            if not data:
                print("server disconnect...", flush=True)
                break
            reply = data.decode("utf-8", errors="replace")
            print(f"server say: {reply}", flush=True)
            replies.append(reply)
            if count is None or n < count:
                time.sleep(interval)
    return replies


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Blocking socket server and clients.")
    sub = parser.add_subparsers(dest="command", required=True)
    for name in ("server", "stream", "request"):
        cmd = sub.add_parser(name)
        cmd.add_argument(
            "--host", default="0.0.0.0" if name == "server" else "127.0.0.1"
        )
        cmd.add_argument("--port", type=int, default=DEFAULT_PORT)
        if name != "server":
            cmd.add_argument("--count", type=int, default=None)
            cmd.add_argument("--interval", type=float, default=1.0)
    args = parser.parse_args(argv)

    try:
        if args.command == "server":
            serve_threaded(args.host, args.port)
        elif args.command == "stream":
            stream_client(args.host, args.port, args.count, args.interval)
        else:
            request_client(args.host, args.port, args.count, args.interval)
    except KeyboardInterrupt:
        pass
    except OSError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())