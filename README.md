# tinyreactor

A small reactor-style toolkit for TCP servers. It uses only the standard
library.

One `EventLoop` waits on registered sockets. Each socket is wrapped in a
`Channel`, which passes read, write, close and error events to callbacks.
Accepted sockets become `Connection` objects with buffered input and
output. Slow work can be handed to a `ThreadPool`.

## Modules

- `tinyreactor.buffer.Buffer` is a growable byte buffer. It keeps an 8-byte
  reserved prefix and separate read and write positions.
  - `append`, `peek`, `retrieve`, `retrieve_all`, `retrieve_as_bytes` and
    `retrieve_all_as_bytes` add, inspect and consume data.
  - `read_from(sock)` fills the buffer from a socket.
  - `write_to(sock)` sends the readable bytes without consuming them.
- `tinyreactor.inet_addr.InetAddr` is a frozen IPv4 address and port.
  - The default is `0.0.0.0`, port 0.
  - It can be built from a `(host, port)` tuple with `from_sockaddr`.
  - It prints as `ip:port` (`to_ip_port`).
- `tinyreactor.sockets` provides two things:
  - `Socket` owns a stream socket: `bind`, `listen`, `accept`,
    `set_nonblock`, `close`. Used as a context manager, it closes the
    socket on exit.
  - Helper functions: `set_nonblock`, `shutdown_write`,
    `get_socket_error`, `get_local_addr` and `get_peer_addr`.
- `tinyreactor.poller` provides `Poller`, which is built on `selectors`,
  and the `Events` flags. `Events` uses epoll-style values: `IN`, `PRI`,
  `OUT`, `ERR`, `HUP`, `RDHUP`.
- `tinyreactor.channel.Channel` holds one file object, the events it wants
  and the callbacks run for reported events.
  - `tie(owner)` makes the channel skip dispatching once the owner has been
    garbage-collected.
- `tinyreactor.event_loop.EventLoop` runs until `quit()` is called.
  - It polls with a timeout of `poll_timeout` seconds, 0.01 by default.
- `tinyreactor.connection` provides `Connection` and `ConnectionState`.
  - `send()` writes directly when it can and queues the remainder until
    the socket is writable.
  - `shutdown()` closes the writing half. `force_close()` closes at once.
- `tinyreactor.acceptor.Acceptor` is a listening socket with
  `SO_REUSEADDR`. It hands each accepted socket to
  `new_connection_callback`.
- `tinyreactor.server.Server` owns an acceptor and every live connection.
  - Set `message_callback`, `connection_callback` and
    `write_complete_callback` before `start()`.
  - `address()` returns the real listening address.
  - `connection_count()` returns the number of live connections.
  - `close()` tears everything down.
- `tinyreactor.thread_pool.ThreadPool` is a fixed set of worker threads
  fed from a queue.
  - Before `start()`, `add()` runs the task in the calling thread.
  - After `stop()`, added tasks are dropped.

## Installing

```
pip install .
```

Tests:

```
pip install ".[test]"
pytest
```

## Ready-made servers

Echo server. It prints each message it receives and sends it back. It
listens on `0.0.0.0:8888` by default; use `--host` and `--port` to change
that.

```
tinyreactor-echo
```

Compute server. It reads an integer `n` from the start of each message and
replies with the sum of all integers from 0 up to `n - 1`. The sum is
computed on a thread pool. The defaults are port 10000 and 4 workers;
`--host`, `--port` and `--threads` change them.

```
tinyreactor-compute
```

Blocking, thread-per-connection tools, as three subcommands:

- `server` prints everything received from each client.
- `stream` sends numbered greetings.
- `request` sends numbered requests and prints each reply.

The clients accept `--count` and `--interval`.

```
tinyreactor-basic server
tinyreactor-basic stream --count 3
tinyreactor-basic request --count 3
```

## Using the buffer

```python
from tinyreactor.buffer import Buffer

buf = Buffer()
buf.append(b"hello world")
assert buf.retrieve_as_bytes(5) == b"hello"
assert buf.retrieve_all_as_bytes() == b" world"
assert buf.readable_bytes() == 0
```

## Writing a server

```python
from tinyreactor.event_loop import EventLoop
from tinyreactor.inet_addr import InetAddr
from tinyreactor.server import Server

def on_message(conn, buf):
    conn.send(buf.retrieve_all_as_bytes().upper())

loop = EventLoop()
server = Server(InetAddr(0, "127.0.0.1"), loop)
server.message_callback = on_message
server.start()
print("listening on", server.address())
try:
    loop.loop()
finally:
    server.close()
    loop.close()
```

## Using the compute helper

```python
from tinyreactor.compute_server import sum_below

assert sum_below(5) == 10
```

## What it does not do

- Addresses are IPv4 only.
- There is one event loop per thread, and no way to wake it other than its
  poll timeout.
- There are no timers, no TLS and no reactor-driven outgoing connections.
  The clients in `tinyreactor.basic` use plain blocking sockets.