import socket

import pytest

from tinyreactor.buffer import CHEAP_PREPEND, INITIAL_SIZE, Buffer


@pytest.fixture
def pair():
    left, right = socket.socketpair()
    yield left, right
    left.close()
    right.close()


def test_new_buffer_sizes():
    buf = Buffer()
    assert buf.readable_bytes() == 0
    assert buf.writable_bytes() == INITIAL_SIZE
    assert buf.prependable_bytes() == CHEAP_PREPEND
    assert CHEAP_PREPEND == 8
    assert INITIAL_SIZE == 1024


def test_append_and_retrieve_all_round_trip():
    buf = Buffer()
    buf.append(b"hello world")
    assert len(buf) == len(b"hello world")
    assert buf.retrieve_all_as_bytes() == b"hello world"
    assert len(buf) == 0
    assert buf.prependable_bytes() == CHEAP_PREPEND


def test_partial_retrieve_advances_reader():
    buf = Buffer()
    buf.append(b"abcdef")
    buf.retrieve(2)
    assert buf.peek() == b"cdef"
    assert buf.prependable_bytes() == CHEAP_PREPEND + 2
    assert buf.retrieve_as_bytes(3) == b"cde"
    assert buf.peek() == b"f"


def test_retrieve_everything_resets_positions():
    buf = Buffer()
    buf.append(b"abc")
    buf.retrieve(10)
    assert buf.readable_bytes() == 0
    assert buf.prependable_bytes() == CHEAP_PREPEND
    assert buf.writable_bytes() == INITIAL_SIZE


def test_retrieve_as_bytes_too_many_raises():
    buf = Buffer()
    buf.append(b"ab")
    with pytest.raises(ValueError):
        buf.retrieve_as_bytes(3)
    assert buf.peek() == b"ab"


def test_negative_lengths_rejected():
    buf = Buffer()
    with pytest.raises(ValueError):
        buf.retrieve(-1)
    with pytest.raises(ValueError):
        Buffer(-5)


def test_append_grows_when_needed():
    buf = Buffer(4)
    payload = bytes(range(200))
    buf.append(payload)
    assert buf.peek() == payload
    assert buf.writable_bytes() == 0
    buf.append(b"more")
    assert buf.retrieve_all_as_bytes() == payload + b"more"


def test_append_compacts_instead_of_growing():
    buf = Buffer(16)
    total = CHEAP_PREPEND + 16
    buf.append(b"0123456789")
    buf.retrieve(6)
    buf.append(b"abcdefghij")
    assert buf.prependable_bytes() == CHEAP_PREPEND
    assert buf.peek() == b"6789abcdefghij"
    assert buf.prependable_bytes() + buf.readable_bytes() + buf.writable_bytes() == total


def test_read_from_socket(pair):
    left, right = pair
    right.sendall(b"hello")
    buf = Buffer()
    assert buf.read_from(left) == 5
    assert buf.retrieve_all_as_bytes() == b"hello"


def test_read_from_larger_than_writable(pair):
    left, right = pair
    payload = bytes(range(256)) * 4
    right.sendall(payload)
    buf = Buffer(4)
    while len(buf) < len(payload):
        assert buf.read_from(left) > 0
    assert buf.retrieve_all_as_bytes() == payload


def test_read_from_closed_peer_returns_zero(pair):
    left, right = pair
    right.close()
    buf = Buffer()
    assert buf.read_from(left) == 0
    assert len(buf) == 0


def test_write_to_does_not_consume(pair):
    left, right = pair
    buf = Buffer()
    buf.append(b"payload")
    sent = buf.write_to(left)
    assert sent == len(b"payload")
    assert right.recv(100) == b"payload"
    assert buf.peek() == b"payload"
    buf.retrieve(sent)
    assert len(buf) == 0