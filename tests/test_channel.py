import socket

import pytest

from tinyreactor.channel import Channel
from tinyreactor.poller import Events


class RecordingLoop:
    def __init__(self):
        self.updated = []
        self.removed = []

    def update_channel(self, channel):
        self.updated.append(channel.events)

    def remove_channel(self, channel):
        self.removed.append(channel)


@pytest.fixture
def loop():
    return RecordingLoop()


def make_recording_channel(loop, fd=5):
    ch = Channel(loop, fd)
    calls = []
    ch.read_callback = lambda: calls.append("read")
    ch.write_callback = lambda: calls.append("write")
    ch.close_callback = lambda: calls.append("close")
    ch.error_callback = lambda: calls.append("error")
    return ch, calls


def test_fileno_from_int(loop):
    assert Channel(loop, 7).fileno() == 7


def test_fileno_from_socket(loop):
    a, b = socket.socketpair()
    try:
        assert Channel(loop, a).fileno() == a.fileno()
    finally:
        a.close()
        b.close()


def test_new_channel_has_no_events(loop):
    ch = Channel(loop, 3)
    assert ch.is_none_event()
    assert not ch.is_reading()
    assert not ch.is_writing()


def test_enable_reading_updates_loop(loop):
    ch = Channel(loop, 3)
    ch.enable_reading()
    assert ch.is_reading()
    assert not ch.is_writing()
    assert loop.updated == [Events.IN | Events.PRI]


def test_enable_and_disable_writing(loop):
    ch = Channel(loop, 3)
    ch.enable_reading()
    ch.enable_writing()
    assert ch.is_writing()
    assert ch.is_reading()
    ch.disable_writing()
    assert not ch.is_writing()
    assert ch.is_reading()
    assert len(loop.updated) == 3


def test_disable_reading_keeps_writing(loop):
    ch = Channel(loop, 3)
    ch.enable_reading()
    ch.enable_writing()
    ch.disable_reading()
    assert not ch.is_reading()
    assert ch.is_writing()


def test_disable_all(loop):
    ch = Channel(loop, 3)
    ch.enable_reading()
    ch.enable_writing()
    ch.disable_all()
    assert ch.is_none_event()
    assert loop.updated[-1] == Events.NONE


@pytest.mark.parametrize(
    "revents, expected",
    [
        (Events.IN, ["read"]),
        (Events.PRI, ["read"]),
        (Events.RDHUP, ["read"]),
        (Events.OUT, ["write"]),
        (Events.HUP, ["close"]),
        (Events.HUP | Events.IN, ["read"]),
        (Events.ERR, ["error"]),
        (Events.IN | Events.OUT, ["read", "write"]),
        (Events.NONE, []),
    ],
)
def test_handle_event_dispatch(loop, revents, expected):
    ch, calls = make_recording_channel(loop)
    ch.revents = revents
    ch.handle_event()
    assert calls == expected


def test_handle_event_without_callbacks_does_nothing(loop):
    ch = Channel(loop, 3)
    ch.revents = Events.IN | Events.OUT | Events.ERR | Events.HUP
    ch.handle_event()
    assert ch.revents == Events.IN | Events.OUT | Events.ERR | Events.HUP


class Owner:
    pass


def test_tied_channel_dispatches_while_owner_alive(loop):
    ch, calls = make_recording_channel(loop)
    owner = Owner()
    ch.tie(owner)
    ch.revents = Events.IN
    ch.handle_event()
    assert calls == ["read"]


def test_tied_channel_ignores_events_after_owner_gone(loop):
    ch, calls = make_recording_channel(loop)
    owner = Owner()
    ch.tie(owner)
    del owner
    ch.revents = Events.IN
    ch.handle_event()
    assert calls == []


def test_remove_asks_loop(loop):
    ch = Channel(loop, 3)
    ch.remove()
    assert loop.removed == [ch]