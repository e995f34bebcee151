"""I/O readiness poller that reports which channels have events pending."""

from __future__ import annotations

import enum
import selectors
import time
from typing import Any, Protocol


class Events(enum.IntFlag):
    """Readiness flags, numbered as the Linux epoll interface numbers them."""

    NONE = 0
    IN = 0x001
    PRI = 0x002
    OUT = 0x004
    ERR = 0x008
    HUP = 0x010
    RDHUP = 0x2000


READ_EVENTS = Events.IN | Events.PRI | Events.RDHUP
DEFAULT_POLL_TIMEOUT = 0.01


class Pollable(Protocol):
    """What the poller needs from a channel."""

    events: Events
    revents: Events
    in_poller: bool

    def fileno(self) -> int: ...


def _to_selector_mask(events: Events) -> int:
    mask = 0
    if events & READ_EVENTS:
        mask |= selectors.EVENT_READ
    if events & Events.OUT:
        mask |= selectors.EVENT_WRITE
    return mask


def _from_selector_mask(mask: int) -> Events:
    events = Events.NONE
    if mask & selectors.EVENT_READ:
        events |= Events.IN
    if mask & selectors.EVENT_WRITE:
        events |= Events.OUT
    return events


class Poller:
    """Keeps track of channels and waits until some of them are ready."""

    def __init__(self) -> None:
        self._selector = selectors.DefaultSelector()
        self._fds: dict[Any, int] = {}
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("poller is closed")

    def _is_registered(self, fd: int) -> bool:
        return fd in self._selector.get_map()

    def update_channel(self, channel: Pollable) -> None:
        """Add ``channel`` or change the events it is watched for.

        A channel with no events stays known to the poller but is never
        reported until its events are set again.
        """
        self._check_open()
        fd = self._fds.get(channel)
        if fd is None:
            fd = channel.fileno()
            if fd < 0:
                raise ValueError("channel has no open file descriptor")
        mask = _to_selector_mask(Events(channel.events))
        registered = self._is_registered(fd)
        if mask == 0:
            if registered:
                self._selector.unregister(fd)
        elif registered:
            self._selector.modify(fd, mask, channel)
        else:
            self._selector.register(fd, mask, channel)
        self._fds[channel] = fd
        channel.in_poller = True

    def remove_channel(self, channel: Pollable) -> None:
        """Stop watching ``channel``; raises ``ValueError`` if it is unknown."""
        self._check_open()
        fd = self._fds.pop(channel, None)
        if fd is None:
            raise ValueError("channel is not registered with this poller")
        if self._is_registered(fd):
            self._selector.unregister(fd)
        channel.in_poller = False

    def poll(self, timeout: float | None = DEFAULT_POLL_TIMEOUT) -> list[Pollable]:
        """Wait up to ``timeout`` seconds and return the ready channels.

        Each returned channel has its ``revents`` set to what occurred.
        """
        self._check_open()
        if not self._selector.get_map():
            if timeout:
                time.sleep(timeout)
            return []
        active = []
        for key, mask in self._selector.select(timeout):
            channel = key.data
            channel.revents = _from_selector_mask(mask)
            active.append(channel)
        return active

    def close(self) -> None:
        """Release the underlying selector."""
        if not self._closed:
            self._closed = True
            self._fds.clear()
            self._selector.close()