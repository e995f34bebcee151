"""A watched file descriptor together with the callbacks its events trigger."""

from __future__ import annotations

import weakref
from typing import TYPE_CHECKING, Any, Callable, Optional

from .poller import Events

if TYPE_CHECKING:
    from .event_loop import EventLoop

EventCallback = Callable[[], None]

_READING = Events.IN | Events.PRI
_READ_TRIGGERS = Events.IN | Events.PRI | Events.RDHUP


class Channel:
    """Binds one file object to an event loop and dispatches its events.

    ``events`` holds what the channel wants to be told about; ``revents``
    holds what the poller last reported.
    """

    def __init__(self, loop: EventLoop, fileobj: Any) -> None:
        self.loop = loop
        self.fileobj = fileobj
        self.events = Events.NONE
        self.revents = Events.NONE
        self.in_poller = False
        self.read_callback: Optional[EventCallback] = None
        self.write_callback: Optional[EventCallback] = None
        self.close_callback: Optional[EventCallback] = None
        self.error_callback: Optional[EventCallback] = None
        self._tie: Optional[weakref.ref] = None

    def fileno(self) -> int:
        if isinstance(self.fileobj, int):
            return self.fileobj
        return self.fileobj.fileno()

    def _update(self) -> None:
        self.loop.update_channel(self)

    def enable_reading(self) -> None:
        self.events |= _READING
        self._update()

    def disable_reading(self) -> None:
        self.events &= ~_READING
        self._update()

    def enable_writing(self) -> None:
        self.events |= Events.OUT
        self._update()

    def disable_writing(self) -> None:
        self.events &= ~Events.OUT
        self._update()

    def disable_all(self) -> None:
        self.events = Events.NONE
        self._update()

    def is_none_event(self) -> bool:
        return self.events == Events.NONE

    def is_writing(self) -> bool:
        return bool(self.events & Events.OUT)

    def is_reading(self) -> bool:
        return bool(self.events & _READING)

    def tie(self, owner: Any) -> None:
        """Only dispatch events while ``owner`` is still alive."""
        self._tie = weakref.ref(owner)

    def handle_event(self) -> None:
        """Run the callbacks matching ``revents``."""
        if self._tie is not None:
            guard = self._tie()
            if guard is None:
                return
            try:
                self._handle_event_with_guard()
            finally:
                del guard
        else:
            self._handle_event_with_guard()

    def _handle_event_with_guard(self) -> None:
        revents = self.revents
        if revents & Events.HUP and not revents & Events.IN:
            if self.close_callback:
                self.close_callback()
        if revents & Events.ERR:
            if self.error_callback:
                self.error_callback()
        if revents & _READ_TRIGGERS:
            if self.read_callback:
                self.read_callback()
        if revents & Events.OUT:
            if self.write_callback:
                self.write_callback()

    def remove(self) -> None:
        """Detach this channel from its loop."""
        self.loop.remove_channel(self)

    def __repr__(self) -> str:
        return f"Channel(fd={self.fileno()}, events={self.events!r})"