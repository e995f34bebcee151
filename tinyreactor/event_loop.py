"""Single-threaded reactor loop."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .poller import DEFAULT_POLL_TIMEOUT, Poller

if TYPE_CHECKING:
    from .channel import Channel


class EventLoop:
    """Polls its channels and runs their callbacks until told to quit."""

    def __init__(self, poll_timeout: float | None = DEFAULT_POLL_TIMEOUT) -> None:
        self.poll_timeout = poll_timeout
        self._poller = Poller()
        self._quit = False

    def loop(self) -> None:
        """Run until :meth:`quit` is called from a callback or another thread."""
        self._quit = False
        while not self._quit:
            for channel in self._poller.poll(self.poll_timeout):
                channel.handle_event()

    def update_channel(self, channel: Channel) -> None:
        self._poller.update_channel(channel)

    def remove_channel(self, channel: Channel) -> None:
        self._poller.remove_channel(channel)

    def quit(self) -> None:
        self._quit = True

    def close(self) -> None:
        """Release the poller; the loop cannot be used afterwards."""
        self._poller.close()