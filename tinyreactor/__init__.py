"""A small reactor for TCP servers: event loop, channels, buffered connections, a worker pool and ready-made echo and compute servers."""

__version__ = "0.1.0"