"""
Line Reader
===========

Funnels lines from a blocking text stream into an asyncio.Queue.

A daemon thread performs the blocking reads so the event loop only ever
waits on the queue. End of input is signalled by putting None.

When the stream exposes its binary buffer, each line is decoded as UTF-8
with invalid bytes replaced, so one bad line cannot end the channel.
"""

import asyncio
import logging
import sys
import threading
from typing import Iterator, Optional, TextIO


logger = logging.getLogger(__name__)


class LineReader:
    """
    Background reader for a line-oriented input stream.

    Example:
        reader = LineReader(sys.stdin)
        queue = reader.start(asyncio.get_running_loop())

        line = await queue.get()   # None at end of input
    """

    def __init__(self, stream: Optional[TextIO] = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        self._thread: Optional[threading.Thread] = None
        self._lines_read: int = 0

    @property
    def lines_read(self) -> int:
        """Number of lines delivered so far."""
        return self._lines_read

    def start(self, loop: asyncio.AbstractEventLoop) -> "asyncio.Queue[Optional[str]]":
        """
        Start the reader thread.

        Args:
            loop: Event loop that owns the returned queue

        Returns:
            Queue receiving one item per line, then None at end of input
        """
        if self._thread is not None:
            raise RuntimeError("LineReader already started")

        queue: "asyncio.Queue[Optional[str]]" = asyncio.Queue()
        self._thread = threading.Thread(
            target=self._run,
            args=(loop, queue),
            name="line_reader",
            daemon=True,
        )
        self._thread.start()
        return queue

    def _iter_lines(self) -> Iterator[str]:
        raw = getattr(self._stream, "buffer", None)
        if raw is None:
            yield from self._stream
            return
        for chunk in iter(raw.readline, b""):
            yield chunk.decode("utf-8", errors="replace")

    def _run(
        self,
        loop: asyncio.AbstractEventLoop,
        queue: "asyncio.Queue[Optional[str]]",
    ) -> None:
        try:
            for line in self._iter_lines():
                self._lines_read += 1
                loop.call_soon_threadsafe(queue.put_nowait, line)
        except (OSError, ValueError) as e:
            logger.error(f"Input stream read failed: {e}")
        except RuntimeError:
            # Event loop closed while a line was in flight
            return

        try:
            loop.call_soon_threadsafe(queue.put_nowait, None)
        except RuntimeError:
            pass
