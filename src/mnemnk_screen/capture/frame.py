"""
Captured Frame
==============

Internal frame representation for the capture pipeline.

Design Rules:
    - This is the ONLY frame format passed to the blank filter,
      change detector and event encoder
    - Pixels are RGBA, uint8, shape (H, W, 4)
    - A frame lives for exactly one capture cycle
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import numpy as np


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class CapturedFrame:
    """
    One capture of the primary display.

    Attributes:
        timestamp: Capture instant (timezone-aware, UTC)
        monitor_id: Platform identifier of the captured monitor
        pixels: RGBA pixel buffer, shape (H, W, 4), dtype=uint8
    """

    timestamp: datetime
    monitor_id: int
    pixels: np.ndarray

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def timestamp_ms(self) -> int:
        """Capture instant as epoch milliseconds."""
        return (self.timestamp - _EPOCH) // timedelta(milliseconds=1)

    def __repr__(self) -> str:
        """Compact repr that doesn't dump the pixel buffer."""
        return (
            f"CapturedFrame(monitor_id={self.monitor_id}, "
            f"size={self.width}x{self.height}, "
            f"timestamp={self.timestamp.isoformat()})"
        )
