"""
Frame Source
============

Primary display capture for the screen agent.

This module provides the FrameSource protocol and its mss-backed
implementation. The agent consumes ONLY CapturedFrame objects produced
here, never platform capture handles.

Design Rules:
    - Only the primary display is captured
    - Pixels leave this module as RGBA (mss grabs BGRA)
    - OS capture failures are raised as CaptureError
    - "No primary display" is not an error; it yields None
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

import mss
import mss.exception
import numpy as np

from mnemnk_screen.capture.frame import CapturedFrame


logger = logging.getLogger(__name__)


class CaptureError(Exception):
    """Raised when displays cannot be enumerated or captured."""
    pass


class DisplayHandle(Protocol):
    """A single display that can be captured."""

    def id(self) -> int:
        ...

    def is_primary(self) -> bool:
        ...

    def capture(self) -> np.ndarray:
        """
        Capture the display.

        Returns:
            RGBA pixel buffer, shape (H, W, 4), dtype=uint8

        Raises:
            CaptureError: If the OS denies capture
        """
        ...


class FrameSource(Protocol):
    """
    Protocol for display enumeration backends.

    Implemented by:
        - MssFrameSource (production)
        - in-memory fakes (tests)
    """

    def list_displays(self) -> List[DisplayHandle]:
        """
        Enumerate the displays attached to the system.

        Raises:
            CaptureError: If enumeration fails
        """
        ...


class MssDisplay:
    """One physical monitor as reported by mss."""

    def __init__(self, index: int, monitor: Dict[str, Any], primary: bool) -> None:
        self._index = index
        self._monitor = monitor
        self._primary = primary

    def id(self) -> int:
        return self._index

    def is_primary(self) -> bool:
        return self._primary

    def capture(self) -> np.ndarray:
        try:
            with mss.mss() as sct:
                shot = sct.grab(self._monitor)
        except mss.exception.ScreenShotError as e:
            raise CaptureError(f"Failed to capture monitor {self._index}: {e}") from e

        bgra = np.asarray(shot, dtype=np.uint8)
        # BGRA -> RGBA
        return np.ascontiguousarray(bgra[:, :, [2, 1, 0, 3]])

    def __repr__(self) -> str:
        return (
            f"MssDisplay(id={self._index}, "
            f"size={self._monitor.get('width')}x{self._monitor.get('height')}, "
            f"primary={self._primary})"
        )


class MssFrameSource:
    """
    Frame source backed by the mss screenshot library.

    mss lists the virtual "all monitors" screen at index 0 and physical
    monitors from index 1. A monitor is primary when mss flags it as such;
    otherwise the first physical monitor is treated as primary.
    """

    def list_displays(self) -> List[MssDisplay]:
        try:
            with mss.mss() as sct:
                monitors = [dict(m) for m in sct.monitors[1:]]
        except mss.exception.ScreenShotError as e:
            raise CaptureError(f"Failed to enumerate displays: {e}") from e

        flagged = any(m.get("is_primary") for m in monitors)
        displays = []
        for index, monitor in enumerate(monitors, start=1):
            primary = bool(monitor.get("is_primary")) if flagged else index == 1
            displays.append(MssDisplay(index, monitor, primary))
        return displays


def capture_primary(source: FrameSource) -> Optional[CapturedFrame]:
    """
    Capture the primary display.

    Args:
        source: Display enumeration backend

    Returns:
        CapturedFrame for the first primary display, or None if there is none

    Raises:
        CaptureError: If enumeration or capture fails
    """
    logger.debug("Taking screenshot")
    for display in source.list_displays():
        if display.is_primary():
            timestamp = datetime.now(timezone.utc)
            pixels = display.capture()
            return CapturedFrame(
                timestamp=timestamp,
                monitor_id=int(display.id()),
                pixels=pixels,
            )
    return None
