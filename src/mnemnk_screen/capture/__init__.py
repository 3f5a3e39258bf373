"""
Capture Module
==============

Primary display capture components.

    - CapturedFrame: Typed frame data model (RGBA pixels + metadata)
    - FrameSource: Protocol for display enumeration backends
    - MssFrameSource: mss-backed implementation
    - capture_primary: Capture the primary display, if any

Example:
    from mnemnk_screen.capture import MssFrameSource, capture_primary

    frame = capture_primary(MssFrameSource())
    if frame is not None:
        print(frame.width, frame.height)
"""

from mnemnk_screen.capture.frame import CapturedFrame
from mnemnk_screen.capture.source import (
    CaptureError,
    DisplayHandle,
    FrameSource,
    MssDisplay,
    MssFrameSource,
    capture_primary,
)


__all__ = [
    "CapturedFrame",
    "CaptureError",
    "DisplayHandle",
    "FrameSource",
    "MssDisplay",
    "MssFrameSource",
    "capture_primary",
]
