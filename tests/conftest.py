"""
Test Configuration
==================

Pytest fixtures and test doubles for mnemnk-screen.
"""

from datetime import datetime, timezone
from typing import Callable, List, Optional

import numpy as np
import pytest


CAPTURE_TIME = datetime(2024, 2, 7, 16, 3, 54, 567000, tzinfo=timezone.utc)


class FakeDisplay:
    """In-memory display returning queued RGBA buffers."""

    def __init__(
        self,
        display_id: int,
        frames: List[np.ndarray],
        primary: bool = True,
        on_capture: Optional[Callable[[int], None]] = None,
    ) -> None:
        self._id = display_id
        self._frames = list(frames)
        self._primary = primary
        self._on_capture = on_capture
        self.captures = 0

    def id(self) -> int:
        return self._id

    def is_primary(self) -> bool:
        return self._primary

    def capture(self) -> np.ndarray:
        self.captures += 1
        index = min(self.captures - 1, len(self._frames) - 1)
        pixels = self._frames[index]
        if self._on_capture is not None:
            self._on_capture(self.captures)
        return pixels


class FakeSource:
    """Frame source over a fixed list of displays."""

    def __init__(self, displays: List[FakeDisplay]) -> None:
        self.displays = displays

    def list_displays(self) -> List[FakeDisplay]:
        return self.displays


def solid_rgba(width: int, height: int, value: int) -> np.ndarray:
    """Opaque RGBA buffer with R = G = B = value."""
    pixels = np.full((height, width, 4), value, dtype=np.uint8)
    pixels[:, :, 3] = 255
    return pixels


@pytest.fixture
def make_pixels() -> Callable[..., np.ndarray]:
    """Factory for solid-color RGBA buffers."""
    return solid_rgba


@pytest.fixture
def make_frame():
    """Factory for CapturedFrame objects."""
    from mnemnk_screen.capture.frame import CapturedFrame

    def _make(pixels: np.ndarray, monitor_id: int = 1, timestamp: datetime = CAPTURE_TIME):
        return CapturedFrame(timestamp=timestamp, monitor_id=monitor_id, pixels=pixels)

    return _make


@pytest.fixture
def make_source():
    """Factory for a FakeSource with one primary display."""

    def _make(
        frames: List[np.ndarray],
        on_capture: Optional[Callable[[int], None]] = None,
        display_id: int = 1,
    ):
        display = FakeDisplay(display_id, frames, primary=True, on_capture=on_capture)
        return FakeSource([display])

    return _make


@pytest.fixture
def fake_display_cls():
    """The FakeDisplay class, for tests that build sources by hand."""
    return FakeDisplay


@pytest.fixture
def fake_source_cls():
    """The FakeSource class, for tests that build sources by hand."""
    return FakeSource


@pytest.fixture
def scenario_config():
    """Configuration used by the two-identical-frames scenario."""
    from mnemnk_screen.config import AgentConfig

    return AgentConfig(
        interval=1,
        almost_black_threshold=20,
        non_blank_threshold=400,
        same_screen_ratio=0.01,
    )
