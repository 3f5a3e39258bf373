"""
Capture Tests
=============

Tests for primary display selection and the mss-backed frame source.
"""

from datetime import timezone

import mss
import mss.exception
import numpy as np
import pytest

from mnemnk_screen.capture import CaptureError, MssFrameSource, capture_primary


class _FakeMss:
    """Stand-in for mss.mss() with fixed monitors."""

    monitors = []
    fail_grab = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def grab(self, monitor):
        if self.fail_grab:
            raise mss.exception.ScreenShotError("denied")
        bgra = np.zeros((monitor["height"], monitor["width"], 4), dtype=np.uint8)
        bgra[:, :, 0] = 10   # B
        bgra[:, :, 1] = 20   # G
        bgra[:, :, 2] = 30   # R
        bgra[:, :, 3] = 255
        return bgra


@pytest.fixture
def fake_mss(monkeypatch):
    _FakeMss.monitors = [
        {"left": 0, "top": 0, "width": 40, "height": 10},
        {"left": 0, "top": 0, "width": 20, "height": 10},
        {"left": 20, "top": 0, "width": 20, "height": 8},
    ]
    _FakeMss.fail_grab = False
    monkeypatch.setattr(mss, "mss", _FakeMss)
    return _FakeMss


class TestCapturePrimary:
    """Tests for capture_primary with in-memory sources."""

    def test_picks_primary_display(self, fake_display_cls, fake_source_cls, make_pixels):
        secondary = fake_display_cls(2, [make_pixels(4, 4, 10)], primary=False)
        primary = fake_display_cls(7, [make_pixels(8, 4, 20)], primary=True)

        frame = capture_primary(fake_source_cls([secondary, primary]))

        assert frame.monitor_id == 7
        assert frame.width == 8
        assert frame.height == 4
        assert frame.timestamp.tzinfo == timezone.utc
        assert secondary.captures == 0

    def test_no_primary_returns_none(self, fake_display_cls, fake_source_cls, make_pixels):
        display = fake_display_cls(1, [make_pixels(4, 4, 10)], primary=False)
        assert capture_primary(fake_source_cls([display])) is None

    def test_no_displays_returns_none(self, fake_source_cls):
        assert capture_primary(fake_source_cls([])) is None


class TestMssFrameSource:
    """Tests for the mss adapter."""

    def test_first_monitor_is_primary_by_default(self, fake_mss):
        displays = MssFrameSource().list_displays()

        assert [d.id() for d in displays] == [1, 2]
        assert [d.is_primary() for d in displays] == [True, False]

    def test_flagged_primary_wins(self, fake_mss):
        fake_mss.monitors[2]["is_primary"] = True

        displays = MssFrameSource().list_displays()

        assert [d.is_primary() for d in displays] == [False, True]

    def test_capture_converts_to_rgba(self, fake_mss):
        frame = capture_primary(MssFrameSource())

        assert frame.monitor_id == 1
        assert frame.pixels.shape == (10, 20, 4)
        assert frame.pixels[0, 0].tolist() == [30, 20, 10, 255]

    def test_capture_failure_raises(self, fake_mss):
        fake_mss.fail_grab = True
        with pytest.raises(CaptureError):
            capture_primary(MssFrameSource())
