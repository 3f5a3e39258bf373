"""
Change Detector
===============

Decides whether a frame materially differs from the last reported one.

Frames are reduced to a coarse luma fingerprint (4x4 block averages) and
compared pixel by pixel against the retained fingerprint. The retained
fingerprint is replaced only when a frame is judged different, so a run
of individually "same" frames is always compared against the frame that
was last reported, not against its immediate predecessor.

Luma:
    Y = (R * 299 + G * 587 + B * 114) // 1000   (per source pixel)
    block = sum(Y over scale x scale) // scale²
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from mnemnk_screen.capture.frame import CapturedFrame
from mnemnk_screen.config import AgentConfig
from mnemnk_screen.models.state import AgentState


logger = logging.getLogger(__name__)


DOWNSAMPLE_SCALE = 4

# Luma difference (0-255) above which a fingerprint pixel counts as changed
PIXEL_SENSITIVITY = 5


@dataclass(frozen=True)
class ChangeResult:
    """Verdict of a single comparison."""

    is_same: bool
    diff_ratio: float


def downsample(pixels: np.ndarray, scale: int = DOWNSAMPLE_SCALE) -> np.ndarray:
    """
    Reduce an RGBA buffer to a grayscale fingerprint by block averaging.

    Remainder rows/columns that do not fill a whole block are dropped.

    Args:
        pixels: RGBA buffer, shape (H, W, 4), dtype=uint8
        scale: Block edge length

    Returns:
        Read-only uint8 array of shape (H // scale, W // scale)
    """
    height = pixels.shape[0] // scale
    width = pixels.shape[1] // scale

    rgb = pixels[: height * scale, : width * scale, :3].astype(np.uint32)
    luma = (rgb[:, :, 0] * 299 + rgb[:, :, 1] * 587 + rgb[:, :, 2] * 114) // 1000

    blocks = luma.reshape(height, scale, width, scale).sum(axis=(1, 3))
    fingerprint = (blocks // (scale * scale)).astype(np.uint8)
    fingerprint.setflags(write=False)
    return fingerprint


def difference_ratio(current: np.ndarray, previous: np.ndarray) -> float:
    """
    Fraction of fingerprint pixels whose luma changed noticeably.

    Returns 1.0 when the fingerprints have different dimensions or are empty.
    """
    if current.shape != previous.shape or current.size == 0:
        return 1.0
    diff = np.abs(current.astype(np.int16) - previous.astype(np.int16))
    return float(np.count_nonzero(diff > PIXEL_SENSITIVITY)) / float(current.size)


def detect_change(
    frame: CapturedFrame,
    state: AgentState,
    config: AgentConfig,
) -> ChangeResult:
    """
    Compare a frame against the retained fingerprint.

    Updates `state.last_fingerprint` when the frame is judged different.

    Args:
        frame: Non-blank captured frame
        state: Comparison baseline (mutated)
        config: Active capture configuration

    Returns:
        ChangeResult with the verdict and the measured ratio
    """
    start = time.perf_counter()
    fingerprint = downsample(frame.pixels)

    if state.last_fingerprint is None:
        state.last_fingerprint = fingerprint
        return ChangeResult(is_same=False, diff_ratio=1.0)

    ratio = difference_ratio(fingerprint, state.last_fingerprint)
    logger.debug(
        f"diff_ratio={ratio:.4f} "
        f"elapsed={(time.perf_counter() - start) * 1000:.1f}ms"
    )

    if ratio < config.same_screen_ratio:
        return ChangeResult(is_same=True, diff_ratio=ratio)

    state.last_fingerprint = fingerprint
    return ChangeResult(is_same=False, diff_ratio=ratio)
