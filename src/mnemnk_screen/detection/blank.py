"""
Blank Filter
============

Rejects frames that are overwhelmingly dark.

Only every SAMPLE_STRIDE-th pixel (row-major order) is inspected, so the
cost is bounded regardless of resolution. The filter answers a threshold
question, not an exact count: once enough sampled pixels are lit, the
frame is not blank.
"""

import numpy as np

from mnemnk_screen.capture.frame import CapturedFrame
from mnemnk_screen.config import AgentConfig


SAMPLE_STRIDE = 120

# Samples checked per step before testing the running count
SAMPLE_CHUNK = 1024


def count_lit_samples(pixels: np.ndarray, almost_black_threshold: int) -> int:
    """
    Count sampled pixels with any RGB channel at or above the threshold.

    Args:
        pixels: RGBA buffer, shape (H, W, 4)
        almost_black_threshold: Channel value below which a channel is black

    Returns:
        Number of lit pixels among the sampled ones
    """
    sampled = pixels.reshape(-1, pixels.shape[-1])[::SAMPLE_STRIDE, :3]
    lit = (sampled >= almost_black_threshold).any(axis=1)
    return int(np.count_nonzero(lit))


def reaches_lit_threshold(pixels: np.ndarray, almost_black_threshold: int, needed: int) -> bool:
    """
    Check whether at least `needed` sampled pixels are lit.

    Samples are scanned in chunks of SAMPLE_CHUNK and the scan stops as soon
    as the count reaches `needed`.
    """
    if needed <= 0:
        return True

    sampled = pixels.reshape(-1, pixels.shape[-1])[::SAMPLE_STRIDE, :3]
    lit = 0
    for start in range(0, sampled.shape[0], SAMPLE_CHUNK):
        chunk = sampled[start:start + SAMPLE_CHUNK]
        lit += int(np.count_nonzero((chunk >= almost_black_threshold).any(axis=1)))
        if lit >= needed:
            return True
    return False


def is_blank(frame: CapturedFrame, config: AgentConfig) -> bool:
    """
    Decide whether a frame is blank.

    Args:
        frame: Captured frame
        config: Active capture configuration

    Returns:
        True if fewer than `non_blank_threshold` sampled pixels are lit
    """
    if frame.pixels.size == 0:
        return True
    return not reaches_lit_threshold(
        frame.pixels,
        config.almost_black_threshold,
        config.non_blank_threshold,
    )
