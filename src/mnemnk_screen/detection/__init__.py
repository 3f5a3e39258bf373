"""
Detection Module
================

Frame filtering and change detection.

    - is_blank: Sparse-sampling dark frame filter
    - downsample: 4x4 block-averaged luma fingerprint
    - detect_change: Fingerprint comparison against the retained baseline
"""

from mnemnk_screen.detection.blank import (
    SAMPLE_CHUNK,
    SAMPLE_STRIDE,
    count_lit_samples,
    is_blank,
    reaches_lit_threshold,
)
from mnemnk_screen.detection.change import (
    DOWNSAMPLE_SCALE,
    PIXEL_SENSITIVITY,
    ChangeResult,
    detect_change,
    difference_ratio,
    downsample,
)


__all__ = [
    "SAMPLE_CHUNK",
    "SAMPLE_STRIDE",
    "count_lit_samples",
    "is_blank",
    "reaches_lit_threshold",
    "DOWNSAMPLE_SCALE",
    "PIXEL_SENSITIVITY",
    "ChangeResult",
    "detect_change",
    "difference_ratio",
    "downsample",
]
