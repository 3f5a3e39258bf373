"""
Image Encoder
=============

Dedicated module for encoding RGBA frames into base64 PNG payloads.

Design Rules:
    - This is the ONLY place in the codebase that encodes images
    - Encodes the full-resolution frame (no downsampling)
    - Fails fast on unsupported buffers
"""

import base64
import logging

import cv2
import numpy as np


logger = logging.getLogger(__name__)


class ImageEncodeError(Exception):
    """Raised when image encoding fails."""
    pass


def encode_png(pixels: np.ndarray) -> bytes:
    """
    Encode an RGBA buffer as PNG.

    Args:
        pixels: RGBA image as np.ndarray (H, W, 4), dtype=uint8

    Returns:
        PNG file bytes

    Raises:
        ImageEncodeError: If the buffer is invalid or encoding fails
    """
    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ImageEncodeError(f"Invalid image shape: {pixels.shape}")
    if pixels.dtype != np.uint8:
        raise ImageEncodeError(f"Invalid dtype: {pixels.dtype}")
    if pixels.shape[0] == 0 or pixels.shape[1] == 0:
        raise ImageEncodeError(f"Unsupported dimensions: {pixels.shape[1]}x{pixels.shape[0]}")

    try:
        bgra = cv2.cvtColor(pixels, cv2.COLOR_RGBA2BGRA)
        ok, buffer = cv2.imencode(".png", bgra)
    except cv2.error as e:
        raise ImageEncodeError(f"PNG encode failed: {e}") from e

    if not ok:
        raise ImageEncodeError("PNG encode failed: cv2.imencode returned False")

    return buffer.tobytes()


def encode_png_base64(pixels: np.ndarray) -> str:
    """
    Encode an RGBA buffer as base64 PNG text.

    Raises:
        ImageEncodeError: If PNG encoding fails
    """
    return base64.b64encode(encode_png(pixels)).decode("ascii")
