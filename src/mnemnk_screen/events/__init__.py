"""
Events Module
=============

Output event construction.

    - encode_event: Verdict -> single `.OUT screen <json>` line
    - encode_png / encode_png_base64: Full-frame PNG payloads
"""

from mnemnk_screen.events.encoder import (
    EVENT_KIND,
    OUTPUT_MARKER,
    EventEncodeError,
    encode_event,
    format_line,
    make_image_id,
)
from mnemnk_screen.events.image_encoder import (
    ImageEncodeError,
    encode_png,
    encode_png_base64,
)


__all__ = [
    "EVENT_KIND",
    "OUTPUT_MARKER",
    "EventEncodeError",
    "encode_event",
    "format_line",
    "make_image_id",
    "ImageEncodeError",
    "encode_png",
    "encode_png_base64",
]
