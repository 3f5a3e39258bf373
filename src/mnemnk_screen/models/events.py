"""
Output Event Models
===================

Events written to stdout, one per line:

    .OUT screen {"t":1707321234567,"image":"iVBORw0...","image_id":"20240207-160354-1"}
    .OUT screen {"t":1707321294567,"image_id":"20240207-160354-1"}

The first shape (ScreenEvent) is emitted for a first or changed frame and
carries the full PNG. The second (SameScreenEvent) refers back to the most
recent ScreenEvent by its image_id.
"""

from pydantic import BaseModel, Field


class ScreenEvent(BaseModel):
    """A frame worth reporting."""

    t: int = Field(..., description="Capture time in epoch milliseconds")
    image: str = Field(..., description="Base64-encoded PNG of the full frame")
    image_id: str = Field(..., description="<YYYYMMDD>-<HHMMSS>-<monitor_id>")


class SameScreenEvent(BaseModel):
    """A frame indistinguishable from the last reported one."""

    t: int = Field(..., description="Capture time in epoch milliseconds")
    image_id: str = Field(..., description="image_id of the previous ScreenEvent")
