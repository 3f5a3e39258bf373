"""
Event Encoder
=============

Turns a change verdict into exactly one output line.

Output Contract:
    .OUT screen <json>

    - changed/first frame: {"t": ..., "image": "<base64 PNG>", "image_id": "..."}
    - same frame:          {"t": ..., "image_id": "<previous image_id>"}

The encoder builds the whole line before anything is written, so a
failure never produces partial output.
"""

import logging
from typing import Union

from mnemnk_screen.capture.frame import CapturedFrame
from mnemnk_screen.detection.change import ChangeResult
from mnemnk_screen.events.image_encoder import encode_png_base64
from mnemnk_screen.models.events import SameScreenEvent, ScreenEvent
from mnemnk_screen.models.state import AgentState


logger = logging.getLogger(__name__)


OUTPUT_MARKER = ".OUT"
EVENT_KIND = "screen"


class EventEncodeError(Exception):
    """Raised when an event cannot be built from the current state."""
    pass


def make_image_id(frame: CapturedFrame) -> str:
    """Build `<YYYYMMDD>-<HHMMSS>-<monitor_id>` from the capture time (UTC)."""
    return f"{frame.timestamp:%Y%m%d}-{frame.timestamp:%H%M%S}-{frame.monitor_id}"


def format_line(event: Union[ScreenEvent, SameScreenEvent]) -> str:
    """Serialize an event as a single output line (no trailing newline)."""
    return f"{OUTPUT_MARKER} {EVENT_KIND} {event.model_dump_json()}"


def encode_event(
    frame: CapturedFrame,
    result: ChangeResult,
    state: AgentState,
) -> str:
    """
    Build the output line for a judged frame.

    For a changed frame `state.last_event_id` is updated after the PNG was
    encoded successfully; for an unchanged frame the state is only read.

    Args:
        frame: Captured frame the verdict applies to
        result: Change detector verdict
        state: Agent state (last_event_id may be updated)

    Returns:
        Output line without trailing newline

    Raises:
        ImageEncodeError: If PNG encoding fails
        EventEncodeError: If a same-screen event has no previous image_id
    """
    if result.is_same:
        if state.last_event_id is None:
            raise EventEncodeError("Same screen reported before any screen event")
        logger.debug("Close to last screenshot")
        event = SameScreenEvent(t=frame.timestamp_ms, image_id=state.last_event_id)
        return format_line(event)

    image = encode_png_base64(frame.pixels)
    image_id = make_image_id(frame)
    event = ScreenEvent(t=frame.timestamp_ms, image=image, image_id=image_id)
    line = format_line(event)

    state.last_event_id = image_id
    return line
