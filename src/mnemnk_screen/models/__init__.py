"""
Data Models
===========

Pydantic models for mnemnk-screen.

Models:
    State:
        - AgentState: Comparison baseline (last fingerprint, last image_id)

    Output:
        - ScreenEvent: Full event for a first or changed frame
        - SameScreenEvent: Reference event for an unchanged frame
"""

from mnemnk_screen.models.events import SameScreenEvent, ScreenEvent
from mnemnk_screen.models.state import AgentState

__all__ = [
    "AgentState",
    "ScreenEvent",
    "SameScreenEvent",
]
