"""
Agent State Models
==================

Comparison baseline carried across capture cycles.

The scheduler owns exactly one AgentState and passes it by reference into
the change detector and the event encoder on every cycle. Only one cycle
runs at a time, so the state has a single writer.

Lifecycle:
    - starts empty
    - last_fingerprint: set on the first accepted frame and on every frame
      judged different
    - last_event_id: set only when a full screen event is emitted
"""

from typing import Optional

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


class AgentState(BaseModel):
    """
    Mutable decision state of the screen agent.

    Attributes:
        last_fingerprint: Fingerprint of the last frame judged different
        last_event_id: image_id of the last emitted screen event
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    last_fingerprint: Optional[np.ndarray] = Field(
        default=None,
        description="Read-only (H/4, W/4) uint8 luma fingerprint",
    )
    last_event_id: Optional[str] = Field(
        default=None,
        description="image_id of the most recent ScreenEvent",
    )
