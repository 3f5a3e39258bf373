"""
Agent Module
============

Scheduling loop of the screen agent.

    - ScreenAgent: Timer / control line / interrupt multiplexer
    - IntervalTimer: Fixed-period timer with skip-on-overrun
"""

from mnemnk_screen.agent.scheduler import AGENT_NAME, AgentMetrics, ScreenAgent
from mnemnk_screen.agent.timer import IntervalTimer


__all__ = [
    "AGENT_NAME",
    "AgentMetrics",
    "ScreenAgent",
    "IntervalTimer",
]
