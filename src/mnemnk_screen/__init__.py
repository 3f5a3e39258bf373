"""
mnemnk-screen
=============

Screen capture agent for the mnemnk orchestrator.

The agent periodically captures the primary display, drops blank frames,
compares the rest against the last reported frame, and writes one event
line per capture to stdout. The orchestrator drives it over stdin with
`.CONFIG <json>` and `.QUIT` commands.

Components:
    - capture: Primary display capture (mss)
    - detection: Blank filter and fingerprint change detection
    - events: Output event encoding (PNG via OpenCV, base64)
    - control: stdin command protocol
    - agent: asyncio scheduling loop

Example:
    from mnemnk_screen.agent import ScreenAgent
    from mnemnk_screen.capture import MssFrameSource
    from mnemnk_screen.config import AgentConfig

    agent = ScreenAgent(AgentConfig(interval=10), MssFrameSource())
    agent.execute_task()
"""

__version__ = "0.1.0"
__author__ = "mnemnk"

__all__ = [
    "__version__",
]
