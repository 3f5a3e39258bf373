"""
Control Module
==============

Orchestrator control channel.

    - parse_line / handle_command: `.CONFIG` and `.QUIT` handling
    - LineReader: Blocking stdin lines funneled into an asyncio.Queue
"""

from mnemnk_screen.control.protocol import (
    Command,
    CommandName,
    CommandOutcome,
    handle_command,
    parse_line,
)
from mnemnk_screen.control.reader import LineReader


__all__ = [
    "Command",
    "CommandName",
    "CommandOutcome",
    "handle_command",
    "parse_line",
    "LineReader",
]
