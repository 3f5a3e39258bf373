"""
Control Protocol
================

Line-oriented commands sent by the orchestrator on stdin.

Protocol:
    .CONFIG <json>   replace the capture configuration
    .QUIT            terminate the agent

The first space separates the command from its argument payload; the
payload is kept verbatim, so it may itself contain spaces.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mnemnk_screen.config import AgentConfig, parse_agent_config


logger = logging.getLogger(__name__)


class CommandName(str, Enum):
    """Commands understood by the agent."""

    CONFIG = ".CONFIG"
    QUIT = ".QUIT"


@dataclass(frozen=True)
class Command:
    """One parsed control line."""

    name: str
    args: str = ""


@dataclass(frozen=True)
class CommandOutcome:
    """
    Effect of a command on the agent.

    Attributes:
        config: Configuration to use from the next capture cycle on
        quit: Whether the agent must terminate
    """

    config: AgentConfig
    quit: bool = False


def parse_line(line: str) -> Optional[Command]:
    """
    Split a control line into command and argument payload.

    Args:
        line: Raw input line (may include the trailing newline)

    Returns:
        Command, or None for an empty or whitespace-only line
    """
    line = line.strip()
    if not line:
        return None

    name, _, args = line.partition(" ")
    return Command(name=name, args=args)


def handle_command(command: Command, config: AgentConfig) -> CommandOutcome:
    """
    Apply a command to the active configuration.

    Args:
        command: Parsed control line
        config: Active configuration

    Returns:
        CommandOutcome with the resulting configuration

    Raises:
        ConfigError: If a `.CONFIG` payload has a malformed field
    """
    if command.name == CommandName.CONFIG.value:
        new_config = parse_agent_config(command.args, base=config)
        logger.info(f"Update config: {new_config.model_dump()}")
        return CommandOutcome(config=new_config)

    if command.name == CommandName.QUIT.value:
        return CommandOutcome(config=config, quit=True)

    logger.error(f"Unknown command: {command.name}")
    return CommandOutcome(config=config)
