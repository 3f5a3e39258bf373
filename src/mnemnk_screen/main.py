"""
mnemnk-screen Main Application
==============================

Command-line entry point for the screen agent.

Usage:
    mnemnk-screen
    mnemnk-screen --config '{"interval": 10, "same_screen_ratio": 0.02}'
    mnemnk-screen --settings ./mnemnk-screen.yaml --log-level DEBUG

Exit Codes:
    0 - interrupted (SIGINT/SIGTERM) or `.QUIT` received
    1 - displays could not be enumerated at startup
    2 - invalid settings or initial configuration
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from mnemnk_screen.agent import ScreenAgent
from mnemnk_screen.capture import CaptureError, FrameSource, MssFrameSource
from mnemnk_screen.config import (
    AgentConfig,
    ConfigError,
    load_settings,
    parse_agent_config,
    setup_logging,
)
from mnemnk_screen.control import LineReader


logger = logging.getLogger(__name__)


EXIT_OK = 0
EXIT_NO_DISPLAYS = 1
EXIT_BAD_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mnemnk-screen",
        description="Report primary display changes as `.OUT screen` events on stdout.",
    )
    parser.add_argument(
        "-c",
        "--config",
        default=None,
        help="JSON config string",
    )
    parser.add_argument(
        "--settings",
        default=None,
        help="Path to a YAML settings file",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the log level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def check_displays(source: FrameSource) -> None:
    """
    Enumerate displays once before the loop starts.

    Raises:
        CaptureError: If enumeration fails
    """
    displays = source.list_displays()
    if not displays:
        logger.warning("No displays found; ticks will report nothing until one appears")
    elif not any(d.is_primary() for d in displays):
        logger.warning(f"No primary display among {len(displays)} display(s)")
    else:
        logger.debug(f"Displays: {displays}")


async def serve(agent: ScreenAgent) -> int:
    """Run the agent with stdin as control channel."""
    reader = LineReader(sys.stdin)
    lines = reader.start(asyncio.get_running_loop())
    return await agent.run(lines=lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except (ValidationError, ValueError) as e:
        print(f"Invalid settings: {e}", file=sys.stderr)
        return EXIT_BAD_CONFIG

    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging(settings)

    config: AgentConfig = settings.screen
    if args.config:
        try:
            config = parse_agent_config(args.config, base=config)
        except ConfigError as e:
            logger.error(f"Invalid --config: {e}")
            return EXIT_BAD_CONFIG

    logger.info(f"Starting {settings.agent.name} {settings.agent.version}")
    logger.info(f"Config: {config.model_dump()}")

    source = MssFrameSource()
    try:
        check_displays(source)
    except CaptureError as e:
        logger.error(f"Display enumeration failed: {e}")
        return EXIT_NO_DISPLAYS

    agent = ScreenAgent(config, source, name=settings.agent.name)
    try:
        return asyncio.run(serve(agent))
    except KeyboardInterrupt:
        logger.info(f"Shutting down {settings.agent.name}.")
        return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
