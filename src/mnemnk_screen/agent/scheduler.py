"""
Screen Agent Scheduler
======================

Top-level cooperative loop of the screen agent.

Each loop iteration services exactly one ready event:
    - timer tick      -> one capture cycle
                         (capture -> blank filter -> change detector -> encoder)
    - control line    -> `.CONFIG` / `.QUIT` handling
    - interrupt       -> graceful shutdown

Design Rules:
    - The scheduler is the only error boundary: failures of a capture
      cycle or a command are logged and never stop the loop
    - Capture cycles run to completion on the loop; nothing else runs
      concurrently with them, so AgentState needs no locking
    - A configuration change applies from the next tick; a changed
      interval rearms the timer for a full fresh period after that tick
"""

import asyncio
import logging
import signal
import sys
from typing import Callable, List, Optional, TextIO

from mnemnk_screen.agent.timer import IntervalTimer
from mnemnk_screen.capture.source import CaptureError, FrameSource, capture_primary
from mnemnk_screen.config import AgentConfig, ConfigError
from mnemnk_screen.control.protocol import handle_command, parse_line
from mnemnk_screen.detection.blank import is_blank
from mnemnk_screen.detection.change import detect_change
from mnemnk_screen.events.encoder import EventEncodeError, encode_event
from mnemnk_screen.events.image_encoder import ImageEncodeError
from mnemnk_screen.models.state import AgentState


logger = logging.getLogger(__name__)


AGENT_NAME = "mnemnk-screen"


class AgentMetrics:
    """Counters for ScreenAgent observability."""

    __slots__ = (
        "ticks",
        "screen_events",
        "same_screen_events",
        "blank_frames",
        "no_display",
        "capture_errors",
        "encode_errors",
        "command_errors",
        "commands",
    )

    def __init__(self) -> None:
        self.ticks: int = 0
        self.screen_events: int = 0
        self.same_screen_events: int = 0
        self.blank_frames: int = 0
        self.no_display: int = 0
        self.capture_errors: int = 0
        self.encode_errors: int = 0
        self.command_errors: int = 0
        self.commands: int = 0

    def to_dict(self) -> dict:
        """Export metrics as dict."""
        return {name: getattr(self, name) for name in self.__slots__}


class ScreenAgent:
    """
    Periodic primary-display reporter.

    Attributes:
        config: Active capture configuration (replaced by `.CONFIG`)
        state: Comparison baseline shared by detector and encoder
        metrics: Operational counters

    Example:
        agent = ScreenAgent(AgentConfig(), MssFrameSource())
        reader = LineReader(sys.stdin)
        exit_code = asyncio.run(agent.run(lines=...))
    """

    def __init__(
        self,
        config: AgentConfig,
        source: FrameSource,
        output: Optional[TextIO] = None,
        name: str = AGENT_NAME,
        timer_factory: Callable[..., IntervalTimer] = IntervalTimer,
    ) -> None:
        """
        Initialize the agent.

        Args:
            config: Initial capture configuration
            source: Display enumeration/capture backend
            output: Stream receiving event lines (default: stdout)
            name: Agent name used in lifecycle logs
            timer_factory: Callable(period, first_tick_now=...) creating timers
        """
        self.config = config
        self.state = AgentState()
        self.metrics = AgentMetrics()
        self.name = name

        self._source = source
        self._output = output
        self._timer_factory = timer_factory
        self._stop_event: Optional[asyncio.Event] = None
        self._stop_requested: bool = False

    # -------------------------------------------------------------------------
    # Capture cycle
    # -------------------------------------------------------------------------

    def execute_task(self) -> Optional[str]:
        """
        Run one capture cycle and write its event line.

        The configuration snapshot taken at the start is used for the whole
        cycle. If the cycle fails, AgentState is left as it was.

        Returns:
            The emitted line, or None when nothing was reported

        Raises:
            CaptureError: If the display cannot be captured
            ImageEncodeError: If the frame cannot be encoded
            EventEncodeError: If the state does not allow a same-screen event
            OSError: If the output stream cannot be written
        """
        config = self.config

        frame = capture_primary(self._source)
        if frame is None:
            self.metrics.no_display += 1
            logger.debug("No primary display found")
            return None

        if is_blank(frame, config):
            self.metrics.blank_frames += 1
            logger.debug(f"Blank screen: monitor: {frame.monitor_id}")
            return None

        previous_fingerprint = self.state.last_fingerprint
        previous_event_id = self.state.last_event_id
        try:
            result = detect_change(frame, self.state, config)
            line = encode_event(frame, result, self.state)
            self._write_line(line)
        except Exception:
            self.state.last_fingerprint = previous_fingerprint
            self.state.last_event_id = previous_event_id
            raise

        if result.is_same:
            self.metrics.same_screen_events += 1
        else:
            self.metrics.screen_events += 1
        return line

    def _write_line(self, line: str) -> None:
        output = self._output if self._output is not None else sys.stdout
        output.write(line + "\n")
        output.flush()

    def _flush_output(self) -> None:
        output = self._output if self._output is not None else sys.stdout
        try:
            output.flush()
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to flush output: {e}")

    # -------------------------------------------------------------------------
    # Control channel
    # -------------------------------------------------------------------------

    def process_line(self, line: str) -> bool:
        """
        Handle one control line.

        Args:
            line: Raw input line

        Returns:
            True if the agent must quit

        Raises:
            ConfigError: If a `.CONFIG` payload has a malformed field
        """
        logger.debug(f"process_line: {line.rstrip()}")
        command = parse_line(line)
        if command is None:
            return False

        self.metrics.commands += 1
        outcome = handle_command(command, self.config)
        self.config = outcome.config
        if outcome.quit:
            logger.info(f"Quit {self.name}.")
        return outcome.quit

    def stop(self) -> None:
        """Request graceful shutdown (safe to call from a signal handler)."""
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    # -------------------------------------------------------------------------
    # Event loop
    # -------------------------------------------------------------------------

    def _on_tick(self) -> None:
        self.metrics.ticks += 1
        try:
            self.execute_task()
        except CaptureError as e:
            self.metrics.capture_errors += 1
            logger.error(f"Capture error: {e}")
        except (ImageEncodeError, EventEncodeError) as e:
            self.metrics.encode_errors += 1
            logger.error(f"Encode error: {e}")
        except Exception as e:
            logger.exception(f"Capture cycle failed: {e}")

    def _on_line(self, line: str) -> bool:
        try:
            return self.process_line(line)
        except ConfigError as e:
            self.metrics.command_errors += 1
            logger.error(f"Config error: {e}")
        except Exception as e:
            self.metrics.command_errors += 1
            logger.exception(f"Command failed: {e}")
        return False

    def _rearm_if_needed(self, timer: IntervalTimer) -> IntervalTimer:
        """Replace the timer when the configured interval changed."""
        if self.config.interval == timer.period:
            return timer
        logger.info(
            f"Interval changed: {timer.period:g}s -> {self.config.interval}s"
        )
        return self._timer_factory(self.config.interval, first_tick_now=False)

    def _install_signal_handlers(self, loop: asyncio.AbstractEventLoop) -> list:
        """
        Route SIGINT/SIGTERM to stop().

        Returns:
            (signal, previous handler) pairs; the previous handler is None
            when the loop itself owns the handler
        """
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.stop)
                installed.append((sig, None))
            except NotImplementedError:
                # Windows event loops
                previous = signal.signal(
                    sig, lambda signum, frame: loop.call_soon_threadsafe(self.stop)
                )
                if previous is None:
                    previous = signal.SIG_DFL
                installed.append((sig, previous))
        return installed

    def _restore_signal_handlers(self, loop: asyncio.AbstractEventLoop, installed: list) -> None:
        for sig, previous in installed:
            if previous is None:
                loop.remove_signal_handler(sig)
            else:
                signal.signal(sig, previous)

    async def run(
        self,
        lines: Optional["asyncio.Queue[Optional[str]]"] = None,
        handle_signals: bool = True,
    ) -> int:
        """
        Run until interrupted or told to quit.

        Args:
            lines: Control lines, None marking end of input. No control
                channel when None.
            handle_signals: Install SIGINT/SIGTERM handlers

        Returns:
            Process exit code (0)
        """
        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()

        installed = self._install_signal_handlers(loop) if handle_signals else []

        timer = self._timer_factory(self.config.interval, first_tick_now=True)
        tick_task: asyncio.Task = asyncio.create_task(timer.tick(), name="timer_tick")
        stop_task: asyncio.Task = asyncio.create_task(self._stop_event.wait(), name="stop")
        line_task: Optional[asyncio.Task] = None
        if lines is not None:
            line_task = asyncio.create_task(lines.get(), name="control_line")

        logger.info(f"Starting {self.name} (interval={self.config.interval}s)")

        # Sources that completed together are serviced one per iteration,
        # each before the next wait, so none of them can starve the others.
        ready: List[asyncio.Task] = []

        try:
            while True:
                if not ready:
                    waiting = {t for t in (tick_task, line_task, stop_task) if t is not None}
                    done, _ = await asyncio.wait(waiting, return_when=asyncio.FIRST_COMPLETED)
                    ready = [t for t in (tick_task, line_task, stop_task) if t in done]
                task = ready.pop(0)

                if task is stop_task:
                    logger.info(f"Shutting down {self.name}.")
                    return 0

                if task is tick_task:
                    self._on_tick()
                    timer = self._rearm_if_needed(timer)
                    tick_task = asyncio.create_task(timer.tick(), name="timer_tick")
                    continue

                line = task.result()
                if line is None:
                    logger.info("Control input closed")
                    line_task = None
                    continue

                if self._on_line(line):
                    return 0
                line_task = asyncio.create_task(lines.get(), name="control_line")

        finally:
            for pending in (tick_task, line_task, stop_task):
                if pending is not None and not pending.done():
                    pending.cancel()
            await asyncio.gather(
                *(t for t in (tick_task, line_task, stop_task) if t is not None),
                return_exceptions=True,
            )
            self._restore_signal_handlers(loop, installed)
            self._flush_output()
            logger.info(f"Agent metrics: {self.metrics.to_dict()}")
