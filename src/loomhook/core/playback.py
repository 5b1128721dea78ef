"""
Playback scheduler: walks a cursor through the picks on a fixed cadence.

Two states:
- STOPPED: cursor frozen, no timer
- RUNNING: a repeating timer advances the cursor every tick_interval_ms

Each tick does current_pick = (current_pick + 1) mod pick_count.

The scheduler owns the cursor and only observes the pick count of the
matrix being played. When the matrix is replaced it stops and rewinds.

Two ways to drive it:
- play() inside a running asyncio loop starts a timer task
- advance(elapsed_ms) applies elapsed time from any other clock

The timer task is single-flight: it sleeps, applies one tick, and only then
sleeps again. Ticks never overlap.
"""

from __future__ import annotations
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

from loomhook.errors import InvalidDimensions

logger = logging.getLogger(__name__)


class PlaybackStatus(Enum):
    STOPPED = "stopped"
    RUNNING = "running"


@dataclass
class PlaybackConfig:
    """Configuration for the playback scheduler."""

    tick_interval_ms: float = 500.0  # Time between picks


@dataclass
class PlaybackScheduler:
    """
    Cursor over the picks of the current pattern.

    on_tick, if given, is called with the new cursor after every tick.
    """

    pick_count: int
    config: PlaybackConfig = field(default_factory=PlaybackConfig)
    on_tick: Callable[[int], None] | None = None

    # Playback state
    current_pick: int = field(default=0, init=False)
    status: PlaybackStatus = field(default=PlaybackStatus.STOPPED, init=False)
    total_ticks: int = field(default=0, init=False)

    _elapsed_ms: float = field(default=0.0, init=False, repr=False)
    _task: asyncio.Task | None = field(default=None, init=False, repr=False)

    def __post_init__(self):
        self._check_pick_count(self.pick_count)
        if self.config.tick_interval_ms <= 0:
            raise ValueError("tick_interval_ms must be positive")

    @staticmethod
    def _check_pick_count(pick_count: int):
        if isinstance(pick_count, bool) or not isinstance(pick_count, int) or pick_count < 1:
            raise InvalidDimensions(f"pick_count must be >= 1, got {pick_count!r}")

    @property
    def is_playing(self) -> bool:
        return self.status is PlaybackStatus.RUNNING

    @property
    def tick_interval_ms(self) -> float:
        return self.config.tick_interval_ms

    # ═══════════════════════════════════════════════════════════════
    # TRANSITIONS
    # ═══════════════════════════════════════════════════════════════

    def play(self) -> None:
        """STOPPED -> RUNNING. No-op if already running."""
        if self.is_playing:
            return
        self.status = PlaybackStatus.RUNNING
        self._elapsed_ms = 0.0
        self._start_timer()
        logger.debug("Playback started at pick %d", self.current_pick)

    def pause(self) -> None:
        """RUNNING -> STOPPED. The cursor keeps its value."""
        if not self.is_playing:
            return
        self.status = PlaybackStatus.STOPPED
        self._elapsed_ms = 0.0
        self._cancel_timer()
        logger.debug("Playback paused at pick %d", self.current_pick)

    def toggle(self) -> bool:
        """Play if stopped, pause if running. Returns the new is_playing."""
        if self.is_playing:
            self.pause()
        else:
            self.play()
        return self.is_playing

    def reset(self) -> None:
        """Stop and rewind to pick 0."""
        self.pause()
        self.current_pick = 0

    def on_matrix_replaced(self, pick_count: int) -> None:
        """Stop and rewind for a newly installed matrix."""
        self._check_pick_count(pick_count)
        self.reset()
        self.pick_count = pick_count

    def set_pick_count(self, pick_count: int) -> None:
        """
        Follow a change in pick count without stopping.

        The cursor is clamped into [0, pick_count) so the next tick starts
        from a valid pick.
        """
        self._check_pick_count(pick_count)
        self.pick_count = pick_count
        if self.current_pick >= pick_count:
            self.current_pick = pick_count - 1

    # ═══════════════════════════════════════════════════════════════
    # TICKING
    # ═══════════════════════════════════════════════════════════════

    def tick(self) -> int:
        """
        Advance the cursor by one pick.

        Does nothing while stopped. Returns the current pick.
        """
        if not self.is_playing:
            return self.current_pick

        self.current_pick = (self.current_pick + 1) % self.pick_count
        self.total_ticks += 1
        if self.on_tick is not None:
            self.on_tick(self.current_pick)
        return self.current_pick

    def advance(self, elapsed_ms: float) -> int:
        """
        Apply elapsed wall time from an external clock.

        Fires one tick per full interval while running. Time that passes
        while stopped is discarded.

        Returns:
            Number of ticks fired
        """
        if elapsed_ms < 0:
            raise ValueError("elapsed_ms must be non-negative")
        if not self.is_playing:
            return 0

        self._elapsed_ms += elapsed_ms
        fired = 0
        while self.is_playing and self._elapsed_ms >= self.tick_interval_ms:
            self._elapsed_ms -= self.tick_interval_ms
            self.tick()
            fired += 1
        return fired

    # ═══════════════════════════════════════════════════════════════
    # ASYNCIO TIMER
    # ═══════════════════════════════════════════════════════════════

    def _start_timer(self):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: the caller drives playback through advance()
            return
        self._task = loop.create_task(self._run_timer())

    def _cancel_timer(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run_timer(self):
        interval = self.tick_interval_ms / 1000.0
        while self.is_playing:
            await asyncio.sleep(interval)
            if not self.is_playing:
                break
            try:
                self.tick()
            except Exception:
                logger.exception("Tick callback failed at pick %d; playback stopped", self.current_pick)
                self.status = PlaybackStatus.STOPPED
                self._elapsed_ms = 0.0
                self._task = None
                return

    @property
    def timer_active(self) -> bool:
        """True while an asyncio timer task is scheduled."""
        return self._task is not None and not self._task.done()

    async def shutdown(self) -> None:
        """Pause and wait until the timer task has fully stopped."""
        task = self._task
        self.pause()
        if task is not None:
            await asyncio.wait([task])
