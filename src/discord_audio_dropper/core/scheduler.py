"""
Periodic scheduling of playback cycles.

The first cycle runs as soon as the scheduler starts; the following ones
run on fixed-rate deadlines from a single background task. Cycles never
overlap: ticks that come due while a cycle is still running are dropped.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Awaitable, Callable, Optional

from discord_audio_dropper.infrastructure.exceptions import (
    AudioDropperError,
    NoActiveChannelError,
)

if TYPE_CHECKING:
    from discord_audio_dropper.audio.library import ClipInventory

logger = logging.getLogger(__name__)

CycleTask = Callable[[Path], Awaitable[None]]


@dataclass
class ScheduleState:
    """Mutable state owned by one :class:`DropScheduler`."""

    running: bool = False
    next_fire: Optional[float] = None
    cycle_in_progress: bool = False
    cycles_run: int = 0
    cycles_failed: int = 0
    ticks_dropped: int = 0


class DropScheduler:
    """Runs a playback task with a random clip every period."""

    def __init__(self, inventory: "ClipInventory", rng: Optional[random.Random] = None):
        """
        Initialize the scheduler.

        Args:
            inventory: Clips to choose from; must not be empty
            rng: Generator advanced once per cycle to pick the clip

        Raises:
            EmptyInventoryError: If ``inventory`` has no clips
        """
        self.inventory = inventory.require_clips()
        self.rng = rng or random.Random()
        self.state = ScheduleState()
        self._stop_event = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self.state.running

    async def start(self, period: float, task: CycleTask) -> None:
        """
        Run ``task`` now, then every ``period`` seconds until :meth:`stop`.

        Returns once the first cycle is done and the background worker is
        scheduled.
        """
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        if self.state.running:
            raise RuntimeError("Scheduler is already running")

        loop = asyncio.get_running_loop()
        self.state.running = True
        self._stop_event.clear()
        self.state.next_fire = loop.time() + period

        logger.info(f"Scheduler started with a {period:g}s period")
        await self._tick(task)

        # stop() may have been called during the first cycle
        if self.state.running:
            self._worker = asyncio.create_task(
                self._run(period, task), name="audio-dropper-scheduler"
            )

    def stop(self) -> None:
        """Stop scheduling. A cycle in progress is left to finish."""
        if not self.state.running:
            return
        self.state.running = False
        self.state.next_fire = None
        self._stop_event.set()
        logger.info("Scheduler stopped")

    async def wait_stopped(self) -> None:
        """Wait for the worker and any cycle in progress to finish after :meth:`stop`."""
        if self._worker is not None:
            await self._worker
            self._worker = None
        await self._idle.wait()

    async def _run(self, period: float, task: CycleTask) -> None:
        loop = asyncio.get_running_loop()
        while self.state.running:
            delay = max(0.0, self.state.next_fire - loop.time())
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                break
            except asyncio.TimeoutError:
                pass

            self._advance(loop.time(), period)
            await self._tick(task)

    def _advance(self, now: float, period: float) -> None:
        self.state.next_fire += period
        if self.state.next_fire <= now:
            missed = int((now - self.state.next_fire) // period) + 1
            self.state.next_fire += missed * period
            self.state.ticks_dropped += missed
            logger.warning(f"Cycle overran its period, dropped {missed} ticks")

    async def _tick(self, task: CycleTask) -> None:
        if self.state.cycle_in_progress:
            self.state.ticks_dropped += 1
            logger.warning("Previous cycle still in progress, skipping tick")
            return

        self.state.cycle_in_progress = True
        self._idle.clear()
        try:
            clip = self.inventory.choose(self.rng)
            await task(clip)
        except NoActiveChannelError as e:
            logger.info(f"Nothing to do this cycle: {e}")
        except AudioDropperError as e:
            self.state.cycles_failed += 1
            logger.warning(f"failed to play clip: {e}")
        except Exception as e:
            self.state.cycles_failed += 1
            logger.error(f"Unexpected error during cycle: {e}", exc_info=True)
        finally:
            self.state.cycle_in_progress = False
            self.state.cycles_run += 1
            self._idle.set()
