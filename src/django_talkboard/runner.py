"""Cooperative event loop wiring for a running kiosk.

:class:`TalkboardRunner` owns three independent repeating timers on one
asyncio loop: the sync tick (re-fetch and re-render on change), the
overview rotation (owned by :class:`RotationScheduler`), and the live label
tick.  They interleave but never run simultaneously.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from django.utils import timezone

from django_talkboard.display.controller import TalkboardDisplay
from django_talkboard.display.labels import LiveLabelUpdater
from django_talkboard.display.rotation import RepeatingTimer, RotationScheduler
from django_talkboard.display.surface import DisplaySurface
from django_talkboard.schedule.models import DisplayState
from django_talkboard.settings import get_config
from django_talkboard.sync import ScheduleSyncService, SyncOutcome, build_sync_service

logger = logging.getLogger(__name__)


class TalkboardRunner:
    """Run the sync, rotation, and label timers for one kiosk.

    Args:
        service: Synchronizes the schedule into the shared context.
        display: Renders from the shared context.
        scheduler: Owns the rotation timer and the display state.
        sync_interval: Seconds between sync ticks.
        label_interval: Seconds between label ticks.
        timer_factory: Builds the sync and label timers.
    """

    def __init__(
        self,
        service: ScheduleSyncService,
        display: TalkboardDisplay,
        scheduler: RotationScheduler,
        *,
        sync_interval: float,
        label_interval: float,
        timer_factory: Callable[..., RepeatingTimer] = RepeatingTimer,
    ) -> None:
        self.service = service
        self.display = display
        self.scheduler = scheduler
        self.sync_timer = timer_factory(sync_interval, self.sync_tick, name="sync")
        self.label_timer = timer_factory(label_interval, self.display.labels.update, name="labels")
        self._stopped = asyncio.Event()

    async def start(self, initial: DisplayState | None = None) -> SyncOutcome:
        """Load stored state, sync once, render, and resume the display state.

        Args:
            initial: A display state overriding the persisted one.

        Returns:
            The outcome of the first synchronization.
        """
        context = self.service.bootstrap()
        outcome = await self.service.synchronize()
        self.display.render_initial_view()
        self.scheduler.restore(initial if initial is not None else context.display_state)
        return outcome

    async def sync_tick(self) -> SyncOutcome:
        """Synchronize and re-render the active room or mode when needed."""
        outcome, render = await self.service.synchronize_for_render()
        if render:
            logger.debug("Re-rendering after sync outcome %s", outcome)
            self.scheduler.refresh()
        return outcome

    async def run(self, initial: DisplayState | None = None) -> None:
        """Start the kiosk and keep the timers running until :meth:`stop`."""
        self._stopped.clear()
        await self.start(initial)
        self.sync_timer.start()
        self.label_timer.start()
        try:
            await self._stopped.wait()
        finally:
            self.sync_timer.cancel()
            self.label_timer.cancel()
            self.scheduler.stop()

    def stop(self) -> None:
        """Ask :meth:`run` to return."""
        self._stopped.set()


def build_runner(surface: DisplaySurface, *, clock: Callable[[], datetime] = timezone.now) -> TalkboardRunner:
    """Assemble a :class:`TalkboardRunner` from the Django configuration.

    Args:
        surface: Where the kiosk renders.
        clock: Returns the current instant.

    Returns:
        A runner sharing one :class:`~django_talkboard.sync.TalkboardContext`
        between its sync service, display, and rotation.
    """
    config = get_config()
    tz = config.display.tzinfo
    service = build_sync_service()
    labels = LiveLabelUpdater(surface, tz, clock)
    display = TalkboardDisplay(
        service.context,
        surface,
        labels,
        tz=tz,
        clock=clock,
        hidden_rooms=config.display.hidden_rooms,
        overview_label=config.display.overview_label,
    )
    scheduler = RotationScheduler(display, service.store, interval=config.intervals.rotation_seconds)
    return TalkboardRunner(
        service,
        display,
        scheduler,
        sync_interval=config.intervals.sync_seconds,
        label_interval=config.intervals.label_seconds,
    )
