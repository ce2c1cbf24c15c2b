"""Overview rotation through rooms, driven by one cancellable timer.

The rotation is a small state machine::

    Idle --select_overview--> RotatingAtIndex(0) --advance--> RotatingAtIndex(1) ...
      \\--select_room--> ShowingRoom(r)

Every transition into a new mode cancels the running rotation timer first,
so two rotations never run at once.
"""

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from django_talkboard.display.controller import TalkboardDisplay
from django_talkboard.schedule.models import OVERVIEW, DisplayState
from django_talkboard.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


class RepeatingTimer:
    """Call *callback* every *interval* seconds on the running event loop.

    The callback may be a plain function or return an awaitable.  An
    exception in one call is logged and the timer keeps going.

    Args:
        interval: Seconds between calls; the first call happens after one
            interval.
        callback: The function to call.
        name: Used in log messages and as the task name.
    """

    def __init__(
        self,
        interval: float,
        callback: Callable[[], Awaitable[object] | object],
        *,
        name: str = "timer",
    ) -> None:
        self.interval = interval
        self.callback = callback
        self.name = name
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        """Return ``True`` while the timer task is alive."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start ticking; a no-op when already running."""
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name=self.name)

    def cancel(self) -> None:
        """Stop ticking and drop the task handle."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                result = self.callback()
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("%s tick failed", self.name)


@dataclass(frozen=True, slots=True)
class Idle:
    """Nothing selected; the room list is shown."""


@dataclass(frozen=True, slots=True)
class RotatingAtIndex:
    """Overview mode, currently showing the room at ``index``."""

    index: int


@dataclass(frozen=True, slots=True)
class ShowingRoom:
    """A single room was selected."""

    room: str


RotationState = Idle | RotatingAtIndex | ShowingRoom


class RotationScheduler:
    """Switch between a single room and the overview rotation.

    Args:
        display: Renders rooms.
        store: Persists the selected room or mode.
        interval: Seconds between rooms in overview mode.
        timer_factory: Builds the rotation timer from ``(interval, callback)``;
            tests substitute a fake.
    """

    def __init__(
        self,
        display: TalkboardDisplay,
        store: ScheduleStore,
        *,
        interval: float,
        timer_factory: Callable[..., RepeatingTimer] = RepeatingTimer,
    ) -> None:
        self.display = display
        self.store = store
        self.interval = interval
        self.timer_factory = timer_factory
        self.state: RotationState = Idle()
        self._timer: RepeatingTimer | None = None

    @property
    def rotating(self) -> bool:
        """Return ``True`` while a rotation timer is active."""
        return self._timer is not None

    def _cancel_rotation(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _persist(self, selected_room: str | None) -> None:
        state = DisplayState(selected_room=selected_room)
        self.display.context.display_state = state
        self.store.save_display_state(state)

    def select_room(self, room: str) -> None:
        """Stop any rotation and show *room*."""
        self._cancel_rotation()
        self.state = ShowingRoom(room)
        self._persist(room)
        self.display.display_room(room)

    def select_overview(self) -> None:
        """Restart the overview rotation from the first room."""
        self._cancel_rotation()
        self.state = RotatingAtIndex(0)
        self._persist(OVERVIEW)
        self._show_index(0)
        self._timer = self.timer_factory(self.interval, self.advance, name="rotation")
        self._timer.start()

    def advance(self) -> None:
        """Move the overview rotation to the next room, wrapping around."""
        if not isinstance(self.state, RotatingAtIndex):
            return
        rooms = self.display.visible_rooms()
        index = (self.state.index + 1) % len(rooms) if rooms else 0
        self.state = RotatingAtIndex(index)
        self._show_index(index)

    def _show_index(self, index: int) -> None:
        rooms = self.display.visible_rooms()
        if not rooms:
            self.display.render_fallback()
            return
        self.display.display_room(rooms[index % len(rooms)])

    def refresh(self) -> None:
        """Re-render whatever room or mode is active."""
        if isinstance(self.state, ShowingRoom):
            self.display.display_room(self.state.room)
        elif isinstance(self.state, RotatingAtIndex):
            self._show_index(self.state.index)
        else:
            self.display.render_initial_view()

    def restore(self, state: DisplayState) -> None:
        """Resume a persisted display state.

        A room that is no longer in the schedule leaves the scheduler idle.
        """
        if state.is_overview:
            self.select_overview()
        elif state.selected_room and state.selected_room in self.display.context.rooms:
            self.select_room(state.selected_room)
        else:
            if state.selected_room:
                logger.info("Stored room %r is not in the schedule; staying idle", state.selected_room)
            self.stop()

    def stop(self) -> None:
        """Cancel the rotation and go idle."""
        self._cancel_rotation()
        self.state = Idle()
