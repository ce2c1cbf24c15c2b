"""Rendering routines shared by the rotation and the sync tick."""

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, tzinfo

from django.utils import timezone

from django_talkboard.display.labels import LiveLabelUpdater
from django_talkboard.display.surface import DisplaySurface
from django_talkboard.schedule.models import SelectionResult
from django_talkboard.schedule.selection import select_talks
from django_talkboard.sync import TalkboardContext

logger = logging.getLogger(__name__)


class TalkboardDisplay:
    """Render the room list and per-room current/next cards from a context.

    Args:
        context: The kiosk state holding the schedule.
        surface: Where to render.
        labels: Updater used to fill in labels right after rendering.
        tz: The display timezone.
        clock: Returns the current instant; defaults to ``timezone.now``.
        hidden_rooms: Rooms left out of the room list and the rotation.
        overview_label: Caption of the overview entry in the room list.
    """

    def __init__(
        self,
        context: TalkboardContext,
        surface: DisplaySurface,
        labels: LiveLabelUpdater,
        *,
        tz: tzinfo,
        clock: Callable[[], datetime] = timezone.now,
        hidden_rooms: Iterable[str] = (),
        overview_label: str = "Overview",
    ) -> None:
        self.context = context
        self.surface = surface
        self.labels = labels
        self.tz = tz
        self.clock = clock
        self.hidden_rooms = frozenset(hidden_rooms)
        self.overview_label = overview_label

    def visible_rooms(self) -> list[str]:
        """Return schedule rooms in order, minus the hidden ones."""
        return [room for room in self.context.rooms if room not in self.hidden_rooms]

    def render_fallback(self) -> None:
        """Show the no-schedule view."""
        self.surface.render_fallback()

    def render_initial_view(self) -> bool:
        """Render the room list, or the fallback view without a schedule.

        Returns:
            ``True`` when a schedule was available.
        """
        if not self.context.schedule:
            logger.info("No schedule available; showing fallback view")
            self.render_fallback()
            return False
        self.surface.render_room_list([self.overview_label, *self.visible_rooms()])
        return True

    def display_room(self, room: str) -> SelectionResult | None:
        """Show the current and next talk of *room*.

        Returns:
            The selection shown, or ``None`` when there is no schedule.
        """
        if self.context.schedule is None:
            self.render_fallback()
            return None

        now = self.clock()
        selection = select_talks(self.context.schedule.get(room), now, self.tz)
        self.surface.clear()
        self.surface.render_card(selection.current, True)
        self.surface.render_card(selection.next, False)
        self.labels.update(now)
        logger.debug("Showing %s: current=%r next=%r", room, selection.current.title, selection.next.title)
        return selection
