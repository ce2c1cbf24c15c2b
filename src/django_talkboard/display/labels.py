"""Live elapsed/remaining labels for rendered talk cards.

:class:`LiveLabelUpdater` runs on its own tick and only reads what is
already on the surface: the card's constant start instant and the wall
clock.  It never fetches and never re-selects, so it cannot change which
talk is shown.
"""

import logging
from collections.abc import Callable
from datetime import datetime, tzinfo

from django.utils import timezone

from django_talkboard.display.surface import CURRENT_CARD_ID, NEXT_CARD_ID, DisplaySurface
from django_talkboard.schedule.models import Talk, truncate_to_minute

logger = logging.getLogger(__name__)


def minutes_between(earlier: datetime, later: datetime, tz: tzinfo) -> int:
    """Whole minutes from *earlier* to *later* at minute resolution, floored at zero."""
    delta = truncate_to_minute(later, tz) - truncate_to_minute(earlier, tz)
    return max(0, int(delta.total_seconds()) // 60)


def current_label(start: datetime, now: datetime, tz: tzinfo) -> str:
    """Label for the running talk: minutes elapsed since it started."""
    return f"running for {minutes_between(start, now, tz)} min"


def next_label(start: datetime, now: datetime, tz: tzinfo) -> str:
    """Label for the upcoming talk: local start time and minutes remaining."""
    local_start = start.astimezone(tz)
    return f"starts at {local_start:%H:%M} (in {minutes_between(now, start, tz)} min)"


def label_for(talk: Talk, is_current: bool, now: datetime, tz: tzinfo) -> str:
    """Return the live label for *talk*, empty for fallback talks."""
    if talk.start is None:
        return ""
    if is_current:
        return current_label(talk.start, now, tz)
    return next_label(talk.start, now, tz)


class LiveLabelUpdater:
    """Republish card labels from the surface's stored start instants.

    Args:
        surface: The surface holding the rendered cards.
        tz: The display timezone.
        clock: Returns the current instant; defaults to ``timezone.now``.
    """

    def __init__(
        self,
        surface: DisplaySurface,
        tz: tzinfo,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self.surface = surface
        self.tz = tz
        self.clock = clock

    def update(self, now: datetime | None = None) -> None:
        """Recompute both card labels for *now* (the clock when omitted)."""
        now = now if now is not None else self.clock()
        for element_id, is_current in ((CURRENT_CARD_ID, True), (NEXT_CARD_ID, False)):
            card = self.surface.get_element(element_id)
            if card is None or card.start is None:
                continue
            self.surface.update_label(element_id, label_for(card.talk, is_current, now, self.tz))
