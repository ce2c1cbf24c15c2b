"""Pick the current and next talk of a room at a given instant.

All comparisons happen at minute resolution in the display timezone, so a
talk ending at ``10:30:59`` is still current at ``10:30`` but not at
``10:31``.  The room's talk list is assumed to be in chronological order.
"""

from collections.abc import Sequence
from datetime import datetime, tzinfo

from django_talkboard.schedule.models import (
    FALLBACK_CURRENT,
    FALLBACK_NEXT,
    NormalizedTalk,
    SelectionResult,
)


def select_talks(
    talks: Sequence[NormalizedTalk] | None,
    now: datetime,
    tz: tzinfo,
) -> SelectionResult:
    """Return the current and the next talk for one room.

    The current talk is the first talk in sequence order whose window
    contains *now*, both ends inclusive.  The next talk is the first talk
    after the current one's position (or from the top when nothing is
    current) that starts strictly after *now*.  Missing results fall back
    to :data:`FALLBACK_CURRENT` and :data:`FALLBACK_NEXT`.

    Args:
        talks: The room's talks in schedule order; ``None`` or empty for an
            unknown room.
        now: The reference instant (timezone-aware).
        tz: The display timezone.

    Returns:
        A ``(current, next)`` :class:`SelectionResult`.
    """
    if not talks:
        return SelectionResult(FALLBACK_CURRENT, FALLBACK_NEXT)

    current_index = next(
        (index for index, talk in enumerate(talks) if talk.window.contains(now, tz)),
        -1,
    )
    next_talk = next(
        (talk for talk in talks[current_index + 1 :] if talk.window.starts_after(now, tz)),
        FALLBACK_NEXT,
    )
    current = talks[current_index] if current_index >= 0 else FALLBACK_CURRENT
    return SelectionResult(current, next_talk)
