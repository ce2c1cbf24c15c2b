"""Typed dataclasses for normalized schedule data.

Provides :class:`TimeWindow`, :class:`NormalizedTalk` and the
:class:`FallbackTalk` sentinels shown when no real talk qualifies, plus the
small value types passed between the store, the selector, and the display.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, NamedTuple

OVERVIEW = "overview"


def truncate_to_minute(instant: datetime, tz: tzinfo | None = None) -> datetime:
    """Drop seconds and microseconds, after converting to *tz* when given."""
    if tz is not None:
        instant = instant.astimezone(tz)
    return instant.replace(second=0, microsecond=0)


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """A talk's start and end instants.

    Both predicates compare at minute resolution: ``10:30:59`` counts as
    ``10:30``.  When *tz* is given, instants are converted to it before the
    seconds are dropped.

    Raises:
        ValueError: If ``end`` lies before ``start``.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end < self.start:
            msg = f"Time window ends ({self.end.isoformat()}) before it starts ({self.start.isoformat()})"
            raise ValueError(msg)

    def contains(self, now: datetime, tz: tzinfo | None = None) -> bool:
        """Return ``True`` when ``start <= now <= end`` (inclusive both ends)."""
        now_minute = truncate_to_minute(now, tz)
        return truncate_to_minute(self.start, tz) <= now_minute <= truncate_to_minute(self.end, tz)

    def starts_after(self, now: datetime, tz: tzinfo | None = None) -> bool:
        """Return ``True`` when the window starts strictly after *now*."""
        return truncate_to_minute(self.start, tz) > truncate_to_minute(now, tz)


@dataclass(frozen=True, slots=True)
class NormalizedTalk:
    """A talk from one room's schedule.

    Attributes:
        speaker: Public names of all speakers, joined with ``", "``.
        title: Talk title.
        subtitle: Talk subtitle, empty when the export has none.
        start: Start instant (timezone-aware).
        end: End instant, ``start + duration``.

    Raises:
        ValueError: If an instant is naive or ``end`` lies before ``start``.
    """

    speaker: str
    title: str
    subtitle: str
    start: datetime
    end: datetime

    is_fallback = False

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            msg = f"Talk {self.title!r} has a start or end without a UTC offset"
            raise ValueError(msg)
        if self.end < self.start:
            msg = f"Talk {self.title!r} ends ({self.end.isoformat()}) before it starts ({self.start.isoformat()})"
            raise ValueError(msg)

    @property
    def window(self) -> TimeWindow:
        """Return the talk's :class:`TimeWindow`."""
        return TimeWindow(self.start, self.end)

    def to_dict(self) -> dict[str, str]:
        """Serialize to a JSON-compatible dict with ISO 8601 instants."""
        return {
            "speaker": self.speaker,
            "title": self.title,
            "subtitle": self.subtitle,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> NormalizedTalk:
        """Construct a ``NormalizedTalk`` from :meth:`to_dict` output.

        Raises:
            KeyError: If a required key is missing.
            ValueError: If an instant cannot be parsed, is naive, or the
                talk ends before it starts.
            TypeError: If an instant is not a string.
        """
        return cls(
            speaker=data["speaker"],
            title=data["title"],
            subtitle=data["subtitle"],
            start=datetime.fromisoformat(data["start"]),
            end=datetime.fromisoformat(data["end"]),
        )


@dataclass(frozen=True, slots=True)
class FallbackTalk:
    """Sentinel shown in place of a talk when nothing qualifies.

    Carries a human-readable message as its title and no time fields.
    """

    message: str

    is_fallback = True
    speaker = ""
    subtitle = ""
    start = None
    end = None

    @property
    def title(self) -> str:
        """Return the fallback message."""
        return self.message

    def to_dict(self) -> dict[str, str | None]:
        """Serialize to a JSON-compatible dict with empty time fields."""
        return {
            "speaker": "",
            "title": self.message,
            "subtitle": "",
            "start": None,
            "end": None,
        }


FALLBACK_CURRENT = FallbackTalk("No talk is running right now")
FALLBACK_NEXT = FallbackTalk("Nothing more today")

Talk = NormalizedTalk | FallbackTalk
NormalizedSchedule = dict[str, list[NormalizedTalk]]


class SelectionResult(NamedTuple):
    """The current and next talk for one room at one instant."""

    current: Talk
    next: Talk


@dataclass(frozen=True, slots=True)
class DisplayState:
    """Which room or mode the kiosk shows, persisted across restarts.

    ``selected_room`` is a room name, :data:`OVERVIEW`, or ``None`` when
    nothing was selected yet.
    """

    selected_room: str | None = None

    @property
    def is_overview(self) -> bool:
        """Return ``True`` when the overview rotation is selected."""
        return self.selected_room == OVERVIEW
