"""Validation and normalization of raw Pretalx ``schedule.json`` exports.

The export nests rooms under ``schedule.conference.days[N].rooms`` as a
mapping of room name to a list of talk records.  Only the first day is
considered.  Each talk record carries an ISO 8601 ``date``, an ``HH:MM``
``duration``, ``title``, ``subtitle`` and a ``persons`` list.

Everything here is a pure transform; persistence lives in
:mod:`django_talkboard.schedule.store`.
"""

import logging
import re
from collections.abc import Mapping
from datetime import datetime, timedelta
from typing import Any

from django_talkboard.schedule.models import NormalizedSchedule, NormalizedTalk

logger = logging.getLogger(__name__)

_DURATION_RE = re.compile(r"^\s*(\d+):(\d{1,2})\s*$")
_MINUTES_PER_HOUR = 60


class DurationError(ValueError):
    """Raised when a talk duration is not a non-negative ``H(H):MM`` string."""


def localized(value: str | dict[str, Any] | None) -> str:
    """Extract a display string from a Pretalx multilingual field.

    Pretalx returns localized fields as either a plain string or a dict
    keyed by language code (e.g. ``{"en": "Talk", "de": "Vortrag"}``).
    This helper returns the ``en`` value when available, falling back to
    the first available language, or an empty string for ``None``.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if not isinstance(value, dict):
        return str(value)

    if "en" in value:
        return str(value["en"])
    if "name" in value:
        return localized(value["name"])
    return next((v for v in value.values() if isinstance(v, str)), "")


def _first_day_rooms(raw: object) -> object:
    """Walk ``schedule.conference.days[0].rooms``, returning ``None`` on any gap."""
    node: object = raw
    for key in ("schedule", "conference", "days"):
        if not isinstance(node, Mapping):
            return None
        node = node.get(key)
    if not isinstance(node, list) or not node:
        return None
    day = node[0]
    if not isinstance(day, Mapping):
        return None
    return day.get("rooms")


def validate_schedule(raw: object) -> bool:
    """Check that *raw* has a non-empty ``schedule.conference.days[0].rooms`` mapping.

    Args:
        raw: The decoded export, possibly ``None`` or malformed.

    Returns:
        ``True`` when the first day has at least one room.
    """
    rooms = _first_day_rooms(raw)
    return isinstance(rooms, Mapping) and len(rooms) > 0


def parse_duration(value: str) -> timedelta:
    """Parse a Pretalx ``H(H):MM`` duration string.

    The first component is hours and the second minutes.  Both must be
    non-negative integers and minutes must stay below 60.

    Args:
        value: The raw duration, e.g. ``"01:30"``.

    Returns:
        The duration as a ``timedelta``.

    Raises:
        DurationError: If the value is not a well-formed duration.
    """
    if not isinstance(value, str):
        msg = f"Duration must be a string, got {type(value).__name__}"
        raise DurationError(msg)
    match = _DURATION_RE.match(value)
    if match is None:
        msg = f"Malformed duration {value!r}, expected H(H):MM"
        raise DurationError(msg)
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= _MINUTES_PER_HOUR:
        msg = f"Malformed duration {value!r}, minutes must be below 60"
        raise DurationError(msg)
    return timedelta(hours=hours, minutes=minutes)


def duration_in_milliseconds(value: str) -> int:
    """Return the length of a ``H(H):MM`` duration in milliseconds.

    Raises:
        DurationError: If the value is not a well-formed duration.
    """
    return int(parse_duration(value).total_seconds()) * 1000


def concat_speakers(persons: list[dict[str, Any]] | None) -> str:
    """Join the ``public_name`` of every person with ``", "``, keeping order.

    Entries without a public name are skipped.
    """
    names = [
        localized(person.get("public_name"))
        for person in persons or []
        if isinstance(person, Mapping) and person.get("public_name")
    ]
    return ", ".join(names)


def normalize_talk(data: Mapping[str, Any]) -> NormalizedTalk:
    """Convert one raw talk record into a :class:`NormalizedTalk`.

    Args:
        data: A single entry from a room's talk list.

    Returns:
        The normalized talk with ``end = start + duration``.

    Raises:
        DurationError: If the duration is malformed.
        ValueError: If the start date is missing, unparsable, or naive.
    """
    date_str = data.get("date")
    if not isinstance(date_str, str) or not date_str:
        msg = "Talk has no start date"
        raise ValueError(msg)
    start = datetime.fromisoformat(date_str)
    if start.tzinfo is None:
        msg = f"Talk start {date_str!r} has no UTC offset"
        raise ValueError(msg)
    duration = parse_duration(data.get("duration"))

    return NormalizedTalk(
        speaker=concat_speakers(data.get("persons")),
        title=localized(data.get("title")),
        subtitle=localized(data.get("subtitle")),
        start=start,
        end=start + duration,
    )


def normalize_schedule(raw: object) -> NormalizedSchedule | None:
    """Transform a raw export into a room-to-talks mapping.

    Rooms keep the export's order, and so do the talks within a room.  A
    malformed talk is logged and left out; the rest of the room survives.

    Args:
        raw: The decoded export, possibly ``None`` or malformed.

    Returns:
        The normalized schedule, or ``None`` when validation fails.
    """
    if not validate_schedule(raw):
        logger.warning("Schedule export has no rooms for the first day; skipping normalization")
        return None

    rooms = _first_day_rooms(raw)
    schedule: NormalizedSchedule = {}
    skipped = 0
    for room, raw_talks in rooms.items():
        talks: list[NormalizedTalk] = []
        if not isinstance(raw_talks, list):
            logger.warning("Talks of room %s are not a list; showing the room as empty", room)
            raw_talks = []
        for raw_talk in raw_talks:
            if not isinstance(raw_talk, Mapping):
                skipped += 1
                logger.warning("Skipping non-object talk record in room %s", room)
                continue
            try:
                talks.append(normalize_talk(raw_talk))
            except (ValueError, TypeError) as exc:
                skipped += 1
                logger.warning("Skipping talk %r in room %s: %s", raw_talk.get("title"), room, exc)
        schedule[str(room)] = talks

    logger.debug(
        "Normalized %d rooms with %d talks (%d skipped)",
        len(schedule),
        sum(len(talks) for talks in schedule.values()),
        skipped,
    )
    return schedule
