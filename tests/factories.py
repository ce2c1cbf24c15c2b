"""Builders for raw schedule exports and normalized talks used across tests."""

from datetime import datetime
from zoneinfo import ZoneInfo

from django_talkboard.schedule.models import NormalizedTalk

BERLIN = ZoneInfo("Europe/Berlin")


def at(hour: int, minute: int = 0, second: int = 0) -> datetime:
    """Return 2024-04-20 at the given Berlin wall-clock time."""
    return datetime(2024, 4, 20, hour, minute, second, tzinfo=BERLIN)


def make_raw_talk(title="A Talk", start="2024-04-20T10:00:00+02:00", duration="00:30", **overrides):
    talk = {
        "guid": f"guid-{title}",
        "date": start,
        "start": start[11:16],
        "duration": duration,
        "room": "Raum A",
        "title": title,
        "subtitle": "",
        "persons": [{"public_name": "Ada Lovelace"}],
    }
    talk.update(overrides)
    return talk


def make_raw_schedule(rooms=None, *, extra_days=()):
    if rooms is None:
        rooms = {
            "Raum A": [
                make_raw_talk("Opening", "2024-04-20T10:00:00+02:00", "00:30"),
                make_raw_talk("Second", "2024-04-20T10:30:00+02:00", "00:30"),
                make_raw_talk("Third", "2024-04-20T11:15:00+02:00", "00:30"),
            ],
            "Raum B": [
                make_raw_talk(
                    "Workshop",
                    "2024-04-20T10:00:00+02:00",
                    "01:00",
                    persons=[{"public_name": "Grace Hopper"}, {"public_name": "Alan Turing"}],
                ),
            ],
        }
    days = [{"index": 1, "date": "2024-04-20", "rooms": rooms}, *extra_days]
    return {
        "$schema": "https://c3voc.de/schedule/schema.json",
        "schedule": {
            "version": "1.0",
            "conference": {"acronym": "lit-2024", "title": "LIT 2024", "days": days},
        },
    }


def make_talk(title="A Talk", start=None, end=None, speaker="Ada Lovelace", subtitle=""):
    return NormalizedTalk(
        speaker=speaker,
        title=title,
        subtitle=subtitle,
        start=start or at(10, 0),
        end=end or at(10, 30),
    )
