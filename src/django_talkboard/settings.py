"""Typed configuration for django-talkboard.

Reads a single ``DJANGO_TALKBOARD`` dict from Django settings and exposes it
as composed, frozen dataclasses with sensible defaults.

Usage::

    from django_talkboard.settings import get_config

    config = get_config()
    config.schedule.url
    config.intervals.sync_seconds
    config.display.tzinfo
"""

import functools
import zoneinfo
from collections.abc import Mapping
from dataclasses import dataclass, field

from django.conf import settings
from django.test.signals import setting_changed

DEFAULT_SCHEDULE_URL = "https://pretalx.luga.de/lit-2024/schedule/export/schedule.json"


@dataclass(frozen=True, slots=True)
class ScheduleSourceConfig:
    """Remote schedule export configuration."""

    url: str = DEFAULT_SCHEDULE_URL
    timeout: float = 30


@dataclass(frozen=True, slots=True)
class DisplayConfig:
    """Kiosk display configuration.

    ``hidden_rooms`` are kept in the stored schedule but never offered as a
    room button and never visited by the overview rotation.
    """

    timezone: str = "Europe/Berlin"
    hidden_rooms: tuple[str, ...] = ()
    overview_label: str = "Overview"

    @property
    def tzinfo(self) -> zoneinfo.ZoneInfo:
        """Return the display timezone as a ``ZoneInfo`` instance."""
        return zoneinfo.ZoneInfo(self.timezone)


@dataclass(frozen=True, slots=True)
class IntervalConfig:
    """Timer intervals in seconds."""

    sync_seconds: float = 5
    rotation_seconds: float = 5
    label_seconds: float = 60


@dataclass(frozen=True, slots=True)
class TalkboardConfig:
    """Top-level django-talkboard configuration."""

    schedule: ScheduleSourceConfig = field(default_factory=ScheduleSourceConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    intervals: IntervalConfig = field(default_factory=IntervalConfig)
    cache_alias: str = "default"


def _section(raw_data: dict[str, object], key: str) -> dict[str, object]:
    """Pop a nested section from the raw settings dict, checking its type."""
    section = raw_data.pop(key, {})
    if not isinstance(section, Mapping):
        msg = f"DJANGO_TALKBOARD['{key}'] must be a mapping (dict-like object)"
        raise TypeError(msg)
    return dict(section)


@functools.lru_cache(maxsize=1)
def get_config() -> TalkboardConfig:
    """Build and return the talkboard configuration.

    Reads ``settings.DJANGO_TALKBOARD`` (a plain dict) and returns a frozen
    :class:`TalkboardConfig`.  The result is cached; the cache is cleared
    automatically when Django's ``setting_changed`` signal fires (e.g. inside
    ``override_settings``).
    """
    raw = getattr(settings, "DJANGO_TALKBOARD", {})
    if not isinstance(raw, Mapping):
        msg = "DJANGO_TALKBOARD must be a mapping (dict-like object)"
        raise TypeError(msg)
    raw_data = dict(raw)

    schedule_data = _section(raw_data, "schedule")
    display_data = _section(raw_data, "display")
    intervals_data = _section(raw_data, "intervals")
    if "hidden_rooms" in display_data:
        hidden = display_data["hidden_rooms"]
        if isinstance(hidden, str) or not isinstance(hidden, (list, tuple, set, frozenset)):
            msg = "DJANGO_TALKBOARD['display']['hidden_rooms'] must be a list of room names"
            raise TypeError(msg)
        display_data["hidden_rooms"] = tuple(str(room) for room in hidden)

    config = TalkboardConfig(
        schedule=ScheduleSourceConfig(**schedule_data),
        display=DisplayConfig(**display_data),
        intervals=IntervalConfig(**intervals_data),
        **raw_data,
    )
    _validate_talkboard_config(config)
    return config


def _validate_talkboard_config(config: TalkboardConfig) -> None:
    """Validate high-impact configuration values with clear error messages."""
    if not isinstance(config.schedule.url, str) or not config.schedule.url.strip():
        msg = "DJANGO_TALKBOARD['schedule']['url'] must be a non-empty string"
        raise ValueError(msg)
    if not isinstance(config.schedule.timeout, (int, float)) or config.schedule.timeout <= 0:
        msg = "DJANGO_TALKBOARD['schedule']['timeout'] must be a positive number"
        raise ValueError(msg)
    for name in ("sync_seconds", "rotation_seconds", "label_seconds"):
        value = getattr(config.intervals, name)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            msg = f"DJANGO_TALKBOARD['intervals']['{name}'] must be a positive number"
            raise ValueError(msg)
    if not isinstance(config.display.overview_label, str) or not config.display.overview_label.strip():
        msg = "DJANGO_TALKBOARD['display']['overview_label'] must be a non-empty string"
        raise ValueError(msg)
    try:
        config.display.tzinfo  # noqa: B018
    except (zoneinfo.ZoneInfoNotFoundError, ValueError, TypeError) as exc:
        msg = f"DJANGO_TALKBOARD['display']['timezone'] is not a known timezone: {config.display.timezone!r}"
        raise ValueError(msg) from exc
    if not isinstance(config.cache_alias, str) or not config.cache_alias:
        msg = "DJANGO_TALKBOARD['cache_alias'] must be a non-empty string"
        raise ValueError(msg)


def _clear_config_cache(*, setting: str, **kwargs: object) -> None:  # noqa: ARG001
    """Clear the cached config when Django settings change during tests."""
    if setting == "DJANGO_TALKBOARD":
        get_config.cache_clear()


setting_changed.connect(_clear_config_cache, dispatch_uid="django_talkboard.settings.clear_config_cache")
