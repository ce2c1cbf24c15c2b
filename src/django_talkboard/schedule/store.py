"""Persistence facade over a string-keyed key-value store.

:class:`ScheduleStore` reads and writes the normalized schedule, the export
fingerprint and the display state as JSON strings.  Persistence is a cache:
every read degrades to ``None`` or a default on a missing key, a backend
error or malformed JSON, and failed writes are logged and dropped so the
in-memory state keeps working for the running session.
"""

import json
import logging
from typing import Any, Protocol

from django.core.cache import caches

from django_talkboard.schedule.models import DisplayState, NormalizedSchedule, NormalizedTalk

logger = logging.getLogger(__name__)

SCHEDULE_KEY = "schedule"
FINGERPRINT_KEY = "scheduleHash"
ROOM_KEY = "room"


class KeyValueStore(Protocol):
    """Minimal get/set interface over string keys and string values."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class CacheKeyValueStore:
    """:class:`KeyValueStore` backed by a Django cache alias.

    Values never expire.  Use a persistent backend (file-based, database,
    Redis) for the kiosk so the schedule survives restarts.

    Args:
        alias: Name of the cache in ``settings.CACHES``.
    """

    def __init__(self, alias: str = "default") -> None:
        self.alias = alias

    def get(self, key: str) -> str | None:
        return caches[self.alias].get(key)

    def set(self, key: str, value: str) -> None:
        caches[self.alias].set(key, value, timeout=None)


class ScheduleStore:
    """Read and write talkboard state through a :class:`KeyValueStore`.

    Args:
        kv: The backing key-value store.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv

    def _read_json(self, key: str) -> Any:
        try:
            raw = self.kv.get(key)
        except Exception:  # noqa: BLE001
            logger.warning("Could not read %r from the store", key, exc_info=True)
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.warning("Stored value for %r is not valid JSON; ignoring it", key)
            return None

    def _write_json(self, key: str, value: Any) -> bool:
        try:
            self.kv.set(key, json.dumps(value))
        except Exception:  # noqa: BLE001
            logger.warning("Could not write %r to the store", key, exc_info=True)
            return False
        return True

    def load_schedule(self) -> NormalizedSchedule | None:
        """Return the persisted schedule, or ``None`` when absent or unreadable."""
        data = self._read_json(SCHEDULE_KEY)
        if not isinstance(data, dict):
            return None
        try:
            return {
                str(room): [NormalizedTalk.from_dict(talk) for talk in talks]
                for room, talks in data.items()
            }
        except (KeyError, TypeError, ValueError, AttributeError):
            logger.warning("Stored schedule is malformed; ignoring it")
            return None

    def save_schedule(self, schedule: NormalizedSchedule) -> bool:
        """Persist *schedule*, replacing any previous one.

        Returns:
            ``True`` when the write succeeded.
        """
        data = {room: [talk.to_dict() for talk in talks] for room, talks in schedule.items()}
        return self._write_json(SCHEDULE_KEY, data)

    def load_fingerprint(self) -> str | None:
        """Return the persisted export fingerprint, or ``None``."""
        value = self._read_json(FINGERPRINT_KEY)
        return value if isinstance(value, str) and value else None

    def save_fingerprint(self, fingerprint: str) -> bool:
        """Persist the export fingerprint."""
        return self._write_json(FINGERPRINT_KEY, fingerprint)

    def clear_fingerprint(self) -> bool:
        """Forget the stored fingerprint so the next sync counts as changed."""
        return self._write_json(FINGERPRINT_KEY, None)

    def load_display_state(self) -> DisplayState:
        """Return the persisted display state, or an empty one."""
        value = self._read_json(ROOM_KEY)
        if isinstance(value, str) and value:
            return DisplayState(selected_room=value)
        return DisplayState()

    def save_display_state(self, state: DisplayState) -> bool:
        """Persist which room or mode is shown."""
        return self._write_json(ROOM_KEY, state.selected_room)


def default_store(alias: str = "default") -> ScheduleStore:
    """Build a :class:`ScheduleStore` over the Django cache *alias*."""
    return ScheduleStore(CacheKeyValueStore(alias))
