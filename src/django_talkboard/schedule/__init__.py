"""Schedule fetching, normalization, change detection, persistence and selection."""

from django_talkboard.schedule.client import ScheduleClient
from django_talkboard.schedule.fingerprint import ChangeDetector, compute_fingerprint
from django_talkboard.schedule.models import (
    FALLBACK_CURRENT,
    FALLBACK_NEXT,
    OVERVIEW,
    DisplayState,
    FallbackTalk,
    NormalizedTalk,
    SelectionResult,
    TimeWindow,
)
from django_talkboard.schedule.normalization import DurationError, normalize_schedule, validate_schedule
from django_talkboard.schedule.selection import select_talks
from django_talkboard.schedule.store import ScheduleStore

__all__ = [
    "FALLBACK_CURRENT",
    "FALLBACK_NEXT",
    "OVERVIEW",
    "ChangeDetector",
    "DisplayState",
    "DurationError",
    "FallbackTalk",
    "NormalizedTalk",
    "ScheduleClient",
    "ScheduleStore",
    "SelectionResult",
    "TimeWindow",
    "compute_fingerprint",
    "normalize_schedule",
    "select_talks",
    "validate_schedule",
]
