"""Synchronization service keeping the stored schedule in step with the export.

Provides :class:`ScheduleSyncService`, which fetches the remote export,
validates it, detects whether it changed since the last persisted copy, and
if so normalizes and persists it wholesale.  The service works on an
explicit :class:`TalkboardContext` so several kiosks (or tests) can run
side by side without sharing module state.
"""

import enum
import logging
from dataclasses import dataclass, field

from django_talkboard.schedule.client import ScheduleClient
from django_talkboard.schedule.fingerprint import ChangeDetector, compute_fingerprint
from django_talkboard.schedule.models import DisplayState, NormalizedSchedule
from django_talkboard.schedule.normalization import normalize_schedule, validate_schedule
from django_talkboard.schedule.store import ScheduleStore, default_store
from django_talkboard.settings import get_config

logger = logging.getLogger(__name__)


class SyncOutcome(enum.StrEnum):
    """Result of one synchronization attempt."""

    CHANGED = "changed"
    UNCHANGED = "unchanged"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass
class TalkboardContext:
    """In-memory state of one kiosk.

    Attributes:
        schedule: The normalized schedule, or ``None`` before the first
            successful sync (and with nothing persisted).
        fingerprint: Fingerprint of the export the schedule came from.
        display_state: Which room or mode is shown.
        last_sync_failed: Whether the previous sync attempt failed to fetch.
    """

    schedule: NormalizedSchedule | None = None
    fingerprint: str | None = None
    display_state: DisplayState = field(default_factory=DisplayState)
    last_sync_failed: bool = False

    @property
    def rooms(self) -> list[str]:
        """Return room names in schedule order."""
        return list(self.schedule or {})


class ScheduleSyncService:
    """Fetches, validates, and persists the schedule export.

    A failed fetch or an invalid export never touches previously stored
    data.

    Args:
        client: The export client.
        store: The persistence facade.
        context: The kiosk state to update.
    """

    def __init__(
        self,
        client: ScheduleClient,
        store: ScheduleStore,
        context: TalkboardContext | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.context = context if context is not None else TalkboardContext()
        self.detector = ChangeDetector(store)

    def bootstrap(self) -> TalkboardContext:
        """Load persisted schedule, fingerprint, and display state into the context.

        Returns:
            The updated context.
        """
        self.context.schedule = self.store.load_schedule()
        self.context.fingerprint = self.store.load_fingerprint()
        self.context.display_state = self.store.load_display_state()
        logger.debug(
            "Bootstrapped talkboard with %d stored rooms, selected %r",
            len(self.context.rooms),
            self.context.display_state.selected_room,
        )
        return self.context

    async def synchronize(self) -> SyncOutcome:
        """Run one synchronization against the remote export.

        Returns:
            ``FAILED`` when the fetch failed, ``INVALID`` when the export has
            no rooms for the first day, ``UNCHANGED`` when the fingerprint
            matches the stored one, otherwise ``CHANGED`` after persisting.
        """
        try:
            raw = await self.client.fetch_schedule()
        except RuntimeError as exc:
            logger.warning("Could not fetch schedule data: %s", exc)
            self.context.last_sync_failed = True
            return SyncOutcome.FAILED

        if not validate_schedule(raw):
            logger.warning("Schedule export from %s failed validation; keeping stored data", self.client.url)
            self.context.last_sync_failed = False
            return SyncOutcome.INVALID

        fingerprint = compute_fingerprint(raw)
        if self.context.schedule is not None and not self.detector.has_changed(
            raw, fingerprint, known=self.context.fingerprint
        ):
            logger.debug("Schedule export unchanged (%s)", fingerprint[:12])
            self.context.last_sync_failed = False
            return SyncOutcome.UNCHANGED

        schedule = normalize_schedule(raw)
        if schedule is None:
            self.context.last_sync_failed = False
            return SyncOutcome.INVALID

        if self.store.save_schedule(schedule):
            self.store.save_fingerprint(fingerprint)
        self.context.schedule = schedule
        self.context.fingerprint = fingerprint
        self.context.last_sync_failed = False
        logger.info(
            "Stored changed schedule with %d rooms and %d talks (%s)",
            len(schedule),
            sum(len(talks) for talks in schedule.values()),
            fingerprint[:12],
        )
        return SyncOutcome.CHANGED

    async def synchronize_for_render(self) -> tuple[SyncOutcome, bool]:
        """Synchronize and report whether the display should be re-rendered.

        A re-render is due when the export changed, and also on the first
        successful fetch after a failed one.

        Returns:
            The outcome and the re-render flag.
        """
        recovering = self.context.last_sync_failed
        outcome = await self.synchronize()
        if outcome is SyncOutcome.CHANGED:
            return outcome, True
        return outcome, recovering and outcome is not SyncOutcome.FAILED


def build_sync_service(context: TalkboardContext | None = None) -> ScheduleSyncService:
    """Build a :class:`ScheduleSyncService` from the Django configuration.

    Args:
        context: An existing context to share, or ``None`` for a fresh one.

    Returns:
        The configured service.
    """
    config = get_config()
    client = ScheduleClient(config.schedule.url, timeout=config.schedule.timeout)
    return ScheduleSyncService(client, default_store(config.cache_alias), context)
