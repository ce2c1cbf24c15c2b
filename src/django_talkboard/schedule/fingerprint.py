"""Content fingerprints for change detection of the raw schedule export.

The fingerprint is a SHA-256 hex digest of a canonical JSON encoding with
sorted keys, so a payload that only differs in upstream key order hashes the
same.  It is compared for equality only.
"""

import hashlib
import json
import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from django_talkboard.schedule.store import ScheduleStore

logger = logging.getLogger(__name__)


def canonical_json(raw: Any) -> str:
    """Encode *raw* deterministically: sorted keys, compact separators, no ASCII escaping."""
    return json.dumps(raw, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def compute_fingerprint(raw: Any) -> str:
    """Return the 64-character SHA-256 hex digest of :func:`canonical_json`."""
    return hashlib.sha256(canonical_json(raw).encode("utf-8")).hexdigest()


class ChangeDetector:
    """Compare a raw export against the last persisted fingerprint.

    Args:
        store: The store holding the previous fingerprint.
    """

    def __init__(self, store: "ScheduleStore") -> None:
        self.store = store

    def has_changed(self, raw: Any, fingerprint: str | None = None, known: str | None = None) -> bool:
        """Return ``True`` when *raw* differs from the stored export.

        *known* is used when the store has no fingerprint (disabled or
        failing storage).  With neither, the export counts as changed so
        the first synchronization persists the schedule.

        Args:
            raw: The decoded export.
            fingerprint: A precomputed fingerprint of *raw*, if available.
            known: The fingerprint held in memory by the running kiosk.
        """
        stored = self.store.load_fingerprint() or known
        if not stored:
            logger.debug("No stored schedule fingerprint; treating export as changed")
            return True
        if fingerprint is None:
            fingerprint = compute_fingerprint(raw)
        return stored != fingerprint
