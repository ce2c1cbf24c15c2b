"""Tests for the schedule synchronization service."""

import asyncio

import httpx
import pytest

from django_talkboard.schedule.client import ScheduleClient
from django_talkboard.schedule.fingerprint import compute_fingerprint
from django_talkboard.schedule.models import DisplayState
from django_talkboard.schedule.store import ScheduleStore, default_store
from django_talkboard.sync import ScheduleSyncService, SyncOutcome, TalkboardContext, build_sync_service
from tests.factories import make_raw_schedule, make_raw_talk


class DictStore:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class FakeClient:
    """Returns queued payloads; an exception in the queue is raised instead."""

    url = "https://pretalx.example.com/lit/schedule/export/schedule.json"

    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls = 0

    async def fetch_schedule(self):
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


class DisabledStore:
    def get(self, key):
        raise OSError("storage disabled")

    def set(self, key, value):
        raise OSError("quota exceeded")


def _service(*responses):
    kv = DictStore()
    return ScheduleSyncService(FakeClient(*responses), ScheduleStore(kv)), kv


def _edited_schedule():
    raw = make_raw_schedule()
    raw["schedule"]["conference"]["days"][0]["rooms"]["Raum C"] = [make_raw_talk("New room")]
    return raw


# ---------------------------------------------------------------------------
# Outcomes
# ---------------------------------------------------------------------------


def test_first_sync_persists_schedule_and_fingerprint() -> None:
    service, _kv = _service(make_raw_schedule())

    outcome = asyncio.run(service.synchronize())

    assert outcome is SyncOutcome.CHANGED
    assert service.context.rooms == ["Raum A", "Raum B"]
    assert service.store.load_schedule() == service.context.schedule
    assert service.store.load_fingerprint() == compute_fingerprint(make_raw_schedule())


def test_identical_export_is_unchanged() -> None:
    service, _kv = _service(make_raw_schedule(), make_raw_schedule())
    asyncio.run(service.synchronize())

    assert asyncio.run(service.synchronize()) is SyncOutcome.UNCHANGED


def test_edited_export_replaces_stored_schedule() -> None:
    service, _kv = _service(make_raw_schedule(), _edited_schedule())
    asyncio.run(service.synchronize())

    outcome = asyncio.run(service.synchronize())

    assert outcome is SyncOutcome.CHANGED
    assert service.store.load_schedule()["Raum C"][0].title == "New room"
    assert service.store.load_fingerprint() == compute_fingerprint(_edited_schedule())


def test_failed_fetch_keeps_stored_data() -> None:
    service, kv = _service(make_raw_schedule(), RuntimeError("offline"))
    asyncio.run(service.synchronize())
    before = dict(kv.data)

    outcome = asyncio.run(service.synchronize())

    assert outcome is SyncOutcome.FAILED
    assert kv.data == before
    assert service.context.rooms == ["Raum A", "Raum B"]
    assert service.context.last_sync_failed is True


@pytest.mark.parametrize(
    "invalid",
    [
        {"schedule": {"conference": {"days": []}}},
        {"schedule": {"conference": {"days": [{"rooms": {}}]}}},
        {"unexpected": True},
    ],
)
def test_invalid_export_keeps_stored_data(invalid) -> None:
    service, kv = _service(make_raw_schedule(), invalid)
    asyncio.run(service.synchronize())
    before = dict(kv.data)

    assert asyncio.run(service.synchronize()) is SyncOutcome.INVALID
    assert kv.data == before
    assert service.context.rooms == ["Raum A", "Raum B"]


def test_invalid_first_export_leaves_store_empty() -> None:
    service, kv = _service({"schedule": None})

    assert asyncio.run(service.synchronize()) is SyncOutcome.INVALID
    assert kv.data == {}
    assert service.context.schedule is None


def test_matching_fingerprint_without_loaded_schedule_is_stored_again() -> None:
    service, _kv = _service(make_raw_schedule())
    service.store.save_fingerprint(compute_fingerprint(make_raw_schedule()))

    assert asyncio.run(service.synchronize()) is SyncOutcome.CHANGED
    assert service.store.load_schedule() is not None


# ---------------------------------------------------------------------------
# Bootstrap and re-render decisions
# ---------------------------------------------------------------------------


def test_bootstrap_loads_persisted_state() -> None:
    first, kv = _service(make_raw_schedule())
    asyncio.run(first.synchronize())
    first.store.save_display_state(DisplayState("Raum B"))

    second = ScheduleSyncService(FakeClient(make_raw_schedule()), ScheduleStore(kv), TalkboardContext())
    context = second.bootstrap()

    assert context.rooms == ["Raum A", "Raum B"]
    assert context.fingerprint == compute_fingerprint(make_raw_schedule())
    assert context.display_state == DisplayState("Raum B")
    assert asyncio.run(second.synchronize()) is SyncOutcome.UNCHANGED


def test_synchronize_for_render_flags() -> None:
    service, _kv = _service(
        make_raw_schedule(),
        make_raw_schedule(),
        RuntimeError("offline"),
        RuntimeError("still offline"),
        make_raw_schedule(),
        make_raw_schedule(),
    )

    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.CHANGED, True)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.UNCHANGED, False)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.FAILED, False)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.FAILED, False)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.UNCHANGED, True)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.UNCHANGED, False)


def test_build_sync_service_uses_configuration(settings) -> None:
    settings.DJANGO_TALKBOARD = {"schedule": {"url": "https://pretalx.example.com/x.json", "timeout": 3}}

    service = build_sync_service()

    assert isinstance(service.client, ScheduleClient)
    assert service.client.url == "https://pretalx.example.com/x.json"
    assert service.client.timeout == 3
    assert service.context.schedule is None


def test_sync_through_http_into_django_cache() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=make_raw_schedule()))
    client = ScheduleClient("https://pretalx.example.com/lit/schedule.json", transport=transport)
    service = ScheduleSyncService(client, default_store())

    assert asyncio.run(service.synchronize()) is SyncOutcome.CHANGED
    assert list(default_store().load_schedule()) == ["Raum A", "Raum B"]


def test_disabled_storage_does_not_rerender_identical_exports() -> None:
    client = FakeClient(make_raw_schedule(), make_raw_schedule())
    service = ScheduleSyncService(client, ScheduleStore(DisabledStore()))

    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.CHANGED, True)
    assert asyncio.run(service.synchronize_for_render()) == (SyncOutcome.UNCHANGED, False)
    assert service.context.rooms == ["Raum A", "Raum B"]
