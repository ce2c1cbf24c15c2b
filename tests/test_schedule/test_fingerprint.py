from django_talkboard.schedule.fingerprint import ChangeDetector, canonical_json, compute_fingerprint
from django_talkboard.schedule.store import ScheduleStore
from tests.factories import make_raw_schedule, make_raw_talk


class DictStore:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


def test_fingerprint_is_a_stable_sha256_hex_digest() -> None:
    raw = make_raw_schedule()

    first = compute_fingerprint(raw)

    assert len(first) == 64
    assert first == compute_fingerprint(make_raw_schedule())


def test_fingerprint_ignores_key_order() -> None:
    assert compute_fingerprint({"a": 1, "b": [1, 2]}) == compute_fingerprint({"b": [1, 2], "a": 1})
    assert canonical_json({"b": 1, "a": "ü"}) == '{"a":"ü","b":1}'


def test_fingerprint_changes_with_a_single_title() -> None:
    original = make_raw_schedule()
    edited = make_raw_schedule()
    edited["schedule"]["conference"]["days"][0]["rooms"]["Raum A"][1] = make_raw_talk(
        "Second (updated)", "2024-04-20T10:30:00+02:00"
    )

    assert compute_fingerprint(original) != compute_fingerprint(edited)


def test_change_detector_without_stored_fingerprint_reports_change() -> None:
    detector = ChangeDetector(ScheduleStore(DictStore()))

    assert detector.has_changed(make_raw_schedule()) is True


def test_change_detector_compares_with_stored_fingerprint() -> None:
    store = ScheduleStore(DictStore())
    raw = make_raw_schedule()
    store.save_fingerprint(compute_fingerprint(raw))
    detector = ChangeDetector(store)

    assert detector.has_changed(raw) is False
    assert detector.has_changed(raw, compute_fingerprint(raw)) is False
    assert detector.has_changed({"schedule": "different"}) is True


def test_change_detector_falls_back_to_known_fingerprint() -> None:
    detector = ChangeDetector(ScheduleStore(DictStore()))
    raw = make_raw_schedule()

    assert detector.has_changed(raw, known=compute_fingerprint(raw)) is False
    assert detector.has_changed(raw, known="0" * 64) is True


def test_change_detector_prefers_stored_fingerprint_over_known() -> None:
    store = ScheduleStore(DictStore())
    raw = make_raw_schedule()
    store.save_fingerprint("0" * 64)

    assert ChangeDetector(store).has_changed(raw, known=compute_fingerprint(raw)) is True
