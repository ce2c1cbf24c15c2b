from io import StringIO

import pytest

from django_talkboard.display.labels import (
    LiveLabelUpdater,
    current_label,
    label_for,
    minutes_between,
    next_label,
)
from django_talkboard.display.surface import CURRENT_CARD_ID, NEXT_CARD_ID, ConsoleSurface
from django_talkboard.schedule.models import FALLBACK_CURRENT, FALLBACK_NEXT
from tests.factories import BERLIN, at, make_talk


@pytest.mark.unit
def test_minutes_between_uses_minute_resolution() -> None:
    assert minutes_between(at(10, 0, 59), at(10, 15, 1), BERLIN) == 15
    assert minutes_between(at(10, 15), at(10, 0), BERLIN) == 0


@pytest.mark.unit
def test_current_and_next_labels() -> None:
    assert current_label(at(10, 0), at(10, 12), BERLIN) == "running for 12 min"
    assert next_label(at(10, 30), at(10, 12), BERLIN) == "starts at 10:30 (in 18 min)"


@pytest.mark.unit
def test_label_for_fallback_is_empty() -> None:
    assert label_for(FALLBACK_CURRENT, True, at(10, 0), BERLIN) == ""
    assert label_for(FALLBACK_NEXT, False, at(10, 0), BERLIN) == ""


@pytest.mark.unit
def test_updater_refreshes_both_cards_from_stored_start() -> None:
    surface = ConsoleSurface(StringIO())
    surface.render_card(make_talk("A", at(10, 0), at(10, 30)), True)
    surface.render_card(make_talk("B", at(10, 30), at(11, 0)), False)
    updater = LiveLabelUpdater(surface, BERLIN, clock=lambda: at(10, 5))

    updater.update()
    assert surface.get_element(CURRENT_CARD_ID).label == "running for 5 min"
    assert surface.get_element(NEXT_CARD_ID).label == "starts at 10:30 (in 25 min)"

    updater.update(at(10, 20))
    assert surface.get_element(CURRENT_CARD_ID).label == "running for 20 min"
    assert surface.get_element(NEXT_CARD_ID).label == "starts at 10:30 (in 10 min)"
    assert surface.get_element(CURRENT_CARD_ID).talk.title == "A"


@pytest.mark.unit
def test_updater_skips_fallback_and_missing_cards() -> None:
    surface = ConsoleSurface(StringIO())
    surface.render_card(FALLBACK_CURRENT, True)
    updater = LiveLabelUpdater(surface, BERLIN, clock=lambda: at(10, 5))

    updater.update()

    assert surface.get_element(CURRENT_CARD_ID).label == ""
    assert surface.get_element(NEXT_CARD_ID) is None
