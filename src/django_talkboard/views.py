"""JSON views for browser-based room displays.

Both views read the stored schedule and display state; they never fetch the
remote export.  Run ``manage.py sync_schedule`` (or the kiosk itself) to keep
the store fresh.
"""

from datetime import datetime, tzinfo
from typing import TYPE_CHECKING

from django.http import JsonResponse
from django.utils import timezone
from django.views import View

from django_talkboard.display.labels import label_for
from django_talkboard.schedule.selection import select_talks
from django_talkboard.schedule.store import default_store
from django_talkboard.settings import get_config

if TYPE_CHECKING:
    from django.http import HttpRequest

    from django_talkboard.schedule.models import Talk


def _card(talk: "Talk", is_current: bool, now: datetime, tz: tzinfo) -> dict[str, object]:
    """Serialize a talk card with its live label."""
    return {
        **talk.to_dict(),
        "is_fallback": talk.is_fallback,
        "heading": "Current Talk" if is_current else "Next Talk",
        "label": label_for(talk, is_current, now, tz),
    }


class RoomListJSONView(View):
    """JSON endpoint listing the rooms a display can switch between.

    Hidden rooms are left out.  ``available`` is ``False`` until a schedule
    has been stored.
    """

    def get(self, _request: "HttpRequest", **_kwargs: str) -> JsonResponse:
        """Return the visible rooms, the overview caption and the selected room.

        Args:
            _request: The incoming HTTP request.
            **_kwargs: URL keyword arguments (unused).

        Returns:
            A JSON response with the room list.
        """
        config = get_config()
        store = default_store(config.cache_alias)
        schedule = store.load_schedule()
        hidden = set(config.display.hidden_rooms)
        rooms = [room for room in schedule or {} if room not in hidden]

        return JsonResponse(
            {
                "available": schedule is not None,
                "overview_label": config.display.overview_label,
                "rooms": rooms,
                "selected_room": store.load_display_state().selected_room,
            }
        )


class RoomNowJSONView(View):
    """JSON endpoint with the current and next talk of one room.

    Selection happens at request time in the display timezone.  Unknown
    rooms and a missing schedule produce the fallback cards, not an error.
    """

    def get(self, _request: "HttpRequest", room: str, **_kwargs: str) -> JsonResponse:
        """Return the current and next talk cards for *room*.

        Args:
            _request: The incoming HTTP request.
            room: The room name from the URL.
            **_kwargs: URL keyword arguments (unused).

        Returns:
            A JSON response with ``current`` and ``next`` cards.
        """
        config = get_config()
        tz = config.display.tzinfo
        schedule = default_store(config.cache_alias).load_schedule() or {}
        now = timezone.now()
        selection = select_talks(schedule.get(room), now, tz)

        return JsonResponse(
            {
                "room": room,
                "now": now.astimezone(tz).isoformat(),
                "current": _card(selection.current, True, now, tz),
                "next": _card(selection.next, False, now, tz),
            }
        )
