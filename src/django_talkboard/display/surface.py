"""Display surfaces the kiosk renders into.

:class:`DisplaySurface` is the interface the controller, the rotation and the
label updater talk to.  :class:`ConsoleSurface` is a plain-text surface that
writes frames to a stream, used by the ``run_talkboard`` management command.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol, TextIO

from django_talkboard.schedule.models import Talk

CURRENT_CARD_ID = "current"
NEXT_CARD_ID = "next"
FALLBACK_VIEW_MESSAGE = "No schedule available."


@dataclass(slots=True)
class Card:
    """A rendered talk card.

    Attributes:
        element_id: ``"current"`` or ``"next"``.
        heading: Card heading shown above the title.
        talk: The talk (or fallback) on the card.
        label: Live elapsed/remaining text, republished on every label tick.
    """

    element_id: str
    heading: str
    talk: Talk
    label: str = ""

    @property
    def start(self) -> datetime | None:
        """Return the talk's start instant, ``None`` for fallback cards."""
        return self.talk.start


class DisplaySurface(Protocol):
    """Rendering target driven by the talkboard."""

    def render_fallback(self) -> None: ...

    def render_room_list(self, rooms: list[str]) -> None: ...

    def render_card(self, talk: Talk, is_current: bool) -> Card: ...

    def clear(self) -> None: ...

    def get_element(self, element_id: str) -> Card | None: ...

    def update_label(self, element_id: str, text: str) -> None: ...


class ConsoleSurface:
    """Plain-text surface writing each frame to *stream*.

    Args:
        stream: Any text stream; a management command passes ``self.stdout``.
    """

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self.elements: dict[str, Card] = {}

    def _write(self, line: str) -> None:
        self.stream.write(f"{line}\n")

    def render_fallback(self) -> None:
        self.clear()
        self._write(FALLBACK_VIEW_MESSAGE)

    def render_room_list(self, rooms: list[str]) -> None:
        self.clear()
        self._write("Rooms: " + " | ".join(rooms))

    def render_card(self, talk: Talk, is_current: bool) -> Card:
        card = Card(
            element_id=CURRENT_CARD_ID if is_current else NEXT_CARD_ID,
            heading="Current Talk" if is_current else "Next Talk",
            talk=talk,
        )
        self.elements[card.element_id] = card
        self._write(f"== {card.heading} ==")
        self._write(talk.title)
        if talk.subtitle:
            self._write(talk.subtitle)
        if talk.speaker:
            self._write(talk.speaker)
        return card

    def clear(self) -> None:
        self.elements.clear()
        self._write("-" * 40)

    def get_element(self, element_id: str) -> Card | None:
        return self.elements.get(element_id)

    def update_label(self, element_id: str, text: str) -> None:
        card = self.elements.get(element_id)
        if card is None or card.label == text:
            return
        card.label = text
        self._write(f"[{element_id}] {text}")
