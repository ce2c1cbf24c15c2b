"""Management command running the talkboard kiosk in the terminal.

Usage::

    # Resume the persisted room or mode
    manage.py run_talkboard

    # Rotate through all rooms
    manage.py run_talkboard --overview

    # Show one room
    manage.py run_talkboard --room "Raum A"

    # Sync once, render one frame, and exit
    manage.py run_talkboard --room "Raum A" --once
"""

import asyncio
from typing import TYPE_CHECKING

from django.core.management.base import BaseCommand

from django_talkboard.display.surface import ConsoleSurface
from django_talkboard.runner import build_runner
from django_talkboard.schedule.models import OVERVIEW, DisplayState

if TYPE_CHECKING:
    import argparse

    from django_talkboard.runner import TalkboardRunner
    from django_talkboard.sync import SyncOutcome


class Command(BaseCommand):
    """Run the talkboard kiosk, rendering to standard output."""

    help = "Run the talkboard kiosk, rendering to standard output"

    def add_arguments(self, parser: "argparse.ArgumentParser") -> None:
        """Register command-line arguments.

        Args:
            parser: The argument parser to add arguments to.
        """
        mode = parser.add_mutually_exclusive_group()
        mode.add_argument(
            "--room",
            default=None,
            help="Show this room instead of the persisted selection.",
        )
        mode.add_argument(
            "--overview",
            action="store_true",
            default=False,
            help="Rotate through all rooms.",
        )
        parser.add_argument(
            "--once",
            action="store_true",
            default=False,
            help="Sync once, render one frame, and exit.",
        )

    def handle(self, **options: object) -> None:
        """Build the runner and drive it until interrupted."""
        initial: DisplayState | None = None
        if options["overview"]:
            initial = DisplayState(selected_room=OVERVIEW)
        elif options["room"]:
            initial = DisplayState(selected_room=str(options["room"]))

        runner = build_runner(ConsoleSurface(self.stdout))
        if options["once"]:
            outcome = asyncio.run(self._run_once(runner, initial))
            self.stdout.write(self.style.SUCCESS(f"Schedule sync: {outcome}"))
            return

        try:
            asyncio.run(runner.run(initial))
        except KeyboardInterrupt:
            self.stdout.write(self.style.WARNING("Talkboard stopped"))

    @staticmethod
    async def _run_once(runner: "TalkboardRunner", initial: DisplayState | None) -> "SyncOutcome":
        """Start the runner for a single frame without leaving timers behind."""
        outcome = await runner.start(initial)
        runner.scheduler.stop()
        return outcome
