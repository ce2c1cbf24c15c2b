"""Management command to synchronize the schedule export into the store once.

Usage::

    manage.py sync_schedule

    # Re-normalize and persist even when the export is unchanged
    manage.py sync_schedule --force
"""

import asyncio
from typing import TYPE_CHECKING

from django.core.management.base import BaseCommand, CommandError

from django_talkboard.sync import SyncOutcome, build_sync_service

if TYPE_CHECKING:
    import argparse


class Command(BaseCommand):
    """Fetch the schedule export and persist it when it changed."""

    help = "Fetch the schedule export and persist it when it changed"

    def add_arguments(self, parser: "argparse.ArgumentParser") -> None:
        """Register command-line arguments.

        Args:
            parser: The argument parser to add arguments to.
        """
        parser.add_argument(
            "--force",
            action="store_true",
            default=False,
            help="Forget the stored fingerprint so the export is stored even if unchanged.",
        )

    def handle(self, **options: object) -> None:
        """Run one synchronization and report the outcome.

        Raises:
            CommandError: If the export could not be fetched or is invalid.
                Previously stored data is left untouched in both cases.
        """
        service = build_sync_service()
        service.bootstrap()
        if options["force"]:
            service.store.clear_fingerprint()
            service.context.fingerprint = None

        outcome = asyncio.run(service.synchronize())

        if outcome is SyncOutcome.FAILED:
            msg = "Could not fetch the schedule export; stored data left untouched"
            raise CommandError(msg)
        if outcome is SyncOutcome.INVALID:
            msg = "Schedule export has no rooms for the first day; stored data left untouched"
            raise CommandError(msg)

        schedule = service.context.schedule or {}
        if outcome is SyncOutcome.CHANGED:
            talks = sum(len(room_talks) for room_talks in schedule.values())
            self.stdout.write(self.style.SUCCESS(f"Stored {len(schedule)} rooms, {talks} talks"))
        else:
            self.stdout.write(self.style.SUCCESS(f"Schedule unchanged ({len(schedule)} rooms)"))
