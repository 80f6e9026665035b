"""Purge notifications whose expiry time has passed."""

from django.core.management.base import BaseCommand

from core.config.engine import engine_setting
from core.services.expiry_sweeper import expiry_sweeper


class Command(BaseCommand):
    """Delete expired notifications in bounded batches."""

    help = "Delete notifications past their expires_at"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Maximum notifications to delete per batch",
        )
        parser.add_argument(
            "--all",
            action="store_true",
            help="Keep sweeping until no expired notifications remain",
        )

    def handle(self, *_args, **options):
        """Run the sweep."""
        limit = options["limit"] or engine_setting("SWEEP_LIMIT")
        total = 0
        while True:
            deleted = expiry_sweeper.sweep(limit)
            total += deleted
            if not options["all"] or deleted < limit:
                break
        self.stdout.write(self.style.SUCCESS(f"Deleted {total} expired notifications"))
