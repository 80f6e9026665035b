"""Dispatch deferred notifications whose hold has ended."""

from django.core.management.base import BaseCommand

from core.config.engine import engine_setting
from core.services.dispatcher import dispatcher


class Command(BaseCommand):
    """Re-run dispatch for notifications held by quiet hours or frequency."""

    help = "Dispatch deferred notifications that are due"

    def add_arguments(self, parser):
        """Add command arguments."""
        parser.add_argument(
            "--limit",
            type=int,
            default=None,
            help="Maximum notifications to dispatch",
        )

    def handle(self, *_args, **options):
        """Run the redispatch pass."""
        limit = options["limit"] or engine_setting("REDISPATCH_LIMIT")
        count = dispatcher.redispatch_due(limit)
        self.stdout.write(self.style.SUCCESS(f"Dispatched {count} due notifications"))
