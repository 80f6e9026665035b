"""Development server for the notification engine.

The engine tables are created by the platform's schema migrations, not by
this app, so the migration check is replaced by a summary of the channel
adapters and queues the server will use.
"""

from django.core.management.commands.runserver import Command as RunServer

from core.config.engine import engine_setting


class Command(RunServer):
    """Runserver without migration checks that reports engine wiring."""

    help = "Start the notification engine development server"

    def check_migrations(self, *_args, **_kwargs):
        """Report channel adapters and queues instead of checking migrations."""
        self.stdout.write(
            self.style.WARNING("Skipping migration checks (schema managed externally)")
        )
        for channel, path in sorted(engine_setting("CHANNEL_ADAPTERS").items()):
            self.stdout.write(f"  {channel:<8} -> {path}")
        self.stdout.write(
            f"  queues: delivery={engine_setting('QUEUE_NAME')} "
            f"campaigns={engine_setting('CAMPAIGN_QUEUE_NAME')}"
        )
