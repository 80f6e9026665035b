#!/usr/bin/env python
"""Script to run the Django development server or a local rq worker.

``python run_local.py`` starts the development server through the custom
``runlocal`` command. ``python run_local.py worker`` starts an rq worker
(with the scheduler) listening on the delivery and campaign queues.
"""

import os
import sys

from django.core.management import execute_from_command_line

WORKER_QUEUES = ("default", "campaigns")


def build_command(args: list[str]) -> list[str]:
    """Translate script arguments into a manage.py command line."""
    if args and args[0] == "worker":
        return [sys.argv[0], "rqworker", "--with-scheduler", *WORKER_QUEUES]
    return [sys.argv[0], "runlocal", *args]


def main(args: list[str] | None = None):
    """Run the development server or a worker."""
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_engine.settings")
    execute_from_command_line(build_command(sys.argv[1:] if args is None else args))


if __name__ == "__main__":
    main()
