"""Production server startup script for the notification engine.

Starts the Django application under Gunicorn. Bind address, worker and
thread counts can be tuned through environment variables for containers.
"""

import os
import sys

from gunicorn.app.wsgiapp import run


def gunicorn_argv() -> list[str]:
    """Build the Gunicorn command line from the environment."""
    return [
        "gunicorn",
        "notification_engine.wsgi:application",
        "--bind",
        os.getenv("BIND_ADDRESS", "0.0.0.0:8000"),
        "--workers",
        os.getenv("GUNICORN_WORKERS", "4"),
        "--threads",
        os.getenv("GUNICORN_THREADS", "2"),
        "--timeout",
        os.getenv("GUNICORN_TIMEOUT", "60"),
        "--access-logfile",
        "-",
        "--error-logfile",
        "-",
    ]


def main():
    """Start the notification engine using Gunicorn."""
    sys.argv = gunicorn_argv()
    run()


if __name__ == "__main__":
    main()
