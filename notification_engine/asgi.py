"""ASGI config for the notification engine."""

import os

from django.core.asgi import get_asgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_engine.settings")

application = get_asgi_application()
