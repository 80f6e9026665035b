"""WSGI config for the notification engine."""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "notification_engine.settings")

application = get_wsgi_application()
