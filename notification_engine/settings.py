"""Django settings for the notification engine.

Values are read from environment variables so the same image can run in
local, staging and production deployments. Test overrides live in
``notification_engine.settings_test``.
"""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "insecure-dev-key-change-me")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

ALLOWED_HOSTS = os.getenv("ALLOWED_HOSTS", "localhost,127.0.0.1").split(",")

INSTALLED_APPS = [
    "django.contrib.admin",
    "django.contrib.auth",
    "django.contrib.contenttypes",
    "django.contrib.sessions",
    "django.contrib.messages",
    "django.contrib.staticfiles",
    "rest_framework",
    "django_rq",
    "core",
]

MIDDLEWARE = [
    "core.middleware.RequestIDMiddleware",
    "core.middleware.ProcessTimeMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.contrib.sessions.middleware.SessionMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
    "django.contrib.auth.middleware.AuthenticationMiddleware",
    "django.contrib.messages.middleware.MessageMiddleware",
    "django.middleware.clickjacking.XFrameOptionsMiddleware",
    "core.middleware.IdentityContextMiddleware",
]

ROOT_URLCONF = "notification_engine.urls"

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",
        "DIRS": [],
        "APP_DIRS": True,
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",
                "django.contrib.auth.context_processors.auth",
                "django.contrib.messages.context_processors.messages",
            ],
        },
    },
]

WSGI_APPLICATION = "notification_engine.wsgi.application"

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.postgresql",
        "NAME": os.getenv("POSTGRES_DB", "notification_engine"),
        "USER": os.getenv("POSTGRES_USER", "postgres"),
        "PASSWORD": os.getenv("POSTGRES_PASSWORD", ""),
        "HOST": os.getenv("POSTGRES_HOST", "localhost"),
        "PORT": os.getenv("POSTGRES_PORT", "5432"),
        "CONN_MAX_AGE": int(os.getenv("POSTGRES_CONN_MAX_AGE", "60")),
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.redis.RedisCache",
        "LOCATION": os.getenv("REDIS_URL", "redis://localhost:6379/1"),
    }
}

AUTH_PASSWORD_VALIDATORS = []

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

REST_FRAMEWORK = {
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": ["rest_framework.permissions.AllowAny"],
    "DEFAULT_RENDERER_CLASSES": ["rest_framework.renderers.JSONRenderer"],
    "EXCEPTION_HANDLER": "core.exceptions.handlers.custom_exception_handler",
    "UNAUTHENTICATED_USER": None,
}

# Background jobs
RQ_QUEUES = {
    "default": {
        "URL": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        "DEFAULT_TIMEOUT": 360,
    },
    "campaigns": {
        "URL": os.getenv("REDIS_URL", "redis://localhost:6379/0"),
        # Campaign runs sleep between chunks and can be long-lived
        "DEFAULT_TIMEOUT": 6 * 60 * 60,
    },
}

# SMTP
EMAIL_HOST = os.getenv("EMAIL_HOST", "localhost")
EMAIL_PORT = int(os.getenv("EMAIL_PORT", "587"))
EMAIL_HOST_USER = os.getenv("EMAIL_HOST_USER", "")
EMAIL_HOST_PASSWORD = os.getenv("EMAIL_HOST_PASSWORD", "")
EMAIL_USE_TLS = os.getenv("EMAIL_USE_TLS", "true").lower() == "true"
DEFAULT_FROM_EMAIL = os.getenv("DEFAULT_FROM_EMAIL", "notifications@example.com")

NOTIFICATION_ENGINE = {
    "QUEUE_NAME": "default",
    "CAMPAIGN_QUEUE_NAME": "campaigns",
    "DEFAULT_MAX_RETRIES": int(os.getenv("NOTIFICATION_DEFAULT_MAX_RETRIES", "3")),
    "DEFAULT_RETRY_DELAY_MINUTES": int(
        os.getenv("NOTIFICATION_DEFAULT_RETRY_DELAY_MINUTES", "5")
    ),
    "DEFAULT_BATCH_SIZE": int(os.getenv("NOTIFICATION_DEFAULT_BATCH_SIZE", "100")),
    "SWEEP_LIMIT": int(os.getenv("NOTIFICATION_SWEEP_LIMIT", "500")),
    "REDISPATCH_LIMIT": int(os.getenv("NOTIFICATION_REDISPATCH_LIMIT", "200")),
    "CHANNEL_ADAPTERS": {
        "push": "core.services.channels.push.PushAdapter",
        "email": "core.services.channels.email.EmailAdapter",
        "sms": "core.services.channels.sms.SmsAdapter",
        "in_app": "core.services.channels.in_app.InAppAdapter",
    },
    "PUSH_GATEWAY_URL": os.getenv(
        "PUSH_GATEWAY_URL", "https://fcm.googleapis.com/fcm/send"
    ),
    "PUSH_GATEWAY_API_KEY": os.getenv("PUSH_GATEWAY_API_KEY", ""),
    "SMS_GATEWAY_URL": os.getenv("SMS_GATEWAY_URL", "http://localhost:9090/sms"),
    "SMS_GATEWAY_API_KEY": os.getenv("SMS_GATEWAY_API_KEY", ""),
    "SMS_SENDER_ID": os.getenv("SMS_SENDER_ID", "NOTIFY"),
    "GATEWAY_TIMEOUT_SECONDS": int(os.getenv("GATEWAY_TIMEOUT_SECONDS", "10")),
}

TEST_MODE = False
