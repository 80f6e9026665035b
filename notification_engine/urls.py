"""Root URL configuration for the notification engine."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/v1/notification-engine/", include("core.urls")),
    path("django-rq/", include("django_rq.urls")),
]
