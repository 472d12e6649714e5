"""URL configuration for the Commission Ledger."""
from django.conf import settings
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    # API
    path("api/v1/", include("api.urls")),
]

if getattr(settings, "ENABLE_DJANGO_ADMIN", False):
    urlpatterns.insert(0, path("admin/", admin.site.urls))
