from django.urls import path

from .health import health as health_view

urlpatterns = [
    path("", health_view, name="status"),
    path("health/", health_view, name="health"),
]
