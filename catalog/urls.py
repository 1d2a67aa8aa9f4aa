"""URL routes for the catalog app (v1)."""

from django.urls import path

from .views import ServiceUpdateView

app_name = "catalog"

urlpatterns = [
    path("services/<int:service_id>/", ServiceUpdateView.as_view(), name="service-update"),
]
