"""URL routes for the audit app (v1)."""

from django.urls import path

from .views import ServiceHistoryView, UserHistoryView

app_name = "audit"

urlpatterns = [
    path("services/<int:service_id>/history/", ServiceHistoryView.as_view(), name="service-history"),
    path("users/<int:user_id>/history/", UserHistoryView.as_view(), name="user-history"),
]
