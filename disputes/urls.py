"""URL routes for the disputes app (v1)."""

from django.urls import path

from .views import DisputeDetailView, DisputeListCreateView, DisputeResolveView, DisputeReviewView

app_name = "disputes"

urlpatterns = [
    path("", DisputeListCreateView.as_view(), name="dispute-list"),
    path("<int:dispute_id>/", DisputeDetailView.as_view(), name="dispute-detail"),
    path("<int:dispute_id>/review/", DisputeReviewView.as_view(), name="dispute-review"),
    path("<int:dispute_id>/resolve/", DisputeResolveView.as_view(), name="dispute-resolve"),
]
