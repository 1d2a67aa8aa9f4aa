"""Root URL configuration."""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/v1/catalog/", include("catalog.urls")),
    path("api/v1/orders/", include("orders.urls")),
    path("api/v1/audit/", include("audit.urls")),
    path("api/v1/disputes/", include("disputes.urls")),
]
