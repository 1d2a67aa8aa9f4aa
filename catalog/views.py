"""Catalog API endpoints for sellers editing their listings."""

import logging

from common.api import error_response, not_found
from common.exceptions import OrderIntegrityError
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .models import Service
from .serializers import EditOutcomeSerializer, ServiceSerializer, ServiceUpdateSerializer
from .services import update_service

logger = logging.getLogger("studentgigs.catalog")


class ServiceUpdateView(APIView):
    """Edit a listing; every changed field is written to the edit ledger.

    Edits are allowed while orders are active; the response tells the seller
    which changes were flagged.
    """

    permission_classes = [IsAuthenticated]
    throttle_scope = "catalog_write"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Catalog Endpoints"],
        summary="Edit service",
        request=ServiceUpdateSerializer,
        responses={
            200: inline_serializer(
                name="ServiceEditResult",
                fields={
                    "service": ServiceSerializer(),
                    "edits": EditOutcomeSerializer(many=True),
                    "has_active_orders": rf_serializers.BooleanField(),
                },
            ),
            400: inline_serializer(name="CatalogError", fields={"detail": rf_serializers.CharField()}),
            404: inline_serializer(name="CatalogNotFound", fields={"detail": rf_serializers.CharField()}),
        },
    )
    def patch(self, request, service_id, *args, **kwargs):
        s = ServiceUpdateSerializer(data=request.data, partial=True)
        if not s.is_valid():
            field = next(iter(s.errors), None)
            return Response({"detail": "Invalid payload", "field": field}, status=status.HTTP_400_BAD_REQUEST)
        try:
            outcomes = update_service(service_id=service_id, user_id=request.user.id, changes=dict(s.validated_data))
        except Service.DoesNotExist:
            return not_found("Service")
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        service = Service.objects.get(pk=service_id)
        edits = [
            {"field": o.field, "applied": o.applied, "flagged": o.flagged, "audit_event_id": o.audit_event_id}
            for o in outcomes
        ]
        return Response(
            {
                "service": ServiceSerializer(service).data,
                "edits": EditOutcomeSerializer(edits, many=True).data,
                "has_active_orders": any(o.flagged for o in outcomes),
            }
        )
