"""Edit history API endpoints.

Sellers see the history of their own services and their own edits;
administrators see everything, including history of deleted services.
"""

import logging

from catalog.models import Service
from common.api import error_response, not_found
from common.exceptions import OrderIntegrityError
from drf_spectacular.utils import OpenApiParameter, extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from users.selectors import get_directory_entries

from .selectors import history_for_service, history_for_user
from .serializers import ServiceEditEventSerializer

logger = logging.getLogger("studentgigs.audit")

LIMIT_PARAM = OpenApiParameter(
    name="limit", required=False, type=int, description="Maximum number of events, newest first"
)
ErrorResponse = inline_serializer(name="AuditError", fields={"detail": rf_serializers.CharField()})


def _render(events):
    events = list(events)
    directory = get_directory_entries(e.user_id for e in events)
    return ServiceEditEventSerializer(events, many=True, context={"directory": directory}).data


class ServiceHistoryView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "audit"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Audit Endpoints"],
        summary="Service edit history",
        parameters=[LIMIT_PARAM],
        responses={200: ServiceEditEventSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse},
    )
    def get(self, request, service_id, *args, **kwargs):
        if not request.user.is_moderator:
            if not Service.objects.filter(pk=service_id, seller_id=request.user.id).exists():
                return not_found("Service")
        try:
            events = history_for_service(service_id, limit=request.query_params.get("limit"))
            return Response(_render(events))
        except OrderIntegrityError as exc:
            return error_response(exc, request)


class UserHistoryView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "audit"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Audit Endpoints"],
        summary="Edits made by a user",
        parameters=[LIMIT_PARAM],
        responses={200: ServiceEditEventSerializer(many=True), 400: ErrorResponse, 404: ErrorResponse},
    )
    def get(self, request, user_id, *args, **kwargs):
        if not request.user.is_moderator and request.user.id != user_id:
            return not_found("User")
        try:
            events = history_for_user(user_id, limit=request.query_params.get("limit"))
            return Response(_render(events))
        except OrderIntegrityError as exc:
            return error_response(exc, request)
