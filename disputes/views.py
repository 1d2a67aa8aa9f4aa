"""Disputes API endpoints.

Parties open disputes; administrators review and resolve them. Session
authenticated posts go through DRF's CSRF check before reaching the engine.
"""

import logging

from common.api import error_response, not_found
from common.choices import DisputeStatus
from common.exceptions import AlreadyResolvedError, OrderIntegrityError
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, extend_schema, inline_serializer
from orders.models import Order
from rest_framework import generics, status
from rest_framework import serializers as rf_serializers
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .models import Dispute
from .selectors import get_dispute, list_disputes
from .serializers import DisputeCreateSerializer, DisputeResolveSerializer, DisputeSerializer
from .services import begin_review, open_dispute, resolve_dispute

logger = logging.getLogger("studentgigs.disputes")

ErrorResponse = inline_serializer(name="DisputesError", fields={"detail": rf_serializers.CharField()})


class IsModerator(BasePermission):
    def has_permission(self, request, view):
        return bool(getattr(request.user, "is_moderator", False))


class DisputeListCreateView(generics.ListAPIView):
    """Admin dispute queue (GET) and dispute creation by an order party (POST)."""

    serializer_class = DisputeSerializer
    throttle_classes = [ScopedRateThrottle]

    def get_permissions(self):
        if self.request.method == "GET":
            return [IsAuthenticated(), IsModerator()]
        return [IsAuthenticated()]

    def get_throttles(self):
        self.throttle_scope = "disputes" if self.request.method == "GET" else "disputes_write"
        return super().get_throttles()

    def get_queryset(self):
        status_filter = self.request.query_params.get("status") or None
        if status_filter and status_filter not in DisputeStatus.values:
            status_filter = None
        return list_disputes(status=status_filter)

    @extend_schema(
        tags=["Disputes Endpoints"],
        summary="List disputes",
        parameters=[
            OpenApiParameter(name="status", required=False, type=str, enum=DisputeStatus.values),
        ],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    @extend_schema(
        tags=["Disputes Endpoints"],
        summary="Open dispute",
        request=DisputeCreateSerializer,
        responses={201: DisputeSerializer, 400: ErrorResponse, 403: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
        examples=[
            OpenApiExample(
                "Contest delivery",
                value={"order_id": 42, "reason": "Work not delivered as described."},
                request_only=True,
            ),
        ],
    )
    def post(self, request, *args, **kwargs):
        s = DisputeCreateSerializer(data=request.data)
        if not s.is_valid():
            if "reason" in s.errors:
                return Response(
                    {"detail": "Dispute reason is required", "field": "reason"}, status=status.HTTP_400_BAD_REQUEST
                )
            return Response({"detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)
        body = s.validated_data
        try:
            dispute = open_dispute(order_id=body["order_id"], initiator_id=request.user.id, reason=body["reason"])
        except Order.DoesNotExist:
            return not_found("Order")
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        return Response(DisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)


class DisputeDetailView(APIView):
    """Dispute detail for the order's parties and administrators."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "disputes"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Disputes Endpoints"], summary="Get dispute", responses={200: DisputeSerializer, 404: ErrorResponse}
    )
    def get(self, request, dispute_id, *args, **kwargs):
        dispute = get_dispute(dispute_id)
        if dispute is None:
            return not_found("Dispute")
        if not request.user.is_moderator and not dispute.order.is_party(request.user.id):
            return not_found("Dispute")
        if request.user.is_moderator:
            logger.info("dispute_viewed", extra={"dispute_id": dispute.id, "admin_id": request.user.id})
        return Response(DisputeSerializer(dispute).data)


class DisputeReviewView(APIView):
    """Admin claims a dispute for review."""

    permission_classes = [IsAuthenticated, IsModerator]
    throttle_scope = "disputes_write"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Disputes Endpoints"],
        summary="Begin review",
        request=None,
        responses={200: DisputeSerializer, 404: ErrorResponse, 409: ErrorResponse},
    )
    def post(self, request, dispute_id, *args, **kwargs):
        try:
            dispute = begin_review(dispute_id=dispute_id, admin_id=request.user.id)
        except Dispute.DoesNotExist:
            return not_found("Dispute")
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        return Response(DisputeSerializer(dispute).data)


class DisputeResolveView(APIView):
    """Admin records the binding resolution.

    A repeated submission returns the existing resolution with
    `already_resolved: true` instead of failing.
    """

    permission_classes = [IsAuthenticated, IsModerator]
    throttle_scope = "disputes_write"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Disputes Endpoints"],
        summary="Resolve dispute",
        request=DisputeResolveSerializer,
        responses={200: DisputeSerializer, 400: ErrorResponse, 404: ErrorResponse, 409: ErrorResponse},
        examples=[
            OpenApiExample(
                "Partial refund",
                value={"resolution": "partial_refund", "refund_percentage": "50.00", "admin_note": "50% refund agreed"},
                request_only=True,
            ),
        ],
    )
    def post(self, request, dispute_id, *args, **kwargs):
        s = DisputeResolveSerializer(data=request.data)
        if not s.is_valid():
            if "resolution" in s.errors:
                return Response(
                    {"detail": "Invalid resolution type", "field": "resolution"}, status=status.HTTP_400_BAD_REQUEST
                )
            return Response({"detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)
        body = s.validated_data
        try:
            dispute = resolve_dispute(
                dispute_id=dispute_id,
                admin_id=request.user.id,
                resolution=body["resolution"],
                admin_note=body.get("admin_note", ""),
                refund_percentage=body.get("refund_percentage"),
            )
        except Dispute.DoesNotExist:
            return not_found("Dispute")
        except AlreadyResolvedError as exc:
            data = DisputeSerializer(exc.dispute).data
            data["already_resolved"] = True
            return Response(data, status=status.HTTP_200_OK)
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        return Response(DisputeSerializer(dispute).data)
