"""Orders API endpoints.

Order placement, detail, and the seller/buyer driven lifecycle actions.
"""

import logging

from catalog.models import Service
from common.api import error_response, not_found
from common.choices import DraftPublished
from common.exceptions import OrderIntegrityError
from disputes.selectors import get_by_order
from disputes.serializers import DisputeSerializer
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from .models import Order
from .serializers import OrderSerializer, PlaceOrderSerializer
from .services import activate_order, cancel_order, confirm_delivery, place_order

logger = logging.getLogger("studentgigs.orders")

ErrorResponse = inline_serializer(name="OrdersError", fields={"detail": rf_serializers.CharField()})


def _get_party_order(request, order_id):
    try:
        order = Order.objects.get(id=int(order_id))
    except (Order.DoesNotExist, ValueError):
        return None
    if not order.is_party(request.user.id) and not getattr(request.user, "is_moderator", False):
        return None
    return order


class OrderCreateView(APIView):
    """Place an order for a published service at its current price."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Orders Endpoints"],
        summary="Place order",
        request=PlaceOrderSerializer,
        responses={201: OrderSerializer, 400: ErrorResponse, 404: ErrorResponse},
    )
    def post(self, request, *args, **kwargs):
        s = PlaceOrderSerializer(data=request.data)
        if not s.is_valid():
            return Response({"detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)
        service = (
            Service.objects.filter(id=s.validated_data["service_id"], status=DraftPublished.PUBLISHED).first()
        )
        if service is None:
            return not_found("Service")
        try:
            order = place_order(service=service, buyer=request.user)
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Order detail for its buyer, its seller, or an admin."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(tags=["Orders Endpoints"], summary="Get order", responses={200: OrderSerializer, 404: ErrorResponse})
    def get(self, request, order_id, *args, **kwargs):
        order = _get_party_order(request, order_id)
        if order is None:
            return not_found("Order")
        return Response(OrderSerializer(order).data)


class _OrderActionView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "orders_write"
    throttle_classes = [ScopedRateThrottle]

    # "buyer" or "seller": which party may trigger the action
    actor = "seller"

    def perform(self, order, request):  # pragma: no cover - overridden
        raise NotImplementedError

    def post(self, request, order_id, *args, **kwargs):
        order = _get_party_order(request, order_id)
        if order is None:
            return not_found("Order")
        allowed = order.seller_id if self.actor == "seller" else order.buyer_id
        if request.user.id != allowed:
            return Response({"detail": "You are not allowed to perform this action."}, status=status.HTTP_403_FORBIDDEN)
        try:
            order = self.perform(order, request)
        except OrderIntegrityError as exc:
            return error_response(exc, request)
        return Response(OrderSerializer(order).data)


class OrderActivateView(_OrderActionView):
    """Seller accepts a pending order."""

    actor = "seller"

    @extend_schema(
        tags=["Orders Endpoints"], summary="Accept order", request=None, responses={200: OrderSerializer, 409: ErrorResponse}
    )
    def post(self, request, order_id, *args, **kwargs):
        return super().post(request, order_id, *args, **kwargs)

    def perform(self, order, request):
        return activate_order(order, actor_id=request.user.id)


class OrderDeliverView(_OrderActionView):
    """Buyer confirms delivery of an active order."""

    actor = "buyer"

    @extend_schema(
        tags=["Orders Endpoints"],
        summary="Confirm delivery",
        request=None,
        responses={200: OrderSerializer, 409: ErrorResponse},
    )
    def post(self, request, order_id, *args, **kwargs):
        return super().post(request, order_id, *args, **kwargs)

    def perform(self, order, request):
        return confirm_delivery(order, actor_id=request.user.id)


class OrderCancelView(_OrderActionView):
    """Buyer cancels a pending order."""

    actor = "buyer"

    @extend_schema(
        tags=["Orders Endpoints"], summary="Cancel order", request=None, responses={200: OrderSerializer, 409: ErrorResponse}
    )
    def post(self, request, order_id, *args, **kwargs):
        return super().post(request, order_id, *args, **kwargs)

    def perform(self, order, request):
        return cancel_order(order, actor_id=request.user.id)


class OrderDisputeView(APIView):
    """The dispute attached to an order, if any."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "orders"
    throttle_classes = [ScopedRateThrottle]

    @extend_schema(
        tags=["Orders Endpoints"],
        summary="Get order dispute",
        responses={200: DisputeSerializer, 404: ErrorResponse},
    )
    def get(self, request, order_id, *args, **kwargs):
        order = _get_party_order(request, order_id)
        if order is None:
            return not_found("Order")
        dispute = get_by_order(order.id)
        if dispute is None:
            return not_found("Dispute")
        return Response(DisputeSerializer(dispute).data)
