"""Serializers for order read models and inputs."""

from rest_framework import serializers

from .models import Order, OrderStatusEvent


class OrderStatusEventSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusEvent
        fields = ("from_status", "to_status", "event", "actor_id", "reason", "created_at")


class OrderSerializer(serializers.ModelSerializer):
    """Order detail including the terms captured at creation."""

    service_id = serializers.IntegerField(read_only=True)
    buyer_id = serializers.IntegerField(read_only=True)
    seller_id = serializers.IntegerField(read_only=True)
    status_events = OrderStatusEventSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = (
            "id",
            "service_id",
            "buyer_id",
            "seller_id",
            "price",
            "terms",
            "commission_rate",
            "status",
            "status_events",
            "created_at",
            "updated_at",
        )
        read_only_fields = fields


class PlaceOrderSerializer(serializers.Serializer):
    service_id = serializers.IntegerField(min_value=1)
