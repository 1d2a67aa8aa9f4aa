"""Serializers for service listing edits."""

from decimal import Decimal

from rest_framework import serializers

from .models import Service


class ServiceSerializer(serializers.ModelSerializer):
    seller_id = serializers.IntegerField(read_only=True)
    category_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Service
        fields = (
            "id",
            "seller_id",
            "category_id",
            "title",
            "description",
            "price",
            "delivery_days",
            "status",
            "updated_at",
        )
        read_only_fields = fields


class ServiceUpdateSerializer(serializers.Serializer):
    """Partial edit payload; omitted fields stay unchanged."""

    title = serializers.CharField(required=False, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(required=False, max_digits=12, decimal_places=2, min_value=Decimal("0.00"))
    delivery_days = serializers.IntegerField(required=False, min_value=1)
    category = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class EditOutcomeSerializer(serializers.Serializer):
    field = serializers.CharField()
    applied = serializers.BooleanField()
    flagged = serializers.BooleanField()
    audit_event_id = serializers.IntegerField()
