"""Serializers for dispute workflows.

Input serializers only check shape; the dispute engine owns the domain rules.
"""

from common.choices import DisputeResolution
from rest_framework import serializers

from .models import Dispute


class DisputeCreateSerializer(serializers.Serializer):
    """Dispute creation form: the order and a free-text reason."""

    order_id = serializers.IntegerField(min_value=1)
    reason = serializers.CharField(allow_blank=True, trim_whitespace=True, max_length=5000)


class DisputeResolveSerializer(serializers.Serializer):
    resolution = serializers.ChoiceField(choices=DisputeResolution.choices)
    admin_note = serializers.CharField(required=False, allow_blank=True, default="", max_length=5000)
    refund_percentage = serializers.DecimalField(max_digits=5, decimal_places=2, required=False, allow_null=True)


class DisputeSerializer(serializers.ModelSerializer):
    """Read model for the order detail and admin dispute views."""

    order_id = serializers.IntegerField(read_only=True)
    initiator_id = serializers.IntegerField(read_only=True)
    reviewer_id = serializers.IntegerField(read_only=True, allow_null=True)
    resolved_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    order_status = serializers.CharField(source="order.status", read_only=True)

    class Meta:
        model = Dispute
        fields = (
            "id",
            "order_id",
            "order_status",
            "initiator_id",
            "reason",
            "status",
            "reviewer_id",
            "resolution",
            "refund_percentage",
            "admin_note",
            "resolved_by_id",
            "resolved_at",
            "created_at",
        )
        read_only_fields = fields
