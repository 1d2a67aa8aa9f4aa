"""Serializers for edit history views."""

from rest_framework import serializers

from .models import ServiceEditEvent
from .values import deserialize_value


class ServiceEditEventSerializer(serializers.ModelSerializer):
    """History row joined with the user directory entry of the actor.

    Pass `directory` (user id -> {"name", "email"}) in the serializer context.
    """

    user_name = serializers.SerializerMethodField()
    user_email = serializers.SerializerMethodField()
    old_display = serializers.SerializerMethodField()
    new_display = serializers.SerializerMethodField()

    class Meta:
        model = ServiceEditEvent
        fields = (
            "id",
            "service_id",
            "user_id",
            "user_name",
            "user_email",
            "field_changed",
            "old_value",
            "new_value",
            "old_kind",
            "new_kind",
            "old_display",
            "new_display",
            "has_active_orders",
            "changed_at",
        )
        read_only_fields = fields

    def _entry(self, obj) -> dict:
        return (self.context.get("directory") or {}).get(obj.user_id) or {}

    def get_user_name(self, obj) -> str:
        return self._entry(obj).get("name", "")

    def get_user_email(self, obj) -> str:
        return self._entry(obj).get("email", "")

    def get_old_display(self, obj):
        return deserialize_value(obj.old_value, obj.old_kind)

    def get_new_display(self, obj):
        return deserialize_value(obj.new_value, obj.new_kind)
