"""Shared enumerations and choices used across apps."""

from django.db import models


class UserRole(models.TextChoices):
    STUDENT = "student", "Student"
    CLIENT = "client", "Client"
    ADMIN = "admin", "Admin"


class DraftPublished(models.TextChoices):
    DRAFT = "draft", "Draft"
    PUBLISHED = "published", "Published"


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    ACTIVE = "active", "Active"
    COMPLETED = "completed", "Completed"
    DISPUTED = "disputed", "Disputed"
    RESOLVED_REFUND = "resolved_refund", "Resolved (refund)"
    RESOLVED_PARTIAL_REFUND = "resolved_partial_refund", "Resolved (partial refund)"
    RESOLVED_RELEASE = "resolved_release", "Resolved (released to seller)"
    CANCELLED = "cancelled", "Cancelled"


class OrderEvent(models.TextChoices):
    ACTIVATE = "activate", "Activate"
    CONFIRM_DELIVERY = "confirm_delivery", "Confirm delivery"
    OPEN_DISPUTE = "open_dispute", "Open dispute"
    RESOLVE_REFUND = "resolve_refund", "Resolve with refund"
    RESOLVE_PARTIAL_REFUND = "resolve_partial_refund", "Resolve with partial refund"
    RESOLVE_RELEASE = "resolve_release", "Resolve with release"
    CANCEL = "cancel", "Cancel"


class DisputeStatus(models.TextChoices):
    OPEN = "open", "Open"
    UNDER_REVIEW = "under_review", "Under review"
    RESOLVED = "resolved", "Resolved"


class DisputeResolution(models.TextChoices):
    REFUND_BUYER = "refund_buyer", "Refund buyer"
    PARTIAL_REFUND = "partial_refund", "Partial refund"
    RELEASE_TO_SELLER = "release_to_seller", "Release to seller"


class SnapshotKind(models.TextChoices):
    NULL = "null", "Null"
    TEXT = "text", "Text"
    BOOLEAN = "boolean", "Boolean"
    INTEGER = "integer", "Integer"
    DECIMAL = "decimal", "Decimal"
    FLOAT = "float", "Float"
    STRUCTURED = "structured", "Structured"


class SettlementStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    DISPATCHED = "dispatched", "Dispatched"
    FAILED = "failed", "Failed"
