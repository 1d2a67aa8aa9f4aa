"""Catalog models: categories and the services students sell."""

from decimal import Decimal

from common.choices import DraftPublished
from common.models import TimeStampedModel
from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Category(TimeStampedModel):
    name = models.CharField(max_length=100)
    slug = models.SlugField(max_length=120, unique=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "categories"

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class Service(TimeStampedModel):
    """A service listed by a student seller.

    Every change to the sellable attributes goes through
    `catalog.services.update_service` so it lands in the edit ledger.
    """

    seller = models.ForeignKey(settings.AUTH_USER_MODEL, related_name="services", on_delete=models.CASCADE)
    category = models.ForeignKey(Category, related_name="services", null=True, blank=True, on_delete=models.SET_NULL)
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    delivery_days = models.PositiveIntegerField(default=7)
    status = models.CharField(max_length=16, choices=DraftPublished.choices, default=DraftPublished.PUBLISHED)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(condition=models.Q(price__gte=0), name="service_price_non_negative"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"Service#{self.id} {self.title}"
