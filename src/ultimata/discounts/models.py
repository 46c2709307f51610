"""Discount code model."""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

UNLIMITED_USES = -1


class DiscountCode(models.Model):
    """A percentage discount code.

    ``total_uses == -1`` means unlimited. ``product_ids`` empty means the
    code applies to every product.
    """

    code = models.CharField(max_length=64, unique=True)
    discount_percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01")), MaxValueValidator(Decimal("100"))],
    )
    total_uses = models.IntegerField(default=UNLIMITED_USES)
    used_count = models.PositiveIntegerField(default=0)
    expires_at = models.DateTimeField(null=True, blank=True)
    active = models.BooleanField(default=True)
    product_ids = models.JSONField(default=list, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self):
        return self.code

    @property
    def is_unlimited(self) -> bool:
        return self.total_uses == UNLIMITED_USES

    @property
    def is_exhausted(self) -> bool:
        return not self.is_unlimited and self.used_count >= self.total_uses

    def is_expired(self, now) -> bool:
        return self.expires_at is not None and self.expires_at < now

    def applies_to(self, product_id) -> bool:
        return not self.product_ids or product_id in self.product_ids
