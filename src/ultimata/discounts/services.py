"""Discount code validation and redemption.

Validation is read-only and safe to call from the public endpoint.
Redemption re-validates under a row lock and consumes one use; it must
run inside the checkout transaction so a failed order gives the use back.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from ultimata.core.exceptions import Conflict, NotFound, ValidationError

from .exceptions import DiscountExhausted, DiscountExpired, DiscountNotFound
from .models import DiscountCode

logger = logging.getLogger(__name__)


def check_discount(discount: DiscountCode | None, now=None) -> DiscountCode:
    """Raise if ``discount`` cannot be used right now.

    Exhaustion and expiry are checked before the active flag, so an
    exhausted or expired code reports that reason even when inactive.
    """
    if discount is None:
        raise DiscountNotFound()
    if discount.is_exhausted:
        raise DiscountExhausted()
    if discount.is_expired(now or timezone.now()):
        raise DiscountExpired()
    if not discount.active:
        raise DiscountNotFound()
    return discount


def validate_discount(code: str, now=None) -> DiscountCode:
    """Look up ``code`` (exact, case-sensitive) and check it is usable.

    Does not consume a use. An inactive code that is also exhausted or
    expired reports exhaustion or expiry rather than not-found.

    Raises:
        DiscountNotFound: Unknown or inactive code
        DiscountExhausted: All uses consumed
        DiscountExpired: Past ``expires_at``
    """
    return check_discount(DiscountCode.objects.filter(code=code).first(), now)


def redeem_discount(code: str, now=None) -> DiscountCode:
    """Validate and consume one use of ``code``.

    The increment is a conditional UPDATE, so concurrent redemptions of a
    code with one use left cannot both succeed.
    """
    if not transaction.get_connection().in_atomic_block:
        raise RuntimeError("redeem_discount must run inside a transaction")

    discount = check_discount(
        DiscountCode.objects.select_for_update().filter(code=code).first(),
        now,
    )

    consumed = (
        DiscountCode.objects.filter(pk=discount.pk)
        .filter(Q(total_uses=-1) | Q(used_count__lt=F("total_uses")))
        .update(used_count=F("used_count") + 1, updated_at=timezone.now())
    )
    if not consumed:
        raise DiscountExhausted()

    discount.refresh_from_db()
    logger.info(
        "Discount redeemed",
        extra={"code": discount.code, "used_count": discount.used_count, "total_uses": discount.total_uses},
    )
    return discount


def get_discount(discount_id) -> DiscountCode:
    try:
        return DiscountCode.objects.get(pk=discount_id)
    except DiscountCode.DoesNotExist:
        raise NotFound("Discount code not found")


def create_discount(created_by_id=None, **fields) -> DiscountCode:
    try:
        with transaction.atomic():
            return DiscountCode.objects.create(created_by_id=created_by_id, **fields)
    except IntegrityError:
        raise Conflict(f"Discount code '{fields.get('code')}' already exists")


def update_discount(discount_id, **fields) -> DiscountCode:
    """Apply admin edits to a code.

    Raises:
        ValidationError: ``total_uses`` would drop below uses already consumed
        Conflict: Another code already has the new ``code``
    """
    discount = get_discount(discount_id)
    for name, value in fields.items():
        setattr(discount, name, value)
    if discount.total_uses != -1 and discount.total_uses < discount.used_count:
        raise ValidationError(
            f"totalUses cannot be below the {discount.used_count} uses already consumed",
        )
    try:
        with transaction.atomic():
            discount.save()
    except IntegrityError:
        raise Conflict(f"Discount code '{discount.code}' already exists")
    return discount


def delete_discount(discount_id):
    DiscountCode.objects.filter(pk=discount_id).delete()
