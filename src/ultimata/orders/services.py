"""Order workflow service layer.

Checkout is a single unit of work: the order row, its lines, the stock
decrements, discount redemption and the cart clear commit together or
not at all. Views should call these functions instead of manipulating
models directly.
"""

import logging
import secrets
import string
import time
from dataclasses import dataclass
from decimal import Decimal

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import Count, Q, Sum
from django.utils import timezone

from ultimata.catalog.models import Product
from ultimata.catalog.services import decrement_stock
from ultimata.core.auth import AuthContext
from ultimata.core.exceptions import Forbidden, NotFound, OrderNumberCollision, ValidationError
from ultimata.core.services import get_tax_rate
from ultimata.discounts.exceptions import DiscountNotApplicable
from ultimata.discounts.models import DiscountCode
from ultimata.discounts.services import redeem_discount
from ultimata.notifications.models import Notification
from ultimata.notifications.services import create_notification
from ultimata.store.services import clear_cart

from .models import Order, OrderItem, PaymentMethod, Refund
from .pricing import PricedLine, calculate_totals

logger = logging.getLogger(__name__)

ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase
ORDER_NUMBER_RANDOM_LENGTH = 9

REFUND_DECISIONS = (Refund.Status.APPROVED, Refund.Status.REJECTED, Refund.Status.PROCESSED)


@dataclass(frozen=True)
class OrderLine:
    """A requested (product, quantity) pair."""

    product_id: int
    quantity: int


def generate_order_number(now_ms: int | None = None) -> str:
    """Return ``ORD-{unixMillis}-{9 random base36 chars}``."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(ORDER_NUMBER_RANDOM_LENGTH))
    return f"ORD-{now_ms}-{suffix}"


def _insert_order(**fields) -> Order:
    """Insert an order under a freshly generated number.

    Each attempt runs in a savepoint so a unique-number collision can be
    retried without aborting the surrounding checkout transaction.
    """
    attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        order_number = generate_order_number()
        try:
            with transaction.atomic():
                return Order.objects.create(order_number=order_number, **fields)
        except IntegrityError:
            if not Order.objects.filter(order_number=order_number).exists():
                raise
            logger.warning(
                "Order number collision",
                extra={"order_number": order_number, "attempt": attempt},
            )
    raise OrderNumberCollision(details={"attempts": attempts})


def _merge_lines(lines: list[OrderLine]) -> dict[int, int]:
    quantities: dict[int, int] = {}
    for line in lines:
        if line.quantity < 1:
            raise ValidationError(f"Quantity for product {line.product_id} must be at least 1")
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
    return quantities


def _load_products(product_ids) -> dict[int, Product]:
    products = Product.objects.in_bulk(list(product_ids))
    for product_id in product_ids:
        product = products.get(product_id)
        if product is None:
            raise NotFound(f"Product {product_id} not found")
        if not product.is_active:
            raise ValidationError(f"Product {product_id} is not available")
    return products


@transaction.atomic
def place_order(
    auth: AuthContext,
    lines: list[OrderLine],
    payment_method: str,
    currency: str | None = None,
    discount_code: str | None = None,
    declared_total: Decimal | None = None,
) -> Order:
    """Check out ``lines`` for the calling user.

    Totals are computed from live product prices; ``declared_total`` is
    only compared and logged. Any failure rolls the whole checkout back.

    Args:
        auth: Caller; must be authenticated
        lines: Requested products and quantities (duplicates are merged)
        payment_method: One of paypal, gcash, binance
        currency: ISO currency code, defaults to STORE_DEFAULT_CURRENCY
        discount_code: Optional code, redeemed as part of the checkout
        declared_total: Total the client displayed

    Returns:
        The created Order, completed and paid

    Raises:
        ValidationError: No lines, bad payment method, unavailable product
        NotFound: Unknown product
        InsufficientStock: A line exceeds available stock
        DiscountNotFound, DiscountExhausted, DiscountExpired: Unusable code
        DiscountNotApplicable: Code covers none of the ordered products
        OrderNumberCollision: No unique order number after retries
    """
    auth.ensure_authenticated()
    if not lines:
        raise ValidationError("Order must contain at least one item")
    if payment_method not in PaymentMethod.values:
        raise ValidationError(
            f"Invalid payment method '{payment_method}'. Must be one of {list(PaymentMethod.values)}"
        )

    quantities = _merge_lines(lines)
    products = _load_products(quantities)
    priced = [
        PricedLine(product_id=pid, unit_price=products[pid].price, quantity=qty)
        for pid, qty in quantities.items()
    ]

    discount: DiscountCode | None = None
    discounted_ids = None
    if discount_code:
        discount = redeem_discount(discount_code)
        discounted_ids = {pid for pid in quantities if discount.applies_to(pid)}
        if not discounted_ids:
            raise DiscountNotApplicable()

    totals = calculate_totals(
        priced,
        discount_percentage=discount.discount_percentage if discount else Decimal("0"),
        discounted_product_ids=discounted_ids,
        tax_rate=get_tax_rate(),
    )
    if declared_total is not None and declared_total != totals.total:
        logger.warning(
            "Client total differs from computed total",
            extra={"user_id": auth.user_id, "declared": str(declared_total), "computed": str(totals.total)},
        )

    order = _insert_order(
        user_id=auth.user_id,
        subtotal_amount=totals.subtotal,
        discount_amount=totals.discount,
        tax_amount=totals.tax,
        total_amount=totals.total,
        currency=(currency or settings.STORE_DEFAULT_CURRENCY).upper(),
        payment_method=payment_method,
        payment_status=Order.PaymentStatus.PAID,
        status=Order.Status.COMPLETED,
        discount_code=discount.code if discount else "",
    )

    OrderItem.objects.bulk_create([
        OrderItem(
            order=order,
            product_id=pid,
            quantity=qty,
            price=products[pid].price,
            product_name=products[pid].name,
            product_type=products[pid].type,
        )
        for pid, qty in quantities.items()
    ])

    for pid, qty in quantities.items():
        decrement_stock(pid, qty)

    clear_cart(auth.user_id)

    create_notification(
        user_id=auth.user_id,
        type=Notification.Type.ORDER_UPDATE,
        title="Order confirmed",
        message=f"Your order {order.order_number} has been placed.",
        order_id=order.pk,
    )

    logger.info(
        "Order placed",
        extra={
            "order_number": order.order_number,
            "user_id": auth.user_id,
            "total": str(order.total_amount),
            "lines": len(quantities),
        },
    )
    return order


def list_orders(auth: AuthContext):
    auth.ensure_authenticated()
    return Order.objects.filter(user_id=auth.user_id).prefetch_related("items")


def get_order(order_id) -> Order:
    try:
        return Order.objects.prefetch_related("items").get(pk=order_id)
    except Order.DoesNotExist:
        raise NotFound("Order not found")


def get_order_for(auth: AuthContext, order_id) -> Order:
    """Fetch an order the caller owns, or any order for admins."""
    auth.ensure_authenticated()
    order = get_order(order_id)
    if not auth.can_access(order.user_id):
        raise Forbidden("You do not have access to this order")
    return order


@transaction.atomic
def update_order(order_id, **fields) -> Order:
    """Admin update of an order's status fields."""
    order = get_order(order_id)
    old_status = order.status
    for name, value in fields.items():
        setattr(order, name, value)
    order.save()

    if order.status != old_status:
        create_notification(
            user_id=order.user_id,
            type=Notification.Type.ORDER_UPDATE,
            title="Order updated",
            message=f"Your order {order.order_number} is now {order.get_status_display().lower()}.",
            order_id=order.pk,
        )
    logger.info("Order updated", extra={"order_number": order.order_number, "fields": sorted(fields)})
    return order


def has_purchased(user_id, product_id) -> bool:
    """True when the user holds a paid order containing the product."""
    return OrderItem.objects.filter(
        order__user_id=user_id,
        order__payment_status=Order.PaymentStatus.PAID,
        product_id=product_id,
    ).exists()


def get_product_buyers(product_id):
    """Order lines for a product, with their orders and buyers."""
    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound("Product not found")
    return (
        OrderItem.objects.filter(product_id=product_id)
        .select_related("order", "order__user")
        .order_by("-order__created_at")
    )


def create_refund(auth: AuthContext, order_id, reason: str, amount: Decimal) -> Refund:
    """Request a refund for one of the caller's own orders."""
    auth.ensure_authenticated()
    order = get_order(order_id)
    if str(order.user_id) != auth.user_id:
        raise Forbidden("You can only request refunds for your own orders")
    if amount <= 0 or amount > order.total_amount:
        raise ValidationError(f"Refund amount must be between 0 and {order.total_amount}")

    refund = Refund.objects.create(order=order, user_id=auth.user_id, reason=reason, amount=amount)
    logger.info("Refund requested", extra={"refund_id": refund.pk, "order_number": order.order_number})
    return refund


def list_refunds(auth: AuthContext):
    auth.ensure_authenticated()
    return Refund.objects.filter(user_id=auth.user_id).select_related("order")


def get_refund(refund_id) -> Refund:
    try:
        return Refund.objects.select_related("order").get(pk=refund_id)
    except Refund.DoesNotExist:
        raise NotFound("Refund not found")


@transaction.atomic
def update_refund(auth: AuthContext, refund_id, status: str | None = None, admin_notes: str | None = None) -> Refund:
    """Admin decision on a refund.

    Moving to a decided status stamps ``processed_by``/``processed_at``.
    ``processed`` also marks the order refunded and cancelled.
    """
    refund = get_refund(refund_id)
    if admin_notes is not None:
        refund.admin_notes = admin_notes

    if status is not None and status != refund.status:
        refund.status = status
        if status in REFUND_DECISIONS:
            refund.processed_by_id = auth.user_id
            refund.processed_at = timezone.now()

        if status == Refund.Status.PROCESSED:
            Order.objects.filter(pk=refund.order_id).update(
                payment_status=Order.PaymentStatus.REFUNDED,
                status=Order.Status.CANCELLED,
                updated_at=timezone.now(),
            )

        create_notification(
            user_id=refund.user_id,
            type=Notification.Type.ORDER_UPDATE,
            title="Refund update",
            message=f"Your refund for order {refund.order.order_number} is {refund.get_status_display().lower()}.",
            order_id=refund.order_id,
        )
        logger.info("Refund transitioned", extra={"refund_id": refund.pk, "status": status})

    refund.save()
    return refund


def get_stats() -> dict:
    """Headline numbers for the admin dashboard."""
    order_stats = Order.objects.aggregate(
        total_orders=Count("pk"),
        completed_orders=Count("pk", filter=Q(status=Order.Status.COMPLETED)),
        pending_orders=Count("pk", filter=Q(status=Order.Status.PENDING)),
        total_revenue=Sum("total_amount", filter=Q(payment_status=Order.PaymentStatus.PAID)),
    )
    now = timezone.now()
    active_discounts = DiscountCode.objects.filter(active=True).filter(
        Q(expires_at__isnull=True) | Q(expires_at__gte=now)
    ).count()

    return {
        "totalOrders": order_stats["total_orders"],
        "completedOrders": order_stats["completed_orders"],
        "pendingOrders": order_stats["pending_orders"],
        "totalRevenue": order_stats["total_revenue"] or Decimal("0.00"),
        "totalProducts": Product.objects.count(),
        "activeProducts": Product.objects.filter(status=Product.Status.ACTIVE).count(),
        "totalUsers": get_user_model().objects.count(),
        "activeDiscounts": active_discounts,
        "pendingRefunds": Refund.objects.filter(status=Refund.Status.PENDING).count(),
    }
