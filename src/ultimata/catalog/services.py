"""Catalog service layer.

Stock is only ever changed with single conditional UPDATE statements so
concurrent checkouts and admin adjustments cannot lose updates.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import F, Value
from django.db.models.functions import Greatest

from ultimata.core.exceptions import Conflict, InsufficientStock, NotFound, ValidationError

from .models import Category, Product, Review

logger = logging.getLogger(__name__)


def get_product(product_id) -> Product:
    try:
        return Product.objects.select_related("category").get(pk=product_id)
    except Product.DoesNotExist:
        raise NotFound("Product not found")


def get_category(category_id) -> Category:
    try:
        return Category.objects.get(pk=category_id)
    except Category.DoesNotExist:
        raise NotFound("Category not found")


def _check_category(fields: dict):
    category_id = fields.get("category_id")
    if category_id is not None and not Category.objects.filter(pk=category_id).exists():
        raise ValidationError(f"Category {category_id} does not exist")


def create_product(**fields) -> Product:
    _check_category(fields)
    product = Product.objects.create(**fields)
    logger.info("Product created", extra={"product_id": product.pk})
    return product


def update_product(product_id, **fields) -> Product:
    product = get_product(product_id)
    _check_category(fields)
    for name, value in fields.items():
        setattr(product, name, value)
    product.save()
    return product


def delete_product(product_id):
    """Delete a product; refused while historical orders reference it."""
    from ultimata.orders.models import OrderItem

    if OrderItem.objects.filter(product_id=product_id).exists():
        raise Conflict("Product has orders; set it inactive instead")
    Product.objects.filter(pk=product_id).delete()


def adjust_stock(product_id, delta: int) -> Product:
    """Add ``delta`` to stock, clamping at zero. No upper bound."""
    updated = Product.objects.filter(pk=product_id).update(
        stock=Greatest(F("stock") + delta, Value(0)),
    )
    if not updated:
        raise NotFound("Product not found")

    product = get_product(product_id)
    logger.info(
        "Stock adjusted",
        extra={"product_id": product.pk, "delta": delta, "stock": product.stock},
    )
    return product


def decrement_stock(product_id, quantity: int):
    """Atomically take ``quantity`` units out of stock.

    The check and the write are one statement; zero affected rows means
    another purchase got there first (or the product is gone).

    Raises:
        InsufficientStock: Fewer than ``quantity`` units available
    """
    updated = Product.objects.filter(pk=product_id, stock__gte=quantity).update(
        stock=F("stock") - quantity,
    )
    if updated != 1:
        available = Product.objects.filter(pk=product_id).values_list("stock", flat=True).first()
        raise InsufficientStock(
            f"Insufficient stock for product {product_id}",
            details={"productId": product_id, "requested": quantity, "available": available or 0},
        )


def create_category(**fields) -> Category:
    try:
        with transaction.atomic():
            return Category.objects.create(**fields)
    except IntegrityError:
        raise Conflict(f"Category slug '{fields.get('slug')}' already exists")


def update_category(category_id, **fields) -> Category:
    category = get_category(category_id)
    for name, value in fields.items():
        setattr(category, name, value)
    try:
        with transaction.atomic():
            category.save()
    except IntegrityError:
        raise Conflict(f"Category slug '{category.slug}' already exists")
    return category


def delete_category(category_id):
    Category.objects.filter(pk=category_id).delete()


def create_review(user_id, product_id, rating: int, title: str = "", comment: str = "", order_id=None) -> Review:
    """Submit a review; one per user and product. Reviews start unapproved."""
    product = get_product(product_id)
    if order_id is not None:
        from ultimata.orders.models import Order

        if not Order.objects.filter(pk=order_id, user_id=user_id).exists():
            raise ValidationError("Order not found for this user")

    try:
        with transaction.atomic():
            return Review.objects.create(
                user_id=user_id,
                product=product,
                order_id=order_id,
                rating=rating,
                title=title,
                comment=comment,
            )
    except IntegrityError:
        raise Conflict("You have already reviewed this product")


def get_review(review_id) -> Review:
    try:
        return Review.objects.get(pk=review_id)
    except Review.DoesNotExist:
        raise NotFound("Review not found")


def update_review(review_id, **fields) -> Review:
    review = get_review(review_id)
    for name, value in fields.items():
        setattr(review, name, value)
    review.save()
    return review


def delete_review(review_id):
    Review.objects.filter(pk=review_id).delete()
