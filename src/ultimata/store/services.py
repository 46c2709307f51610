"""Cart and wishlist service layer.

Clean domain logic for shopper state.
Views should call these functions instead of manipulating models directly.
"""

import logging

from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from ultimata.catalog.models import Product
from ultimata.core.exceptions import NotFound

from .models import CartItem, WishlistItem

logger = logging.getLogger(__name__)


def get_cart(user_id):
    """Cart lines for a user with their products."""
    return CartItem.objects.filter(user_id=user_id).select_related("product")


def _increment(user_id, product_id, quantity: int) -> int:
    return CartItem.objects.filter(user_id=user_id, product_id=product_id).update(
        quantity=F("quantity") + quantity,
        updated_at=timezone.now(),
    )


def add_to_cart(user_id, product_id, quantity: int) -> CartItem:
    """Add ``quantity`` of a product, merging into an existing line.

    Two concurrent adds of the same product sum: whichever insert loses the
    unique (user, product) race falls back to an in-database increment.
    Stock is not checked here.

    Args:
        user_id: Owner of the cart
        product_id: Product to add
        quantity: Units to add (>= 1)

    Returns:
        The resulting CartItem

    Raises:
        NotFound: Product does not exist
    """
    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound("Product not found")

    with transaction.atomic():
        if not _increment(user_id, product_id, quantity):
            try:
                with transaction.atomic():
                    CartItem.objects.create(user_id=user_id, product_id=product_id, quantity=quantity)
            except IntegrityError:
                _increment(user_id, product_id, quantity)

    return CartItem.objects.select_related("product").get(user_id=user_id, product_id=product_id)


def update_cart_item(user_id, item_id, quantity: int) -> CartItem | None:
    """Set a line's quantity. Returns None if the caller has no such line.

    Quantity is not checked against stock; checkout enforces stock.
    """
    updated = CartItem.objects.filter(pk=item_id, user_id=user_id).update(
        quantity=quantity,
        updated_at=timezone.now(),
    )
    if not updated:
        return None
    return CartItem.objects.select_related("product").get(pk=item_id)


def remove_from_cart(user_id, item_id):
    CartItem.objects.filter(pk=item_id, user_id=user_id).delete()


def clear_cart(user_id):
    deleted, _ = CartItem.objects.filter(user_id=user_id).delete()
    logger.debug("Cleared cart", extra={"user_id": str(user_id), "lines": deleted})


def get_wishlist(user_id):
    return WishlistItem.objects.filter(user_id=user_id).select_related("product")


def add_to_wishlist(user_id, product_id) -> WishlistItem:
    if not Product.objects.filter(pk=product_id).exists():
        raise NotFound("Product not found")
    item, _ = WishlistItem.objects.get_or_create(user_id=user_id, product_id=product_id)
    return item


def remove_from_wishlist(user_id, product_id):
    WishlistItem.objects.filter(user_id=user_id, product_id=product_id).delete()


def is_in_wishlist(user_id, product_id) -> bool:
    return WishlistItem.objects.filter(user_id=user_id, product_id=product_id).exists()
