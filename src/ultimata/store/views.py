"""Cart and wishlist views."""

from ultimata.catalog.views import serialize_product
from ultimata.core.api import ApiView, api_response, message_response, parse_body, require_auth
from ultimata.core.exceptions import NotFound

from . import services
from .models import CartItem, WishlistItem
from .schemas import AddToCartRequest, UpdateCartItemRequest


def serialize_cart_item(item: CartItem) -> dict:
    return {
        "id": item.pk,
        "userId": str(item.user_id),
        "productId": item.product_id,
        "quantity": item.quantity,
        "product": serialize_product(item.product),
        "createdAt": item.created_at,
        "updatedAt": item.updated_at,
    }


def serialize_wishlist_item(item: WishlistItem) -> dict:
    return {
        "id": item.pk,
        "productId": item.product_id,
        "product": serialize_product(item.product),
        "createdAt": item.created_at,
    }


class CartView(ApiView):
    """GET/POST /api/cart/"""

    @require_auth
    def get(self, request):
        items = services.get_cart(self.auth.user_id)
        return api_response([serialize_cart_item(i) for i in items])

    @require_auth
    def post(self, request):
        body = parse_body(request, AddToCartRequest)
        item = services.add_to_cart(self.auth.user_id, body.product_id, body.quantity)
        return api_response(serialize_cart_item(item))


class CartItemView(ApiView):
    """PUT/DELETE /api/cart/<id>/"""

    @require_auth
    def put(self, request, item_id):
        body = parse_body(request, UpdateCartItemRequest)
        item = services.update_cart_item(self.auth.user_id, item_id, body.quantity)
        if item is None:
            raise NotFound("Cart item not found")
        return api_response(serialize_cart_item(item))

    @require_auth
    def delete(self, request, item_id):
        services.remove_from_cart(self.auth.user_id, item_id)
        return message_response("Item removed from cart")


class WishlistView(ApiView):
    """GET /api/wishlist/"""

    @require_auth
    def get(self, request):
        items = services.get_wishlist(self.auth.user_id)
        return api_response([serialize_wishlist_item(i) for i in items])


class WishlistItemView(ApiView):
    """POST/DELETE /api/wishlist/<product_id>/"""

    @require_auth
    def post(self, request, product_id):
        item = services.add_to_wishlist(self.auth.user_id, product_id)
        return api_response({"id": item.pk, "productId": item.product_id, "createdAt": item.created_at})

    @require_auth
    def delete(self, request, product_id):
        services.remove_from_wishlist(self.auth.user_id, product_id)
        return message_response("Removed from wishlist")


class WishlistCheckView(ApiView):
    """GET /api/wishlist/<product_id>/check/"""

    @require_auth
    def get(self, request, product_id):
        return api_response({"isInWishlist": services.is_in_wishlist(self.auth.user_id, product_id)})
