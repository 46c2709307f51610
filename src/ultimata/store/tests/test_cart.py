"""Tests for cart and wishlist behaviour."""

from decimal import Decimal
from unittest.mock import patch

import pytest

from ultimata.catalog.models import Product
from ultimata.core.exceptions import NotFound
from ultimata.store import services
from ultimata.store.models import CartItem, WishlistItem


@pytest.mark.django_db
class TestAddToCart:
    def test_adding_twice_merges_into_one_row(self, user, product):
        services.add_to_cart(user.pk, product.pk, 2)
        item = services.add_to_cart(user.pk, product.pk, 3)

        assert item.quantity == 5
        assert CartItem.objects.filter(user=user, product=product).count() == 1

    def test_insert_losing_race_falls_back_to_increment(self, user, product):
        services.add_to_cart(user.pk, product.pk, 2)
        real_increment = services._increment
        calls = []

        def first_increment_misses(user_id, product_id, quantity):
            # Another request inserted the row after this one looked.
            calls.append(quantity)
            if len(calls) == 1:
                return 0
            return real_increment(user_id, product_id, quantity)

        with patch.object(services, "_increment", side_effect=first_increment_misses):
            item = services.add_to_cart(user.pk, product.pk, 3)

        assert calls == [3, 3]
        assert item.quantity == 5
        assert CartItem.objects.filter(user=user, product=product).count() == 1

    def test_quantity_above_stock_is_accepted(self, user, product):
        item = services.add_to_cart(user.pk, product.pk, product.stock + 10)
        assert item.quantity == 15

    def test_unknown_product(self, user):
        with pytest.raises(NotFound):
            services.add_to_cart(user.pk, 999999, 1)

    def test_carts_are_per_user(self, user, other_user, product):
        services.add_to_cart(user.pk, product.pk, 1)
        services.add_to_cart(other_user.pk, product.pk, 4)

        assert services.get_cart(user.pk).get().quantity == 1
        assert services.get_cart(other_user.pk).get().quantity == 4


@pytest.mark.django_db
class TestUpdateAndRemove:
    def test_update_sets_quantity(self, user, product):
        item = services.add_to_cart(user.pk, product.pk, 1)

        updated = services.update_cart_item(user.pk, item.pk, 4)

        assert updated.quantity == 4

    def test_update_missing_item_returns_none(self, user):
        assert services.update_cart_item(user.pk, 999999, 1) is None

    def test_cannot_update_another_users_item(self, user, other_user, product):
        item = services.add_to_cart(other_user.pk, product.pk, 1)

        assert services.update_cart_item(user.pk, item.pk, 9) is None
        item.refresh_from_db()
        assert item.quantity == 1

    def test_remove_is_idempotent(self, user, product):
        item = services.add_to_cart(user.pk, product.pk, 1)

        services.remove_from_cart(user.pk, item.pk)
        services.remove_from_cart(user.pk, item.pk)

        assert not CartItem.objects.exists()

    def test_clear_cart(self, user, other_user, product, category):
        second = Product.objects.create(
            name="Second", description="", price=Decimal("1.00"), type=Product.Type.ACCOUNT, category=category,
        )
        services.add_to_cart(user.pk, product.pk, 1)
        services.add_to_cart(user.pk, second.pk, 1)
        services.add_to_cart(other_user.pk, product.pk, 1)

        services.clear_cart(user.pk)

        assert not CartItem.objects.filter(user=user).exists()
        assert CartItem.objects.filter(user=other_user).count() == 1


@pytest.mark.django_db
class TestCartViews:
    def test_post_merges_and_returns_row(self, user_client, product):
        url = "/api/cart/"
        user_client.post(url, {"productId": product.pk, "quantity": 1}, content_type="application/json")
        response = user_client.post(url, {"productId": product.pk, "quantity": 2}, content_type="application/json")

        assert response.status_code == 200
        data = response.json()
        assert data["quantity"] == 3
        assert data["product"]["id"] == product.pk
        assert len(user_client.get(url).json()) == 1

    def test_zero_quantity_is_400(self, user_client, product):
        response = user_client.post(
            "/api/cart/", {"productId": product.pk, "quantity": 0}, content_type="application/json",
        )
        assert response.status_code == 400

    def test_put_missing_item_is_404(self, user_client):
        response = user_client.put("/api/cart/999999/", {"quantity": 2}, content_type="application/json")

        assert response.status_code == 404
        assert response.json()["message"] == "Cart item not found"

    def test_slashless_path_redirects(self, user_client):
        response = user_client.get("/api/cart")

        assert response.status_code == 301
        assert response["Location"] == "/api/cart/"

    def test_delete_returns_message(self, user_client, user, product):
        item = services.add_to_cart(user.pk, product.pk, 1)

        response = user_client.delete(f"/api/cart/{item.pk}/")

        assert response.status_code == 200
        assert response.json() == {"message": "Item removed from cart"}


@pytest.mark.django_db
class TestWishlist:
    def test_add_check_remove(self, user_client, product):
        check_url = f"/api/wishlist/{product.pk}/check/"
        assert user_client.get(check_url).json() == {"isInWishlist": False}

        assert user_client.post(f"/api/wishlist/{product.pk}/").status_code == 200
        assert user_client.post(f"/api/wishlist/{product.pk}/").status_code == 200
        assert WishlistItem.objects.count() == 1
        assert user_client.get(check_url).json() == {"isInWishlist": True}

        user_client.delete(f"/api/wishlist/{product.pk}/")
        assert user_client.get(check_url).json() == {"isInWishlist": False}

    def test_list(self, user_client, product):
        user_client.post(f"/api/wishlist/{product.pk}/")

        data = user_client.get("/api/wishlist/").json()

        assert [i["productId"] for i in data] == [product.pk]
