"""Tests for atomic stock changes."""

import pytest

from ultimata.catalog import services
from ultimata.catalog.models import Product
from ultimata.core.exceptions import InsufficientStock, NotFound


@pytest.mark.django_db
class TestDecrementStock:
    def test_decrements_when_enough_stock(self, product):
        services.decrement_stock(product.pk, 2)

        product.refresh_from_db()
        assert product.stock == 3

    def test_can_take_the_last_unit(self, product):
        services.decrement_stock(product.pk, 5)

        product.refresh_from_db()
        assert product.stock == 0

    def test_insufficient_stock_raises_and_leaves_stock(self, product):
        with pytest.raises(InsufficientStock) as exc_info:
            services.decrement_stock(product.pk, 6)

        assert exc_info.value.details == {"productId": product.pk, "requested": 6, "available": 5}
        product.refresh_from_db()
        assert product.stock == 5

    def test_missing_product_reports_zero_available(self, db):
        with pytest.raises(InsufficientStock) as exc_info:
            services.decrement_stock(999999, 1)

        assert exc_info.value.details["available"] == 0


@pytest.mark.django_db
class TestAdjustStock:
    def test_positive_adjustment(self, product):
        assert services.adjust_stock(product.pk, 10).stock == 15

    def test_negative_adjustment(self, product):
        assert services.adjust_stock(product.pk, -3).stock == 2

    def test_clamps_at_zero(self, product):
        assert services.adjust_stock(product.pk, -50).stock == 0

    def test_missing_product(self, db):
        with pytest.raises(NotFound):
            services.adjust_stock(999999, 1)

    def test_admin_endpoint(self, admin_client, product):
        response = admin_client.post(
            f"/api/admin/products/{product.pk}/adjust-stock/",
            {"adjustment": -7},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["stock"] == 0
        assert Product.objects.get(pk=product.pk).stock == 0

    def test_admin_endpoint_rejects_non_integer(self, admin_client, product):
        response = admin_client.post(
            f"/api/admin/products/{product.pk}/adjust-stock/",
            {"adjustment": "5"},
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_customer_cannot_adjust(self, user_client, product):
        response = user_client.post(
            f"/api/admin/products/{product.pk}/adjust-stock/",
            {"adjustment": 5},
            content_type="application/json",
        )

        assert response.status_code == 403
