"""Tests for the checkout workflow."""

from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.db import IntegrityError
from django.utils import timezone

from ultimata.catalog.models import Product
from ultimata.core.auth import AuthContext
from ultimata.core.exceptions import (
    AuthenticationRequired,
    InsufficientStock,
    NotFound,
    OrderNumberCollision,
    ValidationError,
)
from ultimata.discounts.exceptions import DiscountExpired, DiscountNotApplicable
from ultimata.discounts.models import DiscountCode
from ultimata.notifications.models import Notification
from ultimata.orders import services
from ultimata.orders.models import Order, OrderItem
from ultimata.orders.services import OrderLine
from ultimata.store.models import CartItem
from ultimata.store.services import add_to_cart


@pytest.fixture
def second_product(db, category):
    return Product.objects.create(
        name="Music Family",
        description="Six members",
        price=Decimal("5.00"),
        stock=1,
        type=Product.Type.ACCOUNT,
        category=category,
    )


@pytest.mark.django_db
class TestPlaceOrder:
    def test_completes_decrements_and_clears_cart(self, auth, user, product):
        add_to_cart(user.pk, product.pk, 2)

        order = services.place_order(auth, [OrderLine(product.pk, 2)], "paypal", declared_total=Decimal("22.00"))

        assert order.status == Order.Status.COMPLETED
        assert order.payment_status == Order.PaymentStatus.PAID
        assert order.total_amount == Decimal("20.00")
        product.refresh_from_db()
        assert product.stock == 3
        assert not CartItem.objects.filter(user=user).exists()

    def test_items_snapshot_product(self, auth, product):
        order = services.place_order(auth, [OrderLine(product.pk, 1)], "gcash")

        product.name = "Renamed"
        product.price = Decimal("99.00")
        product.save()

        item = order.items.get()
        assert item.product_name == "Streaming Premium"
        assert item.price == Decimal("10.00")
        assert item.product_type == "account"

    def test_duplicate_lines_are_merged(self, auth, product):
        order = services.place_order(auth, [OrderLine(product.pk, 1), OrderLine(product.pk, 2)], "binance")

        assert order.items.get().quantity == 3
        product.refresh_from_db()
        assert product.stock == 2

    def test_order_number_format(self, auth, product):
        order = services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")

        prefix, millis, suffix = order.order_number.split("-")
        assert prefix == "ORD"
        assert millis.isdigit()
        assert len(suffix) == 9
        assert suffix.isalnum() and suffix.upper() == suffix

    def test_currency_defaults_from_settings(self, auth, product, settings):
        settings.STORE_DEFAULT_CURRENCY = "PHP"
        order = services.place_order(auth, [OrderLine(product.pk, 1)], "gcash")

        assert order.currency == "PHP"

    def test_tax_from_site_setting(self, auth, product):
        from ultimata.core.services import set_setting

        set_setting("tax_rate", "0.10")
        order = services.place_order(auth, [OrderLine(product.pk, 2)], "paypal")

        assert order.tax_amount == Decimal("2.00")
        assert order.total_amount == Decimal("22.00")

    def test_buyer_gets_order_notification(self, auth, user, product):
        order = services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")

        notification = Notification.objects.get(user=user)
        assert notification.type == Notification.Type.ORDER_UPDATE
        assert notification.order_id == order.pk
        assert order.order_number in notification.message


@pytest.mark.django_db
class TestPlaceOrderFailures:
    def test_empty_items_creates_nothing(self, auth):
        with pytest.raises(ValidationError):
            services.place_order(auth, [], "paypal")

        assert not Order.objects.exists()

    def test_invalid_payment_method(self, auth, product):
        with pytest.raises(ValidationError):
            services.place_order(auth, [OrderLine(product.pk, 1)], "cash")

        assert not Order.objects.exists()

    def test_anonymous_caller(self, product):
        with pytest.raises(AuthenticationRequired):
            services.place_order(AuthContext.anonymous(), [OrderLine(product.pk, 1)], "paypal")

    def test_unknown_product(self, auth):
        with pytest.raises(NotFound):
            services.place_order(auth, [OrderLine(999999, 1)], "paypal")

    def test_inactive_product(self, auth, product):
        product.status = Product.Status.INACTIVE
        product.save()

        with pytest.raises(ValidationError):
            services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")

    def test_insufficient_stock_rolls_back_everything(self, auth, user, product, second_product):
        add_to_cart(user.pk, product.pk, 2)

        with pytest.raises(InsufficientStock):
            services.place_order(
                auth,
                [OrderLine(product.pk, 2), OrderLine(second_product.pk, 2)],
                "paypal",
            )

        product.refresh_from_db()
        second_product.refresh_from_db()
        assert product.stock == 5
        assert second_product.stock == 1
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()
        assert CartItem.objects.filter(user=user).count() == 1
        assert not Notification.objects.exists()


@pytest.mark.django_db
class TestCheckoutDiscounts:
    def test_discount_is_applied_and_consumed(self, auth, product):
        code = DiscountCode.objects.create(code="HALF", discount_percentage=Decimal("50"), total_uses=1)

        order = services.place_order(auth, [OrderLine(product.pk, 2)], "paypal", discount_code="HALF")

        assert order.discount_amount == Decimal("10.00")
        assert order.total_amount == Decimal("10.00")
        assert order.discount_code == "HALF"
        code.refresh_from_db()
        assert code.used_count == 1

    def test_scoped_discount_only_covers_its_products(self, auth, product, second_product):
        DiscountCode.objects.create(
            code="MUSIC", discount_percentage=Decimal("20"), product_ids=[second_product.pk],
        )

        order = services.place_order(
            auth,
            [OrderLine(product.pk, 1), OrderLine(second_product.pk, 1)],
            "paypal",
            discount_code="MUSIC",
        )

        assert order.subtotal_amount == Decimal("15.00")
        assert order.discount_amount == Decimal("1.00")
        assert order.total_amount == Decimal("14.00")

    def test_scoped_discount_with_no_matching_lines(self, auth, product, second_product):
        code = DiscountCode.objects.create(
            code="MUSIC", discount_percentage=Decimal("20"), product_ids=[second_product.pk],
        )

        with pytest.raises(DiscountNotApplicable):
            services.place_order(auth, [OrderLine(product.pk, 1)], "paypal", discount_code="MUSIC")

        code.refresh_from_db()
        assert code.used_count == 0
        assert not Order.objects.exists()

    def test_expired_discount_fails_checkout(self, auth, product):
        DiscountCode.objects.create(
            code="OLD",
            discount_percentage=Decimal("10"),
            expires_at=timezone.now() - timedelta(days=1),
        )

        with pytest.raises(DiscountExpired):
            services.place_order(auth, [OrderLine(product.pk, 1)], "paypal", discount_code="OLD")

        product.refresh_from_db()
        assert product.stock == 5

    def test_failed_checkout_gives_the_use_back(self, auth, product):
        code = DiscountCode.objects.create(code="ONCE", discount_percentage=Decimal("10"), total_uses=1)

        with pytest.raises(InsufficientStock):
            services.place_order(auth, [OrderLine(product.pk, 50)], "paypal", discount_code="ONCE")

        code.refresh_from_db()
        assert code.used_count == 0


class TestOrderNumbers:
    def test_ten_thousand_numbers_are_unique(self):
        numbers = {services.generate_order_number() for _ in range(10_000)}
        assert len(numbers) == 10_000

    def test_uses_given_timestamp(self):
        assert services.generate_order_number(now_ms=1700000000000).startswith("ORD-1700000000000-")

    @pytest.mark.django_db
    def test_collision_is_retried(self, auth, user, product):
        Order.objects.create(
            order_number="ORD-1-TAKEN0000", user=user, total_amount=Decimal("1.00"), payment_method="paypal",
        )

        with patch.object(services, "generate_order_number", side_effect=["ORD-1-TAKEN0000", "ORD-2-FRESH0000"]):
            order = services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")

        assert order.order_number == "ORD-2-FRESH0000"

    @pytest.mark.django_db
    def test_collision_exhausts_attempts(self, auth, user, product, settings):
        settings.ORDER_NUMBER_MAX_ATTEMPTS = 3
        Order.objects.create(
            order_number="ORD-1-TAKEN0000", user=user, total_amount=Decimal("1.00"), payment_method="paypal",
        )

        with patch.object(services, "generate_order_number", return_value="ORD-1-TAKEN0000"):
            with pytest.raises(OrderNumberCollision):
                services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")

        product.refresh_from_db()
        assert product.stock == 5
        assert Order.objects.count() == 1

    @pytest.mark.django_db
    def test_other_integrity_errors_propagate(self, auth, product):
        with patch.object(Order.objects, "create", side_effect=IntegrityError("not null")):
            with pytest.raises(IntegrityError):
                services.place_order(auth, [OrderLine(product.pk, 1)], "paypal")
