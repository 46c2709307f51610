"""HTTP tests for orders, refunds, and the admin order back-office."""

from decimal import Decimal

import pytest

from ultimata.catalog.models import Product
from ultimata.core.auth import AuthContext
from ultimata.orders import services
from ultimata.orders.models import Order, Refund
from ultimata.orders.services import OrderLine
from ultimata.store.models import CartItem


@pytest.fixture
def order(auth, product):
    """A completed order of 2 x product (total 20.00)."""
    return services.place_order(auth, [OrderLine(product.pk, 2)], "paypal")


@pytest.mark.django_db
class TestCheckoutEndpoint:
    def test_end_to_end_checkout(self, user_client, user, product):
        user_client.post("/api/cart/", {"productId": product.pk, "quantity": 2}, content_type="application/json")

        response = user_client.post(
            "/api/orders/",
            {
                "items": [{"productId": product.pk, "quantity": 2}],
                "total": "22.00",
                "currency": "USD",
                "paymentMethod": "paypal",
            },
            content_type="application/json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "completed"
        assert data["paymentStatus"] == "paid"
        assert data["totalAmount"] == "20.00"
        assert data["orderNumber"].startswith("ORD-")
        assert data["items"][0]["productName"] == "Streaming Premium"
        assert Product.objects.get(pk=product.pk).stock == 3
        assert not CartItem.objects.filter(user=user).exists()
        assert user_client.get("/api/cart/").json() == []

    def test_empty_items_is_400(self, user_client):
        response = user_client.post(
            "/api/orders/",
            {"items": [], "total": "0", "currency": "USD", "paymentMethod": "paypal"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
        assert not Order.objects.exists()

    def test_invalid_payment_method_is_400(self, user_client, product):
        response = user_client.post(
            "/api/orders/",
            {"items": [{"productId": product.pk, "quantity": 1}], "paymentMethod": "cash"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert not Order.objects.exists()

    def test_insufficient_stock_is_409(self, user_client, product):
        response = user_client.post(
            "/api/orders/",
            {"items": [{"productId": product.pk, "quantity": 6}], "paymentMethod": "paypal"},
            content_type="application/json",
        )

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "insufficient_stock"
        assert data["details"]["available"] == 5
        assert not Order.objects.exists()

    def test_anonymous_checkout_is_401(self, client, product):
        response = client.post(
            "/api/orders/",
            {"items": [{"productId": product.pk, "quantity": 1}], "paymentMethod": "paypal"},
            content_type="application/json",
        )
        assert response.status_code == 401


@pytest.mark.django_db
class TestOrderAccess:
    def test_owner_can_read(self, user_client, order):
        response = user_client.get(f"/api/orders/{order.pk}/")

        assert response.status_code == 200
        assert response.json()["orderNumber"] == order.order_number

    def test_other_user_is_forbidden(self, client, other_user, order):
        client.force_login(other_user)

        assert client.get(f"/api/orders/{order.pk}/").status_code == 403

    def test_admin_can_read(self, admin_client, order):
        assert admin_client.get(f"/api/orders/{order.pk}/").status_code == 200

    def test_missing_order_is_404(self, user_client, db):
        assert user_client.get("/api/orders/999999/").status_code == 404

    def test_list_only_own_orders(self, user_client, order, other_user, product):
        services.place_order(AuthContext.for_user(other_user), [OrderLine(product.pk, 1)], "gcash")

        data = user_client.get("/api/orders/").json()

        assert [o["id"] for o in data] == [order.pk]


@pytest.mark.django_db
class TestAdminOrders:
    def test_list_all(self, admin_client, order):
        data = admin_client.get("/api/admin/orders/").json()
        assert [o["orderNumber"] for o in data] == [order.order_number]

    def test_update_status(self, admin_client, order):
        response = admin_client.put(
            f"/api/admin/orders/{order.pk}/",
            {"status": "processing"},
            content_type="application/json",
        )

        assert response.status_code == 200
        order.refresh_from_db()
        assert order.status == Order.Status.PROCESSING
        assert order.payment_status == Order.PaymentStatus.PAID

    def test_update_rejects_unknown_status(self, admin_client, order):
        response = admin_client.put(
            f"/api/admin/orders/{order.pk}/",
            {"status": "shipped"},
            content_type="application/json",
        )
        assert response.status_code == 400

    def test_buyers(self, admin_client, order, product, user):
        data = admin_client.get(f"/api/admin/products/{product.pk}/buyers/").json()

        assert len(data) == 1
        assert data[0]["email"] == user.email
        assert data[0]["quantity"] == 2

    def test_stats(self, admin_client, order, user):
        data = admin_client.get("/api/admin/stats/").json()

        assert data["totalOrders"] == 1
        assert data["completedOrders"] == 1
        assert data["pendingOrders"] == 0
        assert Decimal(data["totalRevenue"]) == Decimal("20.00")
        assert data["totalProducts"] == 1
        assert data["totalUsers"] == 2

    def test_customer_cannot_list_all(self, user_client):
        assert user_client.get("/api/admin/orders/").status_code == 403


@pytest.mark.django_db
class TestRefunds:
    def test_request_refund_for_own_order(self, user_client, order):
        response = user_client.post(
            "/api/refunds/",
            {"orderId": order.pk, "reason": "Did not work", "amount": "20.00"},
            content_type="application/json",
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        assert len(user_client.get("/api/refunds/").json()) == 1

    @pytest.mark.parametrize("amount", ["0", "20.01", "-1"])
    def test_amount_bounds(self, user_client, order, amount):
        response = user_client.post(
            "/api/refunds/",
            {"orderId": order.pk, "reason": "x", "amount": amount},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert not Refund.objects.exists()

    def test_cannot_refund_someone_elses_order(self, client, other_user, order):
        client.force_login(other_user)

        response = client.post(
            "/api/refunds/",
            {"orderId": order.pk, "reason": "mine now", "amount": "1.00"},
            content_type="application/json",
        )

        assert response.status_code == 403

    def test_processing_refund_cancels_order(self, admin_client, admin_user, auth, order):
        refund = services.create_refund(auth, order.pk, "Broken", Decimal("20.00"))

        response = admin_client.put(
            f"/api/admin/refunds/{refund.pk}/",
            {"status": "processed", "adminNotes": "Refunded via PayPal"},
            content_type="application/json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["processedBy"] == str(admin_user.pk)
        assert data["processedAt"] is not None
        order.refresh_from_db()
        assert order.payment_status == Order.PaymentStatus.REFUNDED
        assert order.status == Order.Status.CANCELLED

    def test_rejecting_keeps_order(self, admin_auth, auth, order):
        refund = services.create_refund(auth, order.pk, "Changed my mind", Decimal("5.00"))

        refund = services.update_refund(admin_auth, refund.pk, status="rejected")

        assert refund.processed_at is not None
        order.refresh_from_db()
        assert order.status == Order.Status.COMPLETED

    def test_notes_only_update_does_not_stamp(self, admin_auth, auth, order):
        refund = services.create_refund(auth, order.pk, "Broken", Decimal("5.00"))

        refund = services.update_refund(admin_auth, refund.pk, admin_notes="Looking into it")

        assert refund.admin_notes == "Looking into it"
        assert refund.processed_at is None
        assert refund.processed_by_id is None
