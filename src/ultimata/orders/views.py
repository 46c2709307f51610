"""Order, refund, and admin order views."""

from ultimata.core.api import (
    ApiView,
    api_response,
    changed_fields,
    parse_body,
    require_admin,
    require_auth,
)

from . import services
from .models import Order, OrderItem, Refund
from .schemas import CreateOrderRequest, OrderUpdateRequest, RefundRequest, RefundUpdateRequest


def serialize_order_item(item: OrderItem) -> dict:
    return {
        "id": item.pk,
        "productId": item.product_id,
        "quantity": item.quantity,
        "price": item.price,
        "productName": item.product_name,
        "productType": item.product_type,
    }


def serialize_order(order: Order, include_items: bool = True) -> dict:
    data = {
        "id": order.pk,
        "orderNumber": order.order_number,
        "userId": str(order.user_id),
        "subtotalAmount": order.subtotal_amount,
        "discountAmount": order.discount_amount,
        "taxAmount": order.tax_amount,
        "totalAmount": order.total_amount,
        "currency": order.currency,
        "paymentMethod": order.payment_method,
        "paymentStatus": order.payment_status,
        "status": order.status,
        "discountCode": order.discount_code or None,
        "transactionId": order.transaction_id or None,
        "createdAt": order.created_at,
        "updatedAt": order.updated_at,
    }
    if include_items:
        data["items"] = [serialize_order_item(i) for i in order.items.all()]
    return data


def serialize_refund(refund: Refund) -> dict:
    return {
        "id": refund.pk,
        "orderId": refund.order_id,
        "orderNumber": refund.order.order_number,
        "userId": str(refund.user_id),
        "reason": refund.reason,
        "amount": refund.amount,
        "status": refund.status,
        "adminNotes": refund.admin_notes,
        "processedBy": str(refund.processed_by_id) if refund.processed_by_id else None,
        "processedAt": refund.processed_at,
        "createdAt": refund.created_at,
    }


def serialize_buyer(item: OrderItem) -> dict:
    user = item.order.user
    return {
        "userId": str(user.pk),
        "email": user.email,
        "name": user.get_display_name(),
        "orderId": item.order_id,
        "orderNumber": item.order.order_number,
        "quantity": item.quantity,
        "price": item.price,
        "purchasedAt": item.order.created_at,
    }


class OrderListView(ApiView):
    """GET/POST /api/orders/"""

    @require_auth
    def get(self, request):
        orders = services.list_orders(self.auth)
        return api_response([serialize_order(o) for o in orders])

    @require_auth
    def post(self, request):
        body = parse_body(request, CreateOrderRequest)
        order = services.place_order(
            self.auth,
            lines=[services.OrderLine(product_id=i.product_id, quantity=i.quantity) for i in body.items],
            payment_method=body.payment_method,
            currency=body.currency,
            discount_code=body.discount_code,
            declared_total=body.total,
        )
        return api_response(serialize_order(order), status=201)


class OrderDetailView(ApiView):
    """GET /api/orders/<id>/"""

    @require_auth
    def get(self, request, order_id):
        order = services.get_order_for(self.auth, order_id)
        return api_response(serialize_order(order))


class RefundListView(ApiView):
    """GET/POST /api/refunds/"""

    @require_auth
    def get(self, request):
        refunds = services.list_refunds(self.auth)
        return api_response([serialize_refund(r) for r in refunds])

    @require_auth
    def post(self, request):
        body = parse_body(request, RefundRequest)
        refund = services.create_refund(self.auth, body.order_id, body.reason, body.amount)
        return api_response(serialize_refund(refund), status=201)


class AdminOrderListView(ApiView):
    """GET /api/admin/orders/"""

    @require_admin
    def get(self, request):
        orders = Order.objects.prefetch_related("items")
        status = request.GET.get("status")
        if status:
            orders = orders.filter(status=status)
        return api_response([serialize_order(o) for o in orders])


class AdminOrderDetailView(ApiView):
    """GET/PUT /api/admin/orders/<id>/"""

    @require_admin
    def get(self, request, order_id):
        return api_response(serialize_order(services.get_order(order_id)))

    @require_admin
    def put(self, request, order_id):
        body = parse_body(request, OrderUpdateRequest)
        order = services.update_order(order_id, **changed_fields(body))
        return api_response(serialize_order(order))


class AdminRefundListView(ApiView):
    """GET /api/admin/refunds/"""

    @require_admin
    def get(self, request):
        refunds = Refund.objects.select_related("order")
        return api_response([serialize_refund(r) for r in refunds])


class AdminRefundDetailView(ApiView):
    """PUT /api/admin/refunds/<id>/"""

    @require_admin
    def put(self, request, refund_id):
        body = parse_body(request, RefundUpdateRequest)
        refund = services.update_refund(self.auth, refund_id, **changed_fields(body))
        return api_response(serialize_refund(refund))


class AdminProductBuyersView(ApiView):
    """GET /api/admin/products/<id>/buyers/"""

    @require_admin
    def get(self, request, product_id):
        items = services.get_product_buyers(product_id)
        return api_response([serialize_buyer(i) for i in items])


class AdminStatsView(ApiView):
    """GET /api/admin/stats/"""

    @require_admin
    def get(self, request):
        return api_response(services.get_stats())
