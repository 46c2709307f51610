"""Request bodies for order and refund endpoints."""

from decimal import Decimal

from pydantic import Field

from ultimata.core.api import RequestSchema

from .models import Order, Refund


class OrderLineRequest(RequestSchema):
    product_id: int
    quantity: int = Field(ge=1)


class CreateOrderRequest(RequestSchema):
    items: list[OrderLineRequest]
    payment_method: str
    total: Decimal | None = None
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    discount_code: str | None = None


class OrderUpdateRequest(RequestSchema):
    status: Order.Status | None = None
    payment_status: Order.PaymentStatus | None = None
    transaction_id: str | None = None


class RefundRequest(RequestSchema):
    order_id: int
    reason: str = Field(min_length=1)
    amount: Decimal = Field(max_digits=10, decimal_places=2)


class RefundUpdateRequest(RequestSchema):
    status: Refund.Status | None = None
    admin_notes: str | None = None
