"""Request bodies for cart endpoints."""

from pydantic import Field

from ultimata.core.api import RequestSchema


class AddToCartRequest(RequestSchema):
    product_id: int
    quantity: int = Field(default=1, ge=1)


class UpdateCartItemRequest(RequestSchema):
    quantity: int = Field(ge=1)
