"""Request bodies for discount endpoints."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from ultimata.core.api import RequestSchema


class ValidateDiscountRequest(RequestSchema):
    code: str = Field(min_length=1, max_length=64)


def _no_zero_uses(value):
    if value == 0:
        raise ValueError("totalUses must be positive or -1 for unlimited")
    return value


class DiscountCodeRequest(RequestSchema):
    code: str = Field(min_length=1, max_length=64)
    discount_percentage: Decimal = Field(gt=0, le=100, max_digits=5, decimal_places=2)
    total_uses: int = Field(default=-1, ge=-1)
    expires_at: datetime | None = None
    active: bool = True
    product_ids: list[int] = Field(default_factory=list)

    no_zero_uses = field_validator("total_uses")(_no_zero_uses)


class DiscountCodeUpdateRequest(RequestSchema):
    code: str | None = Field(default=None, min_length=1, max_length=64)
    discount_percentage: Decimal | None = Field(default=None, gt=0, le=100, max_digits=5, decimal_places=2)
    total_uses: int | None = Field(default=None, ge=-1)
    expires_at: datetime | None = None
    active: bool | None = None
    product_ids: list[int] | None = None

    no_zero_uses = field_validator("total_uses")(_no_zero_uses)
