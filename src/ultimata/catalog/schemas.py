"""Request bodies for catalog endpoints."""

from decimal import Decimal

from pydantic import Field, StrictInt

from ultimata.core.api import RequestSchema

from .models import Product

ProductStatus = Product.Status
ProductType = Product.Type


class ProductCreateRequest(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    description: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    type: ProductType
    status: ProductStatus = ProductStatus.ACTIVE
    category_id: int | None = None
    featured: bool = False
    image_url: str = ""
    account_username: str = ""
    account_password: str = ""
    file_id: str = ""
    file_name: str = ""
    file_size: int | None = Field(default=None, ge=0)


class ProductUpdateRequest(RequestSchema):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    price: Decimal | None = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: int | None = Field(default=None, ge=0)
    type: ProductType | None = None
    status: ProductStatus | None = None
    category_id: int | None = None
    featured: bool | None = None
    image_url: str | None = None
    account_username: str | None = None
    account_password: str | None = None
    file_id: str | None = None
    file_name: str | None = None
    file_size: int | None = Field(default=None, ge=0)


class StockAdjustmentRequest(RequestSchema):
    adjustment: StrictInt


class CategoryRequest(RequestSchema):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=120, pattern=r"^[-a-zA-Z0-9_]+$")
    description: str = ""


class CategoryUpdateRequest(RequestSchema):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=120, pattern=r"^[-a-zA-Z0-9_]+$")
    description: str | None = None


class ReviewRequest(RequestSchema):
    rating: int = Field(ge=1, le=5)
    title: str = Field(default="", max_length=200)
    comment: str = ""
    order_id: int | None = None


class ReviewUpdateRequest(RequestSchema):
    is_approved: bool | None = None
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = None
