"""Catalog views: public browsing, reviews, and admin product management."""

import logging

from ultimata.core.api import (
    ApiView,
    api_response,
    changed_fields,
    message_response,
    parse_body,
    require_admin,
    require_auth,
)
from ultimata.core.exceptions import NotFound

from . import services
from .models import Category, Product, Review
from .schemas import (
    CategoryRequest,
    CategoryUpdateRequest,
    ProductCreateRequest,
    ProductUpdateRequest,
    ReviewRequest,
    ReviewUpdateRequest,
    StockAdjustmentRequest,
)

logger = logging.getLogger(__name__)

NULLABLE_PRODUCT_FIELDS = ("category_id", "file_size")


def serialize_category(category: Category) -> dict:
    return {
        "id": category.pk,
        "name": category.name,
        "slug": category.slug,
        "description": category.description,
        "createdAt": category.created_at,
    }


def serialize_product(product: Product, include_private: bool = False) -> dict:
    """Product as JSON; account credentials only with ``include_private``."""
    data = {
        "id": product.pk,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "stock": product.stock,
        "type": product.type,
        "status": product.status,
        "categoryId": product.category_id,
        "featured": product.featured,
        "imageUrl": product.image_url,
        "fileName": product.file_name,
        "fileSize": product.file_size,
        "hasFile": product.has_file,
        "createdAt": product.created_at,
        "updatedAt": product.updated_at,
    }
    if include_private:
        data.update({
            "fileId": product.file_id,
            "accountUsername": product.account_username,
            "accountPassword": product.account_password,
        })
    return data


def serialize_review(review: Review) -> dict:
    return {
        "id": review.pk,
        "userId": str(review.user_id),
        "productId": review.product_id,
        "orderId": review.order_id,
        "rating": review.rating,
        "title": review.title,
        "comment": review.comment,
        "isApproved": review.is_approved,
        "createdAt": review.created_at,
    }


class ProductListView(ApiView):
    """GET /api/products/"""

    def get(self, request):
        products = Product.objects.filter(status=Product.Status.ACTIVE)
        category_id = request.GET.get("category")
        if category_id:
            products = products.filter(category_id=category_id)
        if request.GET.get("featured") == "true":
            products = products.filter(featured=True)
        return api_response([serialize_product(p) for p in products])


class ProductDetailView(ApiView):
    """GET /api/products/<id>/

    Inactive products are hidden from everyone but admins.
    """

    def get(self, request, product_id):
        product = services.get_product(product_id)
        if not product.is_active and not self.auth.is_admin:
            raise NotFound("Product not found")
        return api_response(serialize_product(product, include_private=self.auth.is_admin))


class CategoryListView(ApiView):
    """GET /api/categories/"""

    def get(self, request):
        return api_response([serialize_category(c) for c in Category.objects.all()])


class ProductReviewsView(ApiView):
    """GET/POST /api/products/<id>/reviews/"""

    def get(self, request, product_id):
        reviews = Review.objects.filter(product_id=product_id, is_approved=True)
        return api_response([serialize_review(r) for r in reviews])

    @require_auth
    def post(self, request, product_id):
        body = parse_body(request, ReviewRequest)
        review = services.create_review(
            user_id=self.auth.user_id,
            product_id=product_id,
            rating=body.rating,
            title=body.title,
            comment=body.comment,
            order_id=body.order_id,
        )
        return api_response(serialize_review(review), status=201)


class AdminProductListView(ApiView):
    """GET/POST /api/admin/products/"""

    @require_admin
    def get(self, request):
        products = Product.objects.select_related("category")
        return api_response([serialize_product(p, include_private=True) for p in products])

    @require_admin
    def post(self, request):
        body = parse_body(request, ProductCreateRequest)
        product = services.create_product(**body.model_dump())
        return api_response(serialize_product(product, include_private=True), status=201)


class AdminProductDetailView(ApiView):
    """PUT/DELETE /api/admin/products/<id>/"""

    @require_admin
    def put(self, request, product_id):
        body = parse_body(request, ProductUpdateRequest)
        product = services.update_product(product_id, **changed_fields(body, NULLABLE_PRODUCT_FIELDS))
        return api_response(serialize_product(product, include_private=True))

    @require_admin
    def delete(self, request, product_id):
        services.delete_product(product_id)
        return message_response("Product deleted")


class AdminStockAdjustView(ApiView):
    """POST /api/admin/products/<id>/adjust-stock/"""

    @require_admin
    def post(self, request, product_id):
        body = parse_body(request, StockAdjustmentRequest)
        product = services.adjust_stock(product_id, body.adjustment)
        return api_response(serialize_product(product, include_private=True))


class AdminCategoryListView(ApiView):
    """POST /api/admin/categories/"""

    @require_admin
    def post(self, request):
        body = parse_body(request, CategoryRequest)
        category = services.create_category(**body.model_dump())
        return api_response(serialize_category(category), status=201)


class AdminCategoryDetailView(ApiView):
    """PUT/DELETE /api/admin/categories/<id>/"""

    @require_admin
    def put(self, request, category_id):
        body = parse_body(request, CategoryUpdateRequest)
        category = services.update_category(category_id, **changed_fields(body))
        return api_response(serialize_category(category))

    @require_admin
    def delete(self, request, category_id):
        services.delete_category(category_id)
        return message_response("Category deleted")


class AdminReviewListView(ApiView):
    """GET /api/admin/reviews/"""

    @require_admin
    def get(self, request):
        return api_response([serialize_review(r) for r in Review.objects.all()])


class AdminReviewDetailView(ApiView):
    """PUT/DELETE /api/admin/reviews/<id>/"""

    @require_admin
    def put(self, request, review_id):
        body = parse_body(request, ReviewUpdateRequest)
        review = services.update_review(review_id, **changed_fields(body))
        return api_response(serialize_review(review))

    @require_admin
    def delete(self, request, review_id):
        services.delete_review(review_id)
        return message_response("Review deleted")
