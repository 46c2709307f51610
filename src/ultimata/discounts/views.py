"""Discount code views."""

from ultimata.core.api import (
    ApiView,
    api_response,
    changed_fields,
    message_response,
    parse_body,
    require_admin,
)

from . import services
from .models import DiscountCode
from .schemas import DiscountCodeRequest, DiscountCodeUpdateRequest, ValidateDiscountRequest


def serialize_discount(discount: DiscountCode) -> dict:
    return {
        "id": discount.pk,
        "code": discount.code,
        "discountPercentage": discount.discount_percentage,
        "totalUses": discount.total_uses,
        "usedCount": discount.used_count,
        "expiresAt": discount.expires_at,
        "active": discount.active,
        "productIds": discount.product_ids,
        "createdBy": str(discount.created_by_id) if discount.created_by_id else None,
        "createdAt": discount.created_at,
        "updatedAt": discount.updated_at,
    }


class ValidateDiscountView(ApiView):
    """POST /api/validate-discount/

    Public. Reports the percentage without consuming a use.
    """

    def post(self, request):
        body = parse_body(request, ValidateDiscountRequest)
        discount = services.validate_discount(body.code)
        return api_response({
            "discountPercentage": float(discount.discount_percentage),
            "code": discount.code,
            "productIds": discount.product_ids,
        })


class AdminDiscountListView(ApiView):
    """GET/POST /api/admin/discount-codes/"""

    @require_admin
    def get(self, request):
        return api_response([serialize_discount(d) for d in DiscountCode.objects.all()])

    @require_admin
    def post(self, request):
        body = parse_body(request, DiscountCodeRequest)
        discount = services.create_discount(created_by_id=self.auth.user_id, **body.model_dump())
        return api_response(serialize_discount(discount), status=201)


class AdminDiscountDetailView(ApiView):
    """PUT/DELETE /api/admin/discount-codes/<id>/"""

    @require_admin
    def put(self, request, discount_id):
        body = parse_body(request, DiscountCodeUpdateRequest)
        discount = services.update_discount(discount_id, **changed_fields(body, nullable=("expires_at",)))
        return api_response(serialize_discount(discount))

    @require_admin
    def delete(self, request, discount_id):
        services.delete_discount(discount_id)
        return message_response("Discount code deleted")
