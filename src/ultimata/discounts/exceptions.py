"""Discount code errors."""

from ultimata.core.exceptions import Conflict, NotFound, ValidationError


class DiscountNotFound(NotFound):
    error_type = "discount_not_found"
    default_message = "Invalid discount code"


class DiscountExhausted(Conflict):
    error_type = "discount_exhausted"
    default_message = "Discount code exhausted"


class DiscountExpired(Conflict):
    error_type = "discount_expired"
    default_message = "Discount code expired"


class DiscountNotApplicable(ValidationError):
    error_type = "discount_not_applicable"
    default_message = "Discount code does not apply to these products"
