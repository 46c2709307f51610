"""Typed errors raised by the service layer.

Views never build error responses by hand: they let these propagate and
``ApiView.dispatch`` turns them into ``{"message", "error"}`` JSON bodies.
"""


class StoreError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code = 500
    error_type = "internal"
    default_message = "Internal server error"

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def as_dict(self) -> dict:
        payload = {"message": self.message, "error": self.error_type}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(StoreError):
    status_code = 400
    error_type = "validation_error"
    default_message = "Invalid request"


class AuthenticationRequired(StoreError):
    status_code = 401
    error_type = "not_authenticated"
    default_message = "Not authenticated"


class Forbidden(StoreError):
    status_code = 403
    error_type = "forbidden"
    default_message = "Forbidden"


class NotFound(StoreError):
    status_code = 404
    error_type = "not_found"
    default_message = "Not found"


class Conflict(StoreError):
    """Request is well-formed but the resource state rejects it."""

    status_code = 400
    error_type = "conflict"
    default_message = "Conflict"


class InsufficientStock(StoreError):
    status_code = 409
    error_type = "insufficient_stock"
    default_message = "Insufficient stock"


class OrderNumberCollision(StoreError):
    status_code = 409
    error_type = "order_number_collision"
    default_message = "Could not allocate a unique order number"


class UpstreamUnavailable(StoreError):
    status_code = 502
    error_type = "upstream_unavailable"
    default_message = "Upstream service unavailable"
