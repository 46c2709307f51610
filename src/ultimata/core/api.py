"""JSON API plumbing shared by every app.

- ``ApiView``: class-based view that maps ``StoreError`` and pydantic
  failures to JSON error bodies and logs anything unexpected as a 500.
- ``RequestSchema``: base for request DTOs (camelCase on the wire,
  unknown keys rejected).
- ``parse_body``: decode a JSON request body into a DTO.
- ``require_auth`` / ``require_admin``: view method guards.
"""

import json
import logging
from functools import wraps

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from .exceptions import StoreError, ValidationError

logger = logging.getLogger(__name__)


class RequestSchema(BaseModel):
    """Base class for request bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


def parse_body(request, schema: type[RequestSchema]) -> RequestSchema:
    """Decode ``request.body`` as JSON and validate it against ``schema``."""
    raw = request.body or b"{}"
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON")
    return schema.model_validate(data)


def _field_errors(exc: PydanticValidationError) -> list[dict]:
    return [
        {
            "field": ".".join(str(part) for part in err["loc"]),
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def api_response(data, status: int = 200) -> JsonResponse:
    return JsonResponse(data, status=status, safe=False)


def message_response(message: str, status: int = 200) -> JsonResponse:
    return JsonResponse({"message": message}, status=status)


@method_decorator(csrf_exempt, name="dispatch")
class ApiView(View):
    """Base view for JSON endpoints."""

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except StoreError as e:
            if e.status_code >= 500:
                logger.error("%s failed: %s", type(self).__name__, e.message)
            return JsonResponse(e.as_dict(), status=e.status_code)
        except PydanticValidationError as e:
            return JsonResponse(
                {
                    "message": "Invalid request body",
                    "error": ValidationError.error_type,
                    "errors": _field_errors(e),
                },
                status=400,
            )
        except Exception:
            logger.exception("Unhandled error in %s %s", request.method, request.path)
            return JsonResponse(
                {"message": "Internal server error", "error": "internal"},
                status=500,
            )

    @property
    def auth(self):
        return self.request.auth_context


def require_auth(view_method):
    """Guard a view method: caller must be authenticated."""
    @wraps(view_method)
    def wrapper(self, request, *args, **kwargs):
        request.auth_context.ensure_authenticated()
        return view_method(self, request, *args, **kwargs)
    return wrapper


def require_admin(view_method):
    """Guard a view method: caller must be an admin."""
    @wraps(view_method)
    def wrapper(self, request, *args, **kwargs):
        request.auth_context.ensure_admin()
        return view_method(self, request, *args, **kwargs)
    return wrapper


def changed_fields(body: RequestSchema, nullable: tuple = ()) -> dict:
    """Fields the client actually sent, as model attribute names.

    An explicit ``null`` only survives for attributes listed in ``nullable``.
    """
    return {
        name: value
        for name, value in body.model_dump(exclude_unset=True).items()
        if value is not None or name in nullable
    }
