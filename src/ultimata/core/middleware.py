"""Core middleware for Ultimata Shop."""

import logging

from .auth import AuthContext

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "


class AuthContextMiddleware:
    """Resolve the caller into an ``AuthContext``.

    A ``Authorization: Bearer <token>`` header wins over the session user.
    An unknown token leaves the request anonymous so protected views answer
    401 instead of silently falling back to the session.

    Sets request.auth_context for views.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.auth_context = self.resolve(request)
        return self.get_response(request)

    def resolve(self, request) -> AuthContext:
        auth_header = request.headers.get("Authorization", "")
        if auth_header.startswith(BEARER_PREFIX):
            return self._from_token(auth_header[len(BEARER_PREFIX):].strip())

        user = getattr(request, "user", None)
        if user is not None and user.is_authenticated and user.is_active:
            return AuthContext.for_user(user)
        return AuthContext.anonymous()

    def _from_token(self, key: str) -> AuthContext:
        from rest_framework.authtoken.models import Token

        try:
            token = Token.objects.select_related("user").get(key=key)
        except Token.DoesNotExist:
            logger.debug("Rejected unknown API token")
            return AuthContext.anonymous()

        if not token.user.is_active:
            return AuthContext.anonymous()
        return AuthContext.for_user(token.user)
