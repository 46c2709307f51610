"""Explicit authentication context passed into services."""

from dataclasses import dataclass

from .exceptions import AuthenticationRequired, Forbidden


ROLE_USER = "user"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class AuthContext:
    """Who is making the request.

    Built once per request by ``AuthContextMiddleware`` and handed to
    services, so nothing below the view layer reads session state.
    """

    user_id: str | None = None
    role: str = ROLE_USER

    @classmethod
    def anonymous(cls) -> "AuthContext":
        return cls()

    @classmethod
    def for_user(cls, user) -> "AuthContext":
        role = ROLE_ADMIN if (user.is_superuser or getattr(user, "role", None) == ROLE_ADMIN) else ROLE_USER
        return cls(user_id=str(user.pk), role=role)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.role == ROLE_ADMIN

    def current_user_id(self) -> str | None:
        return self.user_id

    def current_user_role(self) -> str | None:
        return self.role if self.is_authenticated else None

    def ensure_authenticated(self):
        if not self.is_authenticated:
            raise AuthenticationRequired()

    def ensure_admin(self):
        self.ensure_authenticated()
        if not self.is_admin:
            raise Forbidden("Admin access required")

    def can_access(self, owner_id) -> bool:
        """True when the caller owns the resource or is an admin."""
        return self.is_admin or (self.is_authenticated and str(owner_id) == self.user_id)
