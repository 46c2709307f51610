"""Core views: health check, accounts, admin users and settings."""

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout, update_session_auth_hash
from django.db import connection
from django.http import JsonResponse

from .api import ApiView, api_response, message_response, parse_body, require_admin, require_auth
from .exceptions import AuthenticationRequired
from .models import SiteSetting
from .schemas import (
    LoginRequest,
    PasswordChangeRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    RoleUpdateRequest,
    SettingUpdateRequest,
)
from . import services

logger = logging.getLogger(__name__)

User = get_user_model()


def health_check(request):
    """Health check endpoint for container orchestration."""
    try:
        # Check database connection
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")

        return JsonResponse({"status": "healthy", "database": "connected"})
    except Exception as e:
        logger.exception("Health check failed")
        return JsonResponse(
            {"status": "unhealthy", "error": str(e)},
            status=503,
        )


def serialize_user(user) -> dict:
    return {
        "id": str(user.pk),
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "name": user.get_display_name(),
        "profileImageUrl": user.profile_image_url,
        "role": user.role,
        "createdAt": user.date_joined,
    }


def serialize_setting(setting: SiteSetting) -> dict:
    return {
        "key": setting.key,
        "value": setting.value,
        "updatedAt": setting.updated_at,
    }


class RegisterView(ApiView):
    """POST /api/auth/register/"""

    def post(self, request):
        body = parse_body(request, RegisterRequest)
        user = services.register_user(body.email, body.password, body.name)
        login(request, user, backend="ultimata.core.backends.EmailBackend")
        return api_response(serialize_user(user))


class LoginView(ApiView):
    """POST /api/auth/login/

    Starts a session and also returns an API token for Bearer auth.
    """

    def post(self, request):
        body = parse_body(request, LoginRequest)
        user = authenticate(request, username=body.email, password=body.password)
        if not user:
            raise AuthenticationRequired("Invalid credentials")

        login(request, user)

        from rest_framework.authtoken.models import Token
        token, _ = Token.objects.get_or_create(user=user)

        return api_response({"token": token.key, "user": serialize_user(user)})


class LogoutView(ApiView):
    """POST /api/auth/logout/"""

    def post(self, request):
        logout(request)
        return message_response("Logged out")


class CurrentUserView(ApiView):
    """GET /api/auth/user/"""

    @require_auth
    def get(self, request):
        user = services.get_user(self.auth.user_id)
        return api_response(serialize_user(user))


class ProfileView(ApiView):
    """PUT /api/auth/user/profile/"""

    @require_auth
    def put(self, request):
        body = parse_body(request, ProfileUpdateRequest)
        user = services.update_profile(self.auth.user_id, body.name)
        return api_response(serialize_user(user))


class PasswordView(ApiView):
    """PUT /api/auth/user/password/

    The current session survives the change; other sessions are logged out.
    """

    @require_auth
    def put(self, request):
        body = parse_body(request, PasswordChangeRequest)
        user = services.change_password(self.auth.user_id, body.current_password, body.new_password)
        if request.user.is_authenticated and request.user.pk == user.pk:
            update_session_auth_hash(request, user)
        return message_response("Password updated successfully")


class AdminUserListView(ApiView):
    """GET /api/admin/users/"""

    @require_admin
    def get(self, request):
        users = User.objects.order_by("-date_joined")
        return api_response([serialize_user(u) for u in users])


class AdminUserRoleView(ApiView):
    """PUT /api/admin/users/<user_id>/role/"""

    @require_admin
    def put(self, request, user_id):
        body = parse_body(request, RoleUpdateRequest)
        user = services.set_user_role(user_id, body.role)
        return api_response(serialize_user(user))


class AdminSettingListView(ApiView):
    """GET /api/admin/settings/"""

    @require_admin
    def get(self, request):
        return api_response([serialize_setting(s) for s in SiteSetting.objects.all()])


class AdminSettingView(ApiView):
    """PUT /api/admin/settings/<key>/"""

    @require_admin
    def put(self, request, key):
        body = parse_body(request, SettingUpdateRequest)
        setting = services.set_setting(key, body.value)
        return api_response(serialize_setting(setting))
