"""Tests for AuthContext, the auth middleware, and account endpoints."""

import pytest
from django.contrib.auth import get_user_model
from django.test import Client
from rest_framework.authtoken.models import Token

from ultimata.core.auth import AuthContext
from ultimata.core.exceptions import AuthenticationRequired, Forbidden

User = get_user_model()


class TestAuthContext:
    def test_anonymous_is_not_authenticated(self):
        ctx = AuthContext.anonymous()
        assert not ctx.is_authenticated
        assert not ctx.is_admin
        assert ctx.current_user_id() is None
        assert ctx.current_user_role() is None

    def test_anonymous_ensure_authenticated_raises(self):
        with pytest.raises(AuthenticationRequired):
            AuthContext.anonymous().ensure_authenticated()

    def test_regular_user_is_not_admin(self, user):
        ctx = AuthContext.for_user(user)
        assert ctx.is_authenticated
        assert ctx.current_user_id() == str(user.pk)
        assert ctx.current_user_role() == "user"
        with pytest.raises(Forbidden):
            ctx.ensure_admin()

    def test_admin_role_is_admin(self, admin_user):
        assert AuthContext.for_user(admin_user).is_admin

    def test_superuser_is_admin(self, db):
        superuser = User.objects.create_superuser(email="root@example.com", password="rootpass1")
        assert AuthContext.for_user(superuser).is_admin

    def test_can_access_own_resource_only(self, user, other_user, admin_user):
        ctx = AuthContext.for_user(user)
        assert ctx.can_access(user.pk)
        assert not ctx.can_access(other_user.pk)
        assert AuthContext.for_user(admin_user).can_access(other_user.pk)


@pytest.mark.django_db
class TestRegisterAndLogin:
    def test_register_creates_user_and_session(self, client):
        response = client.post(
            "/api/auth/register/",
            {"email": "new@example.com", "password": "secret1", "name": "New Person"},
            content_type="application/json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "new@example.com"
        assert data["firstName"] == "New"
        assert data["role"] == "user"

        me = client.get("/api/auth/user/")
        assert me.status_code == 200
        assert me.json()["email"] == "new@example.com"

    def test_register_duplicate_email_is_rejected(self, client, user):
        response = client.post(
            "/api/auth/register/",
            {"email": "BUYER@example.com", "password": "secret1"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Email already registered"

    def test_register_short_password_is_rejected(self, client):
        response = client.post(
            "/api/auth/register/",
            {"email": "short@example.com", "password": "abc"},
            content_type="application/json",
        )

        assert response.status_code == 400
        assert not User.objects.filter(email="short@example.com").exists()

    def test_login_returns_token(self, client, user):
        response = client.post(
            "/api/auth/login/",
            {"email": "buyer@example.com", "password": "testpass123"},
            content_type="application/json",
        )

        assert response.status_code == 200
        data = response.json()
        assert data["token"] == Token.objects.get(user=user).key
        assert data["user"]["id"] == str(user.pk)

    def test_login_bad_password_is_401(self, client, user):
        response = client.post(
            "/api/auth/login/",
            {"email": "buyer@example.com", "password": "wrong"},
            content_type="application/json",
        )

        assert response.status_code == 401
        assert response.json()["error"] == "not_authenticated"

    def test_logout_ends_session(self, user_client):
        assert user_client.post("/api/auth/logout/").status_code == 200
        assert user_client.get("/api/auth/user/").status_code == 401


@pytest.mark.django_db
class TestAccountUpdates:
    def test_update_profile_name(self, user_client, user):
        response = user_client.put(
            "/api/auth/user/profile/",
            {"name": "Ada King Lovelace"},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Ada King Lovelace"
        user.refresh_from_db()
        assert user.first_name == "Ada"
        assert user.last_name == "King Lovelace"

    def test_update_profile_requires_auth(self, client):
        response = client.put("/api/auth/user/profile/", {"name": "X"}, content_type="application/json")
        assert response.status_code == 401

    def test_change_password_keeps_session(self, user_client, user):
        response = user_client.put(
            "/api/auth/user/password/",
            {"currentPassword": "testpass123", "newPassword": "newpass456"},
            content_type="application/json",
        )

        assert response.status_code == 200
        user.refresh_from_db()
        assert user.check_password("newpass456")
        assert user_client.get("/api/auth/user/").status_code == 200

    def test_change_password_checks_current(self, user_client, user):
        response = user_client.put(
            "/api/auth/user/password/",
            {"currentPassword": "wrong", "newPassword": "newpass456"},
            content_type="application/json",
        )

        assert response.status_code == 400
        user.refresh_from_db()
        assert user.check_password("testpass123")

    def test_change_password_rejects_short_password(self, user_client, user):
        response = user_client.put(
            "/api/auth/user/password/",
            {"currentPassword": "testpass123", "newPassword": "abc"},
            content_type="application/json",
        )

        assert response.status_code == 400
        user.refresh_from_db()
        assert user.check_password("testpass123")

    def test_change_password_requires_both_fields(self, user_client):
        response = user_client.put(
            "/api/auth/user/password/",
            {"newPassword": "newpass456"},
            content_type="application/json",
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestBearerToken:
    def test_bearer_token_authenticates(self, user):
        token = Token.objects.create(user=user)
        client = Client(HTTP_AUTHORIZATION=f"Bearer {token.key}")

        response = client.get("/api/auth/user/")

        assert response.status_code == 200
        assert response.json()["id"] == str(user.pk)

    def test_unknown_token_is_anonymous_even_with_session(self, user_client):
        response = user_client.get("/api/auth/user/", HTTP_AUTHORIZATION="Bearer not-a-token")

        assert response.status_code == 401

    def test_inactive_user_token_is_anonymous(self, user):
        token = Token.objects.create(user=user)
        user.is_active = False
        user.save()

        client = Client(HTTP_AUTHORIZATION=f"Bearer {token.key}")
        assert client.get("/api/auth/user/").status_code == 401
