"""Shared pytest fixtures for Ultimata Shop tests."""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.test import Client

from ultimata.core.auth import AuthContext


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a regular customer."""
    return User.objects.create_user(
        email="buyer@example.com",
        password="testpass123",
        first_name="Test",
        last_name="Buyer",
    )


@pytest.fixture
def other_user(db):
    """Create a second customer."""
    return User.objects.create_user(
        email="other@example.com",
        password="testpass123",
        first_name="Other",
        last_name="Buyer",
    )


@pytest.fixture
def admin_user(db):
    """Create a shop admin."""
    return User.objects.create_user(
        email="admin@example.com",
        password="testpass123",
        first_name="Shop",
        last_name="Admin",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def auth(user):
    """AuthContext for the regular customer."""
    return AuthContext.for_user(user)


@pytest.fixture
def admin_auth(admin_user):
    return AuthContext.for_user(admin_user)


@pytest.fixture
def category(db):
    from ultimata.catalog.models import Category

    return Category.objects.create(name="Streaming", slug="streaming")


@pytest.fixture
def product(db, category):
    """An active account product: price 10.00, stock 5."""
    from ultimata.catalog.models import Product

    return Product.objects.create(
        name="Streaming Premium",
        description="One month of premium streaming",
        price=Decimal("10.00"),
        stock=5,
        type=Product.Type.ACCOUNT,
        category=category,
        account_username="premium@example.com",
        account_password="s3cret",
    )


@pytest.fixture
def combo_product(db, category):
    """An active combo product with a stored file."""
    from ultimata.catalog.models import Product

    return Product.objects.create(
        name="Mixed Combo Pack",
        description="Downloadable combo list",
        price=Decimal("2.50"),
        stock=100,
        type=Product.Type.COMBO,
        category=category,
        file_id="file-123",
        file_name="combo.txt",
        file_size=2048,
    )


@pytest.fixture
def client():
    """Return a Django test client."""
    return Client()


@pytest.fixture
def user_client(client, user):
    """Client logged in as the regular customer."""
    client.force_login(user)
    return client


@pytest.fixture
def admin_client(admin_user):
    """Client logged in as the admin."""
    client = Client()
    client.force_login(admin_user)
    return client
