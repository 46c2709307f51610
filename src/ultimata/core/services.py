"""Core service layer: accounts and site settings."""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction

from .exceptions import Conflict, NotFound, ValidationError
from .models import SiteSetting

logger = logging.getLogger(__name__)

User = get_user_model()

MIN_PASSWORD_LENGTH = 6

TAX_RATE_SETTING = "tax_rate"


def register_user(email: str, password: str, name: str = "") -> User:
    """Create a customer account.

    Raises:
        ValidationError: Password too short
        Conflict: Email already registered
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    email = User.objects.normalize_email(email.strip())
    if User.objects.filter(email__iexact=email).exists():
        raise Conflict("Email already registered")

    first_name, _, last_name = (name or "").strip().partition(" ")
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                first_name=first_name,
                last_name=last_name.strip(),
            )
    except IntegrityError:
        raise Conflict("Email already registered")

    logger.info("User registered", extra={"user_id": str(user.pk)})
    return user


def get_user(user_id) -> User:
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, DjangoValidationError):
        raise NotFound("User not found")


def set_user_role(user_id, role: str) -> User:
    if role not in User.Role.values:
        raise ValidationError(f"Invalid role: {role}")
    user = get_user(user_id)
    user.role = role
    user.save(update_fields=["role", "updated_at"])
    logger.info("User role changed", extra={"user_id": str(user.pk), "role": role})
    return user


def get_setting(key: str, default=None):
    setting = SiteSetting.objects.filter(key=key).first()
    return setting.value if setting else default


def set_setting(key: str, value) -> SiteSetting:
    setting, _ = SiteSetting.objects.update_or_create(key=key, defaults={"value": value})
    return setting


def get_tax_rate() -> Decimal:
    """Tax rate as a fraction (0.1 = 10%); site setting beats the env default."""
    raw = get_setting(TAX_RATE_SETTING, settings.STORE_TAX_RATE)
    try:
        rate = Decimal(str(raw))
    except InvalidOperation:
        logger.warning("Ignoring malformed tax rate setting %r", raw)
        return Decimal("0")
    if rate < 0:
        logger.warning("Ignoring negative tax rate setting %r", raw)
        return Decimal("0")
    return rate


def update_profile(user_id, name: str) -> User:
    """Split ``name`` into first and last name on the first space."""
    user = get_user(user_id)
    first_name, _, last_name = name.strip().partition(" ")
    user.first_name = first_name
    user.last_name = last_name.strip()
    user.save(update_fields=["first_name", "last_name", "updated_at"])
    return user


def change_password(user_id, current_password: str, new_password: str) -> User:
    """Replace a user's password after checking the current one.

    Raises:
        ValidationError: Wrong current password or new password too short
    """
    user = get_user(user_id)
    if not user.check_password(current_password):
        raise ValidationError("Current password is incorrect")
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    user.set_password(new_password)
    user.save(update_fields=["password", "updated_at"])
    logger.info("Password changed", extra={"user_id": str(user.pk)})
    return user
