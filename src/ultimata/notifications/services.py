"""Notification service layer."""

import logging

from django.db import transaction
from django.db.models import Exists, OuterRef, Q

from ultimata.catalog.models import Product
from ultimata.core.exceptions import NotFound, ValidationError
from ultimata.orders.models import Order

from .delivery import NotificationDelivery
from .models import Notification, NotificationRead

logger = logging.getLogger(__name__)


def create_notification(
    *,
    title: str,
    message: str,
    type: str = Notification.Type.ANNOUNCEMENT,
    user_id=None,
    order_id=None,
    product_id=None,
) -> Notification:
    """Store a notification and deliver it after commit.

    Without ``user_id`` the notification is global.

    Raises:
        ValidationError: ``order_id`` or ``product_id`` does not exist
    """
    if order_id is not None and not Order.objects.filter(pk=order_id).exists():
        raise ValidationError(f"Order {order_id} does not exist")
    if product_id is not None and not Product.objects.filter(pk=product_id).exists():
        raise ValidationError(f"Product {product_id} does not exist")

    notification = Notification.objects.create(
        user_id=user_id,
        is_global=user_id is None,
        type=type,
        title=title,
        message=message,
        order_id=order_id,
        product_id=product_id,
    )
    NotificationDelivery.deliver_on_commit(notification)
    return notification


def broadcast(title: str, message: str, type: str = Notification.Type.ANNOUNCEMENT) -> Notification:
    notification = create_notification(title=title, message=message, type=type)
    logger.info("Broadcast notification", extra={"notification_id": notification.pk})
    return notification


def _visible_to(user_id):
    return Notification.objects.filter(Q(user_id=user_id) | Q(is_global=True))


def list_for_user(user_id):
    """Personal and global notifications, annotated with ``read_by_user``."""
    return _visible_to(user_id).annotate(
        read_by_user=Exists(NotificationRead.objects.filter(notification=OuterRef("pk"), user_id=user_id)),
    )


def is_read_for(notification: Notification) -> bool:
    """Read state of an annotated notification for the user it was listed for."""
    if notification.is_global:
        return notification.read_by_user
    return notification.is_read


def unread_count(user_id) -> int:
    personal = Notification.objects.filter(user_id=user_id, is_global=False, is_read=False).count()
    global_unread = (
        Notification.objects.filter(is_global=True)
        .exclude(reads__user_id=user_id)
        .count()
    )
    return personal + global_unread


def mark_read(user_id, notification_id) -> Notification:
    """Mark one notification read for ``user_id``.

    Raises:
        NotFound: No such notification visible to the user
    """
    notification = _visible_to(user_id).filter(pk=notification_id).first()
    if notification is None:
        raise NotFound("Notification not found")

    if notification.is_global:
        NotificationRead.objects.get_or_create(user_id=user_id, notification=notification)
    elif not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=["is_read"])
    return notification


@transaction.atomic
def mark_all_read(user_id) -> int:
    """Mark everything visible to the user read; returns how many changed."""
    personal = Notification.objects.filter(user_id=user_id, is_global=False, is_read=False).update(is_read=True)

    unread_global = Notification.objects.filter(is_global=True).exclude(reads__user_id=user_id)
    reads = [NotificationRead(user_id=user_id, notification=n) for n in unread_global]
    NotificationRead.objects.bulk_create(reads, ignore_conflicts=True)
    return personal + len(reads)


def delete_notification(notification_id):
    deleted, _ = Notification.objects.filter(pk=notification_id).delete()
    if not deleted:
        raise NotFound("Notification not found")
