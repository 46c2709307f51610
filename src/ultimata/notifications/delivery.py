"""WebSocket delivery for notifications.

Notifications are pushed to channel-layer groups after the creating
transaction commits, so a rolled-back checkout never reaches a client:

- personal: ``notifications_user_<user_id>``
- global: ``notifications_global``

Delivery problems are logged and never propagate to the caller.
"""

import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.db import transaction

from .models import Notification

logger = logging.getLogger(__name__)

GLOBAL_GROUP = "notifications_global"


def user_group(user_id) -> str:
    return f"notifications_user_{user_id}"


def group_for(notification: Notification) -> str:
    if notification.is_global:
        return GLOBAL_GROUP
    return user_group(notification.user_id)


def build_payload(notification: Notification) -> dict:
    """Channel-layer event for ``NotificationConsumer.notification_message``."""
    return {
        "type": "notification.message",
        "notification": {
            "id": notification.pk,
            "type": notification.type,
            "title": notification.title,
            "message": notification.message,
            "isGlobal": notification.is_global,
            "orderId": notification.order_id,
            "productId": notification.product_id,
            "createdAt": notification.created_at.isoformat() if notification.created_at else None,
        },
    }


class NotificationDelivery:
    """Push stored notifications to connected WebSocket clients."""

    @staticmethod
    def deliver(group: str, payload: dict):
        try:
            channel_layer = get_channel_layer()
            if not channel_layer:
                logger.debug("No channel layer configured, skipping notification delivery")
                return

            async_to_sync(channel_layer.group_send)(group, payload)
            logger.debug(
                "Delivered notification",
                extra={"group": group, "notification_id": payload["notification"]["id"]},
            )
        except Exception as e:
            # Delivery must never fail the operation that created the notification
            logger.exception(f"Failed to deliver notification: {e}")

    @staticmethod
    def deliver_on_commit(notification: Notification):
        """Deliver ``notification`` once the current transaction commits.

        The group and payload are captured now; the row may not be
        reachable from the callback in every case.
        """
        group = group_for(notification)
        payload = build_payload(notification)
        transaction.on_commit(lambda: NotificationDelivery.deliver(group, payload))
