"""WebSocket consumer for real-time notifications."""

import json
import logging

from asgiref.sync import async_to_sync
from channels.generic.websocket import WebsocketConsumer

from .delivery import GLOBAL_GROUP, user_group

logger = logging.getLogger(__name__)


class NotificationConsumer(WebsocketConsumer):
    """Streams notifications to an authenticated user.

    Connection: /ws/notifications/

    The socket joins the user's personal group and the global group.
    Anonymous connections are closed.
    """

    def connect(self):
        """Handle WebSocket connection."""
        self.groups_joined = []

        user = self.scope.get("user")
        if not user or not user.is_authenticated:
            logger.warning("Unauthenticated notification socket rejected")
            self.close()
            return

        try:
            for group in (user_group(user.pk), GLOBAL_GROUP):
                async_to_sync(self.channel_layer.group_add)(group, self.channel_name)
                self.groups_joined.append(group)
        except Exception as e:
            logger.exception(f"Failed to join notification groups: {e}")
            self.close()
            return

        self.accept()
        logger.info(f"Notification socket connected: {user.pk}")

        self.send(text_data=json.dumps({
            "type": "connection_established",
            "groups": self.groups_joined,
        }))

    def disconnect(self, close_code):
        """Handle WebSocket disconnection."""
        for group in self.groups_joined:
            async_to_sync(self.channel_layer.group_discard)(group, self.channel_name)

    def receive(self, text_data):
        """Answer pings; everything else is ignored."""
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            logger.warning("Invalid JSON in notification socket message")
            return

        if isinstance(data, dict) and data.get("type") == "ping":
            self.send(text_data=json.dumps({"type": "pong"}))

    def notification_message(self, event):
        """Send a notification to the WebSocket."""
        self.send(text_data=json.dumps({
            "type": "notification",
            "notification": event["notification"],
        }))
