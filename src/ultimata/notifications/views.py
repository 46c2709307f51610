"""Notification views."""

from ultimata.core.api import (
    ApiView,
    api_response,
    message_response,
    parse_body,
    require_admin,
    require_auth,
)
from ultimata.core.services import get_user

from . import services
from .models import Notification
from .schemas import NotificationRequest


def serialize_notification(notification: Notification, is_read: bool | None = None) -> dict:
    return {
        "id": notification.pk,
        "userId": str(notification.user_id) if notification.user_id else None,
        "type": notification.type,
        "title": notification.title,
        "message": notification.message,
        "isRead": notification.is_read if is_read is None else is_read,
        "isGlobal": notification.is_global,
        "orderId": notification.order_id,
        "productId": notification.product_id,
        "createdAt": notification.created_at,
    }


class NotificationListView(ApiView):
    """GET /api/notifications/"""

    @require_auth
    def get(self, request):
        notifications = services.list_for_user(self.auth.user_id)
        return api_response([
            serialize_notification(n, is_read=services.is_read_for(n)) for n in notifications
        ])


class UnreadCountView(ApiView):
    """GET /api/notifications/unread-count/"""

    @require_auth
    def get(self, request):
        return api_response({"count": services.unread_count(self.auth.user_id)})


class MarkReadView(ApiView):
    """POST /api/notifications/<id>/read/"""

    @require_auth
    def post(self, request, notification_id):
        services.mark_read(self.auth.user_id, notification_id)
        return message_response("Notification marked as read")


class MarkAllReadView(ApiView):
    """POST /api/notifications/read-all/"""

    @require_auth
    def post(self, request):
        updated = services.mark_all_read(self.auth.user_id)
        return api_response({"message": "All notifications marked as read", "updated": updated})


class AdminNotificationListView(ApiView):
    """GET /api/admin/notifications/"""

    @require_admin
    def get(self, request):
        return api_response([serialize_notification(n) for n in Notification.objects.all()])


class AdminBroadcastView(ApiView):
    """POST /api/admin/notifications/broadcast/"""

    @require_admin
    def post(self, request):
        body = parse_body(request, NotificationRequest)
        notification = services.create_notification(
            title=body.title,
            message=body.message,
            type=body.type,
            order_id=body.order_id,
            product_id=body.product_id,
        )
        return api_response(serialize_notification(notification), status=201)


class AdminUserNotificationView(ApiView):
    """POST /api/admin/notifications/user/<user_id>/"""

    @require_admin
    def post(self, request, user_id):
        body = parse_body(request, NotificationRequest)
        user = get_user(user_id)
        notification = services.create_notification(
            user_id=user.pk,
            title=body.title,
            message=body.message,
            type=body.type,
            order_id=body.order_id,
            product_id=body.product_id,
        )
        return api_response(serialize_notification(notification), status=201)


class AdminNotificationDetailView(ApiView):
    """DELETE /api/admin/notifications/<id>/"""

    @require_admin
    def delete(self, request, notification_id):
        services.delete_notification(notification_id)
        return message_response("Notification deleted")
