"""Notification URL patterns."""

from django.urls import path

from . import views

urlpatterns = [
    path("notifications/", views.NotificationListView.as_view(), name="notifications"),
    path("notifications/unread-count/", views.UnreadCountView.as_view(), name="notifications-unread-count"),
    path("notifications/read-all/", views.MarkAllReadView.as_view(), name="notifications-read-all"),
    path("notifications/<int:notification_id>/read/", views.MarkReadView.as_view(), name="notification-read"),
]

admin_urlpatterns = [
    path("notifications/", views.AdminNotificationListView.as_view(), name="admin-notifications"),
    path("notifications/broadcast/", views.AdminBroadcastView.as_view(), name="admin-notifications-broadcast"),
    path(
        "notifications/user/<uuid:user_id>/",
        views.AdminUserNotificationView.as_view(),
        name="admin-notifications-user",
    ),
    path(
        "notifications/<int:notification_id>/",
        views.AdminNotificationDetailView.as_view(),
        name="admin-notification",
    ),
]
