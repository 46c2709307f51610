"""Request bodies for notification endpoints."""

from pydantic import Field

from ultimata.core.api import RequestSchema

from .models import Notification


class NotificationRequest(RequestSchema):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    type: Notification.Type = Notification.Type.ANNOUNCEMENT
    order_id: int | None = None
    product_id: int | None = None
