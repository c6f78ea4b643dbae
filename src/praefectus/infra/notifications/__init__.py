"""Praefectus Infra Notifications -- HTTP invitation delivery."""

from praefectus.infra.notifications.http_gateway import HttpNotificationGateway
from praefectus.infra.notifications.settings import (
    NotificationSettings,
    get_notification_settings,
)

__all__ = [
    "HttpNotificationGateway",
    "NotificationSettings",
    "get_notification_settings",
]
