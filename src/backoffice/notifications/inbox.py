"""Admin notification inbox.

Keeps the admin's notification list in sync with the backend: an initial
fetch, then realtime inserts pushed through a subscription and prepended to
the list. Backend failures are logged and leave the local list untouched.
"""

from dataclasses import replace

import structlog

from shared.backend.port import BackendError, StoreBackend, Subscription
from shared.backend.records import AdminNotification
from shared.observable import Observable

logger = structlog.get_logger(__name__)


class NotificationInbox(Observable):
    def __init__(self, backend: StoreBackend) -> None:
        super().__init__()
        self._backend = backend
        self._subscription: Subscription | None = None
        self.notifications: list[AdminNotification] = []

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def open(self) -> "NotificationInbox":
        """Fetch the current list and start listening for new notifications."""
        self.refresh()
        if self._subscription is None or not self._subscription.active:
            try:
                self._subscription = self._backend.subscribe_notifications(self._on_insert)
            except BackendError as exc:
                logger.error("Failed to subscribe to notifications", error=str(exc))
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    @property
    def is_listening(self) -> bool:
        return self._subscription is not None and self._subscription.active

    def __enter__(self) -> "NotificationInbox":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    def refresh(self) -> None:
        try:
            notifications = self._backend.fetch_notifications()
        except BackendError as exc:
            logger.error("Failed to fetch notifications", error=str(exc))
            return
        with self._lock:
            self.notifications = list(notifications)
        self._notify(self)

    @property
    def unread_count(self) -> int:
        return sum(1 for n in self.notifications if not n.is_read)

    def _on_insert(self, notification: AdminNotification) -> None:
        with self._lock:
            if any(n.id == notification.id for n in self.notifications):
                return
            self.notifications = [notification, *self.notifications]
        logger.info("Admin notification received", notification_id=notification.id, type=notification.type)
        self._notify(self)

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def mark_read(self, notification_id: str) -> bool:
        try:
            self._backend.mark_notification_read(notification_id)
        except BackendError as exc:
            logger.error("Failed to mark notification as read", notification_id=notification_id, error=str(exc))
            return False
        with self._lock:
            self.notifications = [
                replace(n, is_read=True) if n.id == notification_id else n for n in self.notifications
            ]
        self._notify(self)
        return True

    def mark_all_read(self) -> bool:
        try:
            self._backend.mark_all_notifications_read()
        except BackendError as exc:
            logger.error("Failed to mark all notifications as read", error=str(exc))
            return False
        with self._lock:
            self.notifications = [replace(n, is_read=True) for n in self.notifications]
        self._notify(self)
        return True

    def delete(self, notification_id: str) -> bool:
        try:
            self._backend.delete_notification(notification_id)
        except BackendError as exc:
            logger.error("Failed to delete notification", notification_id=notification_id, error=str(exc))
            return False
        with self._lock:
            self.notifications = [n for n in self.notifications if n.id != notification_id]
        self._notify(self)
        return True
