"""
Notification queue service.

Maintains the notification log held in the application state: newest
first, ids unique and increasing, read flags flipped only on request.
"""

import logging
import time
from typing import List, Optional

from thalexa.domain.entities.notification import Notification, NotificationType
from thalexa.presentation.state.store import AppStore, StateSection

log = logging.getLogger("ThalexaLogger")


class NotificationService:
    """
    Ordered log of user-facing events.

    `add` only mutates the in-memory state so callers can fold it into a
    larger update and commit once. `notify` adds and commits.

    Example:
        service = NotificationService(store)
        service.notify(NotificationType.INFO, "Hello", "Welcome back")
        print(service.unread_count())
    """

    def __init__(self, store: AppStore):
        """
        Initialize service.

        Args:
            store: Application store holding the notification log
        """
        self._store = store
        self._last_id = max((n.id for n in store.state.notifications), default=0)

    def _next_id(self) -> int:
        # Millisecond clock, bumped when two events land in the same tick
        # or the clock moved backwards
        candidate = int(time.time() * 1000)
        current = max(self._last_id, max((n.id for n in self._store.state.notifications), default=0))
        self._last_id = candidate if candidate > current else current + 1
        return self._last_id

    def add(self, type: NotificationType, title: str, message: str) -> Notification:
        """
        Prepend a notification without committing.

        Args:
            type: Event kind
            title: Short title
            message: Body text

        Returns:
            The new notification
        """
        notification_id = self._next_id()
        notification = Notification(
            id=notification_id,
            type=type,
            title=title,
            message=message,
            timestamp=int(time.time() * 1000),
        )
        self._store.state.notifications.insert(0, notification)
        log.debug(f"Notification added: {type.value} - {title}")
        return notification

    def notify(self, type: NotificationType, title: str, message: str) -> Notification:
        """Prepend a notification and commit."""
        notification = self.add(type, title, message)
        self._store.commit(StateSection.NOTIFICATIONS)
        return notification

    def mark_read(self, notification_id: int) -> bool:
        """
        Acknowledge one notification.

        Args:
            notification_id: Notification id

        Returns:
            True if it existed and was unread
        """
        notifications = self._store.state.notifications
        for index, notification in enumerate(notifications):
            if notification.id == notification_id:
                if notification.read:
                    return False
                notifications[index] = notification.mark_read()
                self._store.commit(StateSection.NOTIFICATIONS)
                return True
        return False

    def mark_all_read(self) -> int:
        """
        Acknowledge every unread notification.

        Returns:
            Number of notifications flipped
        """
        notifications = self._store.state.notifications
        count = 0
        for index, notification in enumerate(notifications):
            if not notification.read:
                notifications[index] = notification.mark_read()
                count += 1
        if count:
            self._store.commit(StateSection.NOTIFICATIONS)
        return count

    def unread_count(self) -> int:
        return sum(1 for n in self._store.state.notifications if not n.read)

    def list(self, unread_only: bool = False) -> List[Notification]:
        """Notifications newest first (copy)."""
        return [n for n in self._store.state.notifications if not (unread_only and n.read)]

    def latest(self) -> Optional[Notification]:
        notifications = self._store.state.notifications
        return notifications[0] if notifications else None
