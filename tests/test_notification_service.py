"""
Tests for the notification queue.
"""

from unittest.mock import patch

from thalexa.application.services import NotificationService
from thalexa.domain.entities.notification import Notification, NotificationType


def test_notifications_are_newest_first(notifications):
    first = notifications.notify(NotificationType.INFO, "One", "first")
    second = notifications.notify(NotificationType.INFO, "Two", "second")

    assert notifications.list() == [second, first]
    assert notifications.latest() == second


def test_ids_increase_within_the_same_millisecond(notifications):
    with patch("thalexa.application.services.notification_service.time.time", return_value=1000.0):
        ids = [notifications.add(NotificationType.INFO, "t", "m").id for _ in range(3)]

    assert ids == [1000000, 1000001, 1000002]


def test_ids_continue_after_stored_notifications(store):
    store.state.notifications = [Notification(9999999999999, NotificationType.INFO, "t", "m", 1)]
    service = NotificationService(store)

    assert service.add(NotificationType.INFO, "t", "m").id == 10000000000000


def test_add_does_not_commit_but_notify_does(store, notifications, repository):
    notifications.add(NotificationType.INFO, "Draft", "not saved yet")
    assert repository.load().notifications == []

    notifications.notify(NotificationType.INFO, "Saved", "now saved")
    assert len(repository.load().notifications) == 2


def test_mark_read(notifications):
    notification = notifications.notify(NotificationType.INFO, "t", "m")

    assert notifications.unread_count() == 1
    assert notifications.mark_read(notification.id) is True
    assert notifications.mark_read(notification.id) is False
    assert notifications.mark_read(-1) is False
    assert notifications.unread_count() == 0
    assert notifications.list(unread_only=True) == []


def test_mark_all_read(notifications):
    for _ in range(3):
        notifications.notify(NotificationType.INFO, "t", "m")

    assert notifications.mark_all_read() == 3
    assert notifications.mark_all_read() == 0
    assert all(n.read for n in notifications.list())


def test_unknown_stored_type_reads_as_info():
    notification = Notification.from_dict({"id": 5, "type": "teleported", "title": "x"})

    assert notification.type is NotificationType.INFO
    assert notification.timestamp == 5
