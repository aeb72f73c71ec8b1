"""Tests for the admin notification inbox and its realtime subscription."""

import pytest

from backoffice.notifications.inbox import NotificationInbox


@pytest.fixture()
def inbox(backend):
    inbox = NotificationInbox(backend)
    yield inbox
    inbox.close()


class TestLifecycle:
    def test_open_fetches_and_subscribes(self, inbox, backend):
        backend.publish_notification("New order #ORD-0001")
        inbox.open()
        assert len(inbox.notifications) == 1
        assert inbox.is_listening is True
        assert len(backend.subscriptions) == 1

    def test_open_twice_keeps_one_subscription(self, inbox, backend):
        inbox.open()
        inbox.open()
        assert len(backend.subscriptions) == 1

    def test_close_releases_subscription(self, inbox, backend):
        inbox.open()
        inbox.close()
        assert inbox.is_listening is False
        assert backend.subscriptions == []

    def test_context_manager(self, backend):
        with NotificationInbox(backend) as inbox:
            assert inbox.is_listening
        assert backend.subscriptions == []

    def test_failed_fetch_leaves_list_untouched(self, inbox, backend):
        backend.publish_notification("first")
        inbox.refresh()
        backend.configure(should_succeed=False)
        inbox.refresh()
        assert len(inbox.notifications) == 1


class TestRealtime:
    def test_inserts_are_prepended(self, inbox, backend):
        backend.publish_notification("older")
        inbox.open()
        backend.publish_notification("newer")
        assert [n.message for n in inbox.notifications] == ["newer", "older"]
        assert inbox.unread_count == 2

    def test_nothing_arrives_after_close(self, inbox, backend):
        inbox.open()
        inbox.close()
        backend.publish_notification("late")
        assert inbox.notifications == []

    def test_subscribers_are_notified(self, inbox, backend):
        seen = []
        inbox.subscribe(lambda box: seen.append(box.unread_count))
        inbox.open()
        backend.publish_notification("hello")
        assert seen[-1] == 1


class TestMutations:
    def test_mark_read(self, inbox, backend):
        note = backend.publish_notification("one")
        backend.publish_notification("two")
        inbox.open()
        assert inbox.mark_read(note.id) is True
        assert inbox.unread_count == 1

    def test_mark_all_read(self, inbox, backend):
        backend.publish_notification("one")
        backend.publish_notification("two")
        inbox.open()
        assert inbox.mark_all_read() is True
        assert inbox.unread_count == 0

    def test_delete(self, inbox, backend):
        note = backend.publish_notification("one")
        inbox.open()
        assert inbox.delete(note.id) is True
        assert inbox.notifications == []

    def test_backend_failure_returns_false(self, inbox, backend):
        note = backend.publish_notification("one")
        inbox.open()
        backend.configure(should_succeed=False)
        assert inbox.mark_read(note.id) is False
        assert inbox.delete(note.id) is False
        assert inbox.unread_count == 1
        assert len(inbox.notifications) == 1
