"""Tests for the notification center."""

from encore.notifications import NotificationCenter, NotificationType


class TestNotificationCenter:
    """Tests for showing, hiding and expiring notifications."""

    def test_show_and_active(self):
        """Test messages are listed oldest first with their type."""
        center = NotificationCenter(ttl_seconds=60)
        center.success("u1", "Friend request sent!")
        center.error("u1", "Failed to remove friend")
        active = center.active("u1")
        assert [n.message for n in active] == ["Friend request sent!", "Failed to remove friend"]
        assert [n.type for n in active] == [NotificationType.SUCCESS, NotificationType.ERROR]
        assert center.active("u2") == []

    def test_hide(self):
        """Test a dismissed message is gone."""
        center = NotificationCenter(ttl_seconds=60)
        first = center.success("u1", "one")
        center.success("u1", "two")
        center.hide("u1", first.id)
        assert [n.message for n in center.active("u1")] == ["two"]

    def test_expired_dropped_without_polling(self):
        """Test expired messages are not kept for users who never poll."""
        center = NotificationCenter(ttl_seconds=0)
        for _ in range(1000):
            center.success("u1", "x")
        assert len(center._by_user["u1"]) == 1
        assert center.active("u1") == []
