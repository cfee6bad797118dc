# =============================================================================
# tests/test_notifications.py - Notification Banner Tests
# =============================================================================
# Timing is driven by the FakeClock fixture; nothing here sleeps.
# =============================================================================

import pytest

from lib.notifications import NotificationBanner, NotificationType


class TestNotificationBanner:
    """Tests for a single auto-hiding banner."""

    def test_visible_until_exactly_hide_delay(self, clock):
        banner = NotificationBanner(auto_hide_seconds=5, clock=clock)
        banner.success("Success!", "Section saved successfully!")

        clock.advance(4.999)
        assert banner.current is not None

        clock.advance(0.001)
        assert banner.current is None

    def test_hidden_banner_never_returns(self, clock):
        banner = NotificationBanner(auto_hide_seconds=5, clock=clock)
        banner.info("Heads up", "Draft saved")

        clock.advance(5)
        assert banner.current is None

        # Rewinding the clock must not resurrect it
        clock.now -= 10
        assert banner.current is None

    def test_new_notification_replaces_and_restarts(self, clock):
        banner = NotificationBanner(auto_hide_seconds=5, clock=clock)
        banner.success("Success!", "First")
        clock.advance(3)

        banner.error("Save Failed", "Second")
        clock.advance(3)

        current = banner.current
        assert current is not None
        assert current.type == NotificationType.ERROR
        assert current.message == "Second"

        clock.advance(2)
        assert banner.current is None

    def test_dismiss(self, clock):
        banner = NotificationBanner(clock=clock)
        banner.success("Success!", "Saved")
        banner.dismiss()
        assert banner.current is None

    def test_to_dict(self, clock):
        banner = NotificationBanner(clock=clock)
        notification = banner.error("Upload Failed", "File too large")
        assert notification.to_dict() == {
            "type": "error",
            "title": "Upload Failed",
            "message": "File too large",
        }

    def test_rejects_non_positive_delay(self):
        with pytest.raises(ValueError):
            NotificationBanner(auto_hide_seconds=0)


class TestNotificationCenter:

    def test_banners_are_per_user(self, notification_center):
        notification_center.banner_for("alice").success("Success!", "Saved")

        assert notification_center.current("alice") is not None
        assert notification_center.current("bob") is None

    def test_dismiss_unknown_user_is_noop(self, notification_center):
        notification_center.dismiss("nobody")
        assert notification_center.current("nobody") is None

    def test_shared_clock(self, notification_center, clock):
        notification_center.banner_for("alice").success("Success!", "Saved")
        clock.advance(5)
        assert notification_center.current("alice") is None
