"""Integration tests for the sensor service lifecycle and wiring."""

import pytest

from eruption_sensor.application.pipe_channel import ChannelState
from eruption_sensor.config.settings import AccessibilitySettings, SensorSettings
from tests.helpers import SensorTestContext, focus_line


class TestLifecycle:
    """enable() / disable() / reload()."""

    def setup_method(self):
        """Set up test context before each test."""
        self.context = SensorTestContext()

    def test_enable_subscribes_and_opens(self):
        self.context.service.enable()

        assert self.context.service.enabled
        assert len(self.context.focus_tracker.subscribers) == 1
        assert self.context.accessibility_listener.registered
        assert self.context.accessibility_listener.event_types == [
            "object:state-changed:focused"
        ]
        assert self.context.pipe_opener.open_count == 1
        assert self.context.service.channel.state is ChannelState.OPENING

    def test_enable_is_idempotent(self):
        self.context.service.enable()
        self.context.service.enable()

        assert len(self.context.focus_tracker.subscribers) == 1
        assert self.context.accessibility_listener.register_call_count == 1
        assert self.context.pipe_opener.open_count == 1

    def test_disable_tears_everything_down(self):
        self.context.given_enabled_with_open_pipe()

        self.context.service.disable()

        assert not self.context.service.enabled
        assert self.context.focus_tracker.subscribers == {}
        assert not self.context.accessibility_listener.registered
        assert self.context.stream.closed
        assert self.context.service.channel is None

    def test_disable_is_idempotent(self):
        self.context.service.enable()
        self.context.service.disable()
        self.context.service.disable()

        assert self.context.focus_tracker.disconnect_call_count == 1
        assert self.context.accessibility_listener.deregister_call_count == 1

    def test_disable_without_enable_does_nothing(self):
        self.context.service.disable()

        assert self.context.focus_tracker.disconnect_call_count == 0

    def test_repeated_cycles_leave_single_subscription(self):
        for _ in range(3):
            self.context.service.enable()
            self.context.service.disable()
        self.context.service.enable()

        assert len(self.context.focus_tracker.subscribers) == 1
        assert self.context.accessibility_listener.registered

    def test_reload_reopens_pipe(self):
        self.context.given_enabled_with_open_pipe()

        self.context.service.reload()

        assert self.context.service.enabled
        assert self.context.stream.closed
        assert self.context.pipe_opener.open_count == 2
        assert len(self.context.focus_tracker.subscribers) == 1

    def test_pending_open_after_disable_is_harmless(self):
        """
        GIVEN: A service disabled while the pipe open is in flight
        WHEN: The open completes afterwards
        THEN: Nothing raises and nothing is written
        """
        # GIVEN
        self.context.service.enable()
        request = self.context.pipe_opener.last_request
        self.context.service.disable()

        # WHEN
        stream = request.succeed()

        # THEN
        assert stream.written == []
        assert stream.closed

    def test_disabled_accessibility_is_not_registered(self):
        context = SensorTestContext(accessibility_enabled=False)

        context.service.enable()

        assert not context.accessibility_listener.registered
        assert len(context.focus_tracker.subscribers) == 1
        assert context.service.status()["accessibility"] is False

    def test_accessibility_registration_failure_keeps_coarse_path(self):
        self.context.accessibility_listener.should_fail_register = True
        stream = self.context.given_enabled_with_open_pipe()

        self.context.when_focus_app_changes_to("Firefox", "firefox")

        assert self.context.service.enabled
        assert stream.lines == [focus_line("Firefox", "firefox")]

    def test_coarse_subscription_failure_does_not_raise(self):
        self.context.focus_tracker.should_fail_connect = True

        self.context.service.enable()

        assert self.context.service.enabled
        assert self.context.accessibility_listener.registered

    def test_configure_applies_on_next_enable(self, tmp_path):
        self.context.service.enable()
        settings = SensorSettings(accessibility=AccessibilitySettings(enabled=False))

        self.context.service.configure(settings, pipe_path=tmp_path / "other-pipe")
        self.context.service.reload()

        assert not self.context.accessibility_listener.registered
        assert self.context.pipe_opener.last_request.path == tmp_path / "other-pipe"


class TestDelivery:
    """Focus notifications flowing to the pipe."""

    def setup_method(self):
        """Set up test context before each test."""
        self.context = SensorTestContext()

    def test_example_scenario(self):
        """
        GIVEN: An enabled service with the pipe open
        WHEN: Firefox gains focus twice, then Terminal
        THEN: Exactly two lines are written
        """
        # GIVEN
        self.context.given_enabled_with_open_pipe()

        # WHEN
        self.context.when_focus_app_changes_to("Firefox", "firefox")
        self.context.when_focus_app_changes_to("Firefox", "firefox")
        self.context.when_focus_app_changes_to("Terminal", "gnome-terminal")

        # THEN
        assert self.context.written_lines() == [
            focus_line("Firefox", "firefox"),
            focus_line("Terminal", "gnome-terminal"),
        ]

    def test_both_sources_for_same_change_write_once(self):
        self.context.given_enabled_with_open_pipe()

        self.context.when_focus_app_changes_to("Firefox", "firefox")
        self.context.when_object_focused("", "")

        assert self.context.written_lines() == [focus_line("Firefox", "firefox")]

    def test_accessibility_event_with_details(self):
        self.context.given_enabled_with_open_pipe()
        self.context.given_focused_window("Firefox", "firefox")

        self.context.when_object_focused("Downloads", "Firefox dialog")

        assert self.context.written_lines() == [focus_line("Downloads", "Firefox dialog")]

    def test_accessibility_fallback_uses_focus_app(self):
        self.context.given_enabled_with_open_pipe()
        self.context.given_focused_window("Terminal", "gnome-terminal")

        self.context.when_object_focused("", "")

        assert self.context.written_lines() == [focus_line("Terminal", "gnome-terminal")]

    def test_nothing_focused_sends_empty_event(self):
        self.context.given_enabled_with_open_pipe()
        self.context.focus_tracker.focus_app = None

        self.context.focus_tracker.emit_focus_changed()

        assert self.context.written_lines() == [focus_line("", "")]

    def test_event_before_pipe_opens_is_dropped_then_retried(self):
        """
        GIVEN: An enabled service whose pipe is not open yet
        WHEN: Focus changes to A, the pipe opens, and A is reported again
        THEN: A is written once, on the second notification
        """
        # GIVEN
        self.context.service.enable()

        # WHEN
        self.context.when_focus_app_changes_to("Firefox", "firefox")
        stream = self.context.pipe_opener.succeed_last()
        self.context.focus_tracker.emit_focus_changed()

        # THEN
        assert stream.lines == [focus_line("Firefox", "firefox")]

    def test_consumer_restart(self):
        stream = self.context.given_enabled_with_open_pipe()
        self.context.when_focus_app_changes_to("Firefox", "firefox")
        stream.should_fail_write = True

        self.context.when_focus_app_changes_to("Terminal", "gnome-terminal")
        fresh = self.context.pipe_opener.succeed_last()
        self.context.when_focus_app_changes_to("Editor", "gedit")

        assert fresh.lines == [focus_line("Editor", "gedit")]

    def test_no_delivery_after_disable(self):
        stream = self.context.given_enabled_with_open_pipe()
        callback = next(iter(self.context.focus_tracker.subscribers.values()))
        listener_callback = self.context.accessibility_listener.callback
        self.context.service.disable()

        self.context.given_focused_window("Firefox", "firefox")
        callback()
        listener_callback(None)

        assert stream.written == []

    def test_source_errors_do_not_escape(self):
        self.context.given_enabled_with_open_pipe()
        self.context.focus_tracker.should_fail_get = True

        self.context.focus_tracker.emit_focus_changed()

        assert self.context.written_lines() == [focus_line("", "")]

    @pytest.mark.parametrize("accessibility_enabled", [True, False])
    def test_status(self, accessibility_enabled):
        context = SensorTestContext(accessibility_enabled=accessibility_enabled)
        context.given_enabled_with_open_pipe()
        context.when_focus_app_changes_to("Firefox", "firefox")

        status = context.service.status()

        assert status["enabled"] is True
        assert status["channel_state"] == "open"
        assert status["accessibility"] is accessibility_enabled
        assert status["last_delivered"] == {"window_title": "Firefox", "window_class": "firefox"}

    def test_status_when_disabled(self):
        status = self.context.service.status()

        assert status["enabled"] is False
        assert status["channel_state"] == "closed"
        assert status["last_delivered"] is None
