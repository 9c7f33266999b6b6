"""Test helpers and utilities."""
from pathlib import Path
from typing import List, Optional

from eruption_sensor.application.pipe_channel import ChannelState
from eruption_sensor.application.sensor_service import SensorService
from eruption_sensor.config.settings import AccessibilitySettings, SensorSettings
from tests.fakes.fake_focus_sources import (
    FakeAccessibilityListener,
    FakeAccessible,
    FakeFocusTracker,
)
from tests.fakes.fake_pipe import FakePipeOpener, FakePipeStream


class StateRecorder:
    """Channel observer that records every transition."""

    def __init__(self):
        self.states: List[ChannelState] = []

    def on_channel_state_changed(self, state: ChannelState) -> None:
        self.states.append(state)


class SensorTestContext:
    """Test context with a sensor service wired to fakes."""

    def __init__(
        self,
        pipe_path: Path = Path("/run/user/1000/eruption-sensor"),
        accessibility_enabled: bool = True,
    ):
        """
        Initialize test context.

        Args:
            pipe_path: Path handed to the channel
            accessibility_enabled: Whether the AT-SPI path is enabled
        """
        self.focus_tracker = FakeFocusTracker()
        self.accessibility_listener = FakeAccessibilityListener()
        self.pipe_opener = FakePipeOpener()
        self.settings = SensorSettings(
            accessibility=AccessibilitySettings(enabled=accessibility_enabled)
        )
        self.service = SensorService(
            pipe_path=pipe_path,
            focus_tracker=self.focus_tracker,
            pipe_opener=self.pipe_opener,
            accessibility_listener=self.accessibility_listener,
            settings=self.settings,
        )
        self.stream: Optional[FakePipeStream] = None

    def given_enabled_with_open_pipe(self) -> FakePipeStream:
        """Enable the service and complete the initial pipe open."""
        self.service.enable()
        self.stream = self.pipe_opener.succeed_last()
        return self.stream

    def given_focused_window(self, title: Optional[str], wm_class: Optional[str]) -> None:
        """Make the tracker report a single focused window."""
        self.focus_tracker.set_focus(title, wm_class)

    def when_focus_app_changes_to(self, title: str, wm_class: str) -> None:
        """Focus a window and fire the application-level notification."""
        self.given_focused_window(title, wm_class)
        self.focus_tracker.emit_focus_changed()

    def when_object_focused(self, name: Optional[str], description: Optional[str]) -> None:
        """Fire an accessibility notification for an accessible."""
        self.accessibility_listener.emit_focused(FakeAccessible(name, description))

    def written_lines(self) -> List[str]:
        """All records written to the current stream."""
        return self.stream.lines if self.stream else []


def focus_line(title: str, wm_class: str) -> str:
    """
    Build the expected pipe record.

    Args:
        title: Window title
        wm_class: Window class

    Returns:
        The JSON line as written to the pipe
    """
    return f'{{ "window_title": "{title}", "window_class": "{wm_class}" }}\n'
