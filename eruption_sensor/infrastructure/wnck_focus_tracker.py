"""Application-level focus tracking using libwnck.

Wnck only sees X11 (and XWayland) windows. It reports active window changes;
this tracker narrows them down to changes of the active application.
"""

import logging
from typing import Callable, Dict, List, Optional

import gi

gi.require_version("Gtk", "3.0")
gi.require_version("Wnck", "3.0")

from gi.repository import Gtk, Wnck  # noqa: E402,F401  (Gtk import initializes GDK)

from eruption_sensor.interfaces.focus_sources import FocusApp, IFocusTracker

logger = logging.getLogger("EruptionSensor.WnckTracker")


class WnckFocusWindow:
    """Adapts a Wnck.Window to the title / window class accessors."""

    def __init__(self, window: Wnck.Window):
        self._window = window

    def get_title(self) -> Optional[str]:
        return self._window.get_name()

    def get_wm_class(self) -> Optional[str]:
        return self._window.get_class_group_name()


class WnckFocusApp:
    """Adapts a Wnck.Application to the window list accessor."""

    def __init__(self, application: Wnck.Application):
        self._application = application

    def get_windows(self) -> List[Optional[WnckFocusWindow]]:
        return [WnckFocusWindow(w) if w else None for w in self._application.get_windows()]


class WnckFocusTracker(IFocusTracker):
    """Tracks the focused application of the default Wnck screen."""

    def __init__(self, screen: Optional[Wnck.Screen] = None):
        self._screen = screen
        self._screen_handler_id: Optional[int] = None
        self._subscribers: Dict[int, Callable[[], None]] = {}
        self._next_id = 1
        self._focus_app = None

    def _get_screen(self) -> Wnck.Screen:
        if self._screen is None:
            screen = Wnck.Screen.get_default()
            if screen is None:
                raise RuntimeError("No default Wnck screen (is an X display available?)")
            screen.force_update()
            self._screen = screen
        return self._screen

    def _active_application(self):
        window = self._get_screen().get_active_window()
        if window is None:
            return None
        return window.get_application()

    def get_focus_app(self) -> Optional[FocusApp]:
        application = self._active_application()
        if application is None:
            return None
        return WnckFocusApp(application)

    def connect_focus_changed(self, callback: Callable[[], None]) -> int:
        screen = self._get_screen()
        if self._screen_handler_id is None:
            self._focus_app = self._active_application()
            self._screen_handler_id = screen.connect(
                "active-window-changed", self._on_active_window_changed
            )

        handler_id = self._next_id
        self._next_id += 1
        self._subscribers[handler_id] = callback
        return handler_id

    def disconnect_focus_changed(self, handler_id: int) -> None:
        self._subscribers.pop(handler_id, None)
        if not self._subscribers and self._screen_handler_id is not None:
            self._screen.disconnect(self._screen_handler_id)
            self._screen_handler_id = None
            self._focus_app = None

    def _on_active_window_changed(self, screen, _previous_window) -> None:
        window = screen.get_active_window()
        application = window.get_application() if window else None
        if application == self._focus_app:
            return

        self._focus_app = application
        for callback in list(self._subscribers.values()):
            callback()
