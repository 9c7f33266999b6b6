"""Focus tracker used when libwnck cannot be loaded.

Knows no focused application and refuses subscriptions, so the sensor keeps
running on the accessibility source alone.
"""

from typing import Callable, Optional

from eruption_sensor.interfaces.focus_sources import FocusApp, IFocusTracker


class UnavailableFocusTracker(IFocusTracker):
    """Stands in for the application-level source when it cannot load."""

    def __init__(self, reason: str = ""):
        self.reason = reason

    def get_focus_app(self) -> Optional[FocusApp]:
        return None

    def connect_focus_changed(self, callback: Callable[[], None]) -> int:
        raise RuntimeError(f"Application focus tracking is unavailable: {self.reason}")

    def disconnect_focus_changed(self, handler_id: int) -> None:
        pass
