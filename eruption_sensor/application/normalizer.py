"""Turns raw focus notifications into FocusEvents."""
import logging
from typing import Any, Callable, Optional

from eruption_sensor.domain.focus_event import FocusEvent
from eruption_sensor.interfaces.focus_sources import AccessibleSubject, IFocusTracker

logger = logging.getLogger("EruptionSensor.Normalizer")


def _read_field(subject: Any, accessor_name: str) -> str:
    """Read a string accessor, treating any failure as an unknown value."""
    try:
        accessor: Optional[Callable[[], Any]] = getattr(subject, accessor_name, None)
        if accessor is None:
            return ""
        value = accessor()
    except Exception as e:
        # The window or accessible may have gone away mid-read
        logger.debug("Could not read %s: %s", accessor_name, e)
        return ""

    if value is None:
        return ""
    return str(value)


class EventNormalizer:
    """Builds canonical focus events from either focus source."""

    def __init__(self, focus_tracker: IFocusTracker):
        """
        Initialize the normalizer.

        Args:
            focus_tracker: Application-level focus source, also used as the
                fallback for uninformative accessibility notifications
        """
        self._focus_tracker = focus_tracker

    def from_focus_app(self) -> FocusEvent:
        """
        Describe the first window of the currently focused application.

        Returns:
            FocusEvent, with empty fields if nothing could be determined
        """
        try:
            app = self._focus_tracker.get_focus_app()
            windows = app.get_windows() if app is not None else None
            window = next((w for w in windows or [] if w), None)
        except Exception as e:
            logger.debug("Could not determine the currently focused window: %s", e)
            return FocusEvent()

        if window is None:
            logger.debug("No focused window found")
            return FocusEvent()

        return FocusEvent(
            window_title=_read_field(window, "get_title"),
            window_class=_read_field(window, "get_wm_class"),
        )

    def from_accessible(self, subject: Optional[AccessibleSubject]) -> FocusEvent:
        """
        Describe the subject of an accessibility focus notification.

        Falls back to the application-level source when both the name and
        the description are empty.

        Args:
            subject: Object exposing get_name() and get_description()

        Returns:
            FocusEvent
        """
        name = _read_field(subject, "get_name") if subject is not None else ""
        description = (
            _read_field(subject, "get_description") if subject is not None else ""
        )

        event = FocusEvent(window_title=name, window_class=description)
        if event.is_empty():
            return self.from_focus_app()
        return event
