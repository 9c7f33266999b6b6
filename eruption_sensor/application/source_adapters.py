"""Subscriptions that feed focus notifications into the delivery pipeline."""
import logging
from typing import Any, Iterable, Optional

from eruption_sensor.application.delivery_sink import DeliverySink
from eruption_sensor.application.normalizer import EventNormalizer
from eruption_sensor.interfaces.focus_sources import (
    IAccessibilityListener,
    IFocusTracker,
)

logger = logging.getLogger("EruptionSensor.SourceAdapters")


class CoarseFocusAdapter:
    """Delivers an event whenever the focused application changes."""

    def __init__(
        self,
        focus_tracker: IFocusTracker,
        normalizer: EventNormalizer,
        sink: DeliverySink,
    ):
        self._focus_tracker = focus_tracker
        self._normalizer = normalizer
        self._sink = sink
        self._handler_id: Optional[int] = None

    @property
    def enabled(self) -> bool:
        return self._handler_id is not None

    def enable(self) -> bool:
        """
        Subscribe to focus app changes. Does nothing if already subscribed.

        Returns:
            True if subscribed, False if the subscription failed
        """
        if self._handler_id is not None:
            return True

        try:
            self._handler_id = self._focus_tracker.connect_focus_changed(
                self._on_focus_app_changed
            )
        except Exception as e:
            logger.error("Could not subscribe to focus app changes: %s", e)
            self._handler_id = None
            return False

        logger.debug("Subscribed to focus app changes")
        return True

    def disable(self) -> None:
        """Unsubscribe. Safe to call when not subscribed."""
        if self._handler_id is None:
            return

        handler_id, self._handler_id = self._handler_id, None
        try:
            self._focus_tracker.disconnect_focus_changed(handler_id)
        except Exception as e:
            logger.warning("Error unsubscribing from focus app changes: %s", e)
        logger.debug("Unsubscribed from focus app changes")

    def _on_focus_app_changed(self) -> None:
        # Only the top-level application is reported here, so changes
        # within one application (e.g. browser tabs) are not seen
        if self._handler_id is None:
            return
        try:
            self._sink.deliver(self._normalizer.from_focus_app())
        except Exception:
            logger.exception("Error handling focus app change")


class AccessibilityFocusAdapter:
    """Delivers an event whenever an accessible object gains focus."""

    def __init__(
        self,
        listener: IAccessibilityListener,
        normalizer: EventNormalizer,
        sink: DeliverySink,
        event_types: Iterable[str],
    ):
        self._listener = listener
        self._normalizer = normalizer
        self._sink = sink
        self._event_types = list(event_types)
        self._registered = False

    @property
    def enabled(self) -> bool:
        return self._registered

    def enable(self) -> bool:
        """
        Register for accessibility focus events. Does nothing if registered.

        Returns:
            True if registered, False if registration failed
        """
        if self._registered:
            return True

        try:
            self._listener.register(self._on_object_focused, self._event_types)
        except Exception as e:
            logger.error("Could not register accessibility listener: %s", e)
            return False

        self._registered = True
        logger.debug("Registered accessibility listener for %s", ", ".join(self._event_types))
        return True

    def disable(self) -> None:
        """Deregister. Safe to call when not registered."""
        if not self._registered:
            return

        self._registered = False
        try:
            self._listener.deregister()
        except Exception as e:
            logger.warning("Error deregistering accessibility listener: %s", e)
        logger.debug("Deregistered accessibility listener")

    def _on_object_focused(self, subject: Any) -> None:
        # Lets us re-query the focused window of the active application,
        # including changes the application-level source misses
        if not self._registered:
            return
        try:
            self._sink.deliver(self._normalizer.from_accessible(subject))
        except Exception:
            logger.exception("Error handling accessibility focus event")
