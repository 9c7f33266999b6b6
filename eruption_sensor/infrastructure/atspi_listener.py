"""AT-SPI focus listener.

Listens on the accessibility bus for objects gaining focus. AT-SPI dispatches
events on the default GLib main context, so no extra loop is needed.
"""

import logging
from typing import Any, Callable, Iterable, List, Optional

import gi

gi.require_version("Atspi", "2.0")

from gi.repository import Atspi  # noqa: E402

from eruption_sensor.interfaces.focus_sources import IAccessibilityListener

logger = logging.getLogger("EruptionSensor.AtspiListener")

STATE_CHANGED_PREFIX = "object:state-changed:"


class AtspiFocusListener(IAccessibilityListener):
    """Forwards the source of AT-SPI focus events to a callback."""

    def __init__(self):
        self._initialized = False
        self._listener: Optional[Atspi.EventListener] = None
        self._event_types: List[str] = []
        self._callback: Optional[Callable[[Any], None]] = None

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        # 0 on success, 1 if already initialized
        ret = Atspi.init()
        if ret not in (0, 1):
            raise RuntimeError(
                f"Atspi.init() failed with code {ret}. Is the registry daemon running?"
            )
        self._initialized = True

    def register(
        self, callback: Callable[[Any], None], event_types: Iterable[str]
    ) -> None:
        if self._listener is not None:
            logger.warning("Accessibility listener already registered")
            return

        self._ensure_initialized()
        self._callback = callback
        self._listener = Atspi.EventListener.new(self._on_event)

        registered = []
        try:
            for event_type in event_types:
                self._listener.register(event_type)
                registered.append(event_type)
        except Exception:
            for event_type in registered:
                self._listener.deregister(event_type)
            self._listener = None
            self._callback = None
            raise

        self._event_types = registered
        logger.info("AT-SPI listener registered for %s", ", ".join(registered))

    def deregister(self) -> None:
        if self._listener is None:
            return

        for event_type in self._event_types:
            try:
                self._listener.deregister(event_type)
            except Exception as e:
                logger.warning("Could not deregister %s: %s", event_type, e)

        self._listener = None
        self._callback = None
        self._event_types = []
        logger.info("AT-SPI listener deregistered")

    def _on_event(self, event) -> None:
        callback = self._callback
        if callback is None:
            return

        # detail1 is 0 when the state was cleared, e.g. focus lost
        if event.type.startswith(STATE_CHANGED_PREFIX) and not event.detail1:
            return

        callback(event.source)
