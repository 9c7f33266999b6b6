"""Wires the focus sources, the delivery pipeline and the pipe together."""
import logging
from pathlib import Path
from typing import Optional

from eruption_sensor.application.delivery_sink import DeliverySink
from eruption_sensor.application.normalizer import EventNormalizer
from eruption_sensor.application.pipe_channel import PipeChannel
from eruption_sensor.application.source_adapters import (
    AccessibilityFocusAdapter,
    CoarseFocusAdapter,
)
from eruption_sensor.config.settings import SensorSettings
from eruption_sensor.interfaces.focus_sources import (
    IAccessibilityListener,
    IFocusTracker,
)
from eruption_sensor.interfaces.pipe import IPipeOpener

logger = logging.getLogger("EruptionSensor.Service")


class SensorService:
    """
    Host-facing lifecycle of the focus sensor.

    Each enable() builds a fresh channel, sink and pair of source adapters;
    disable() tears all of them down. Settings are read at enable() time.
    """

    def __init__(
        self,
        pipe_path: Path,
        focus_tracker: IFocusTracker,
        pipe_opener: IPipeOpener,
        accessibility_listener: Optional[IAccessibilityListener] = None,
        settings: Optional[SensorSettings] = None,
    ):
        self.pipe_path = Path(pipe_path)
        self.settings = settings or SensorSettings()
        self._focus_tracker = focus_tracker
        self._pipe_opener = pipe_opener
        self._accessibility_listener = accessibility_listener

        self._enabled = False
        self._channel: Optional[PipeChannel] = None
        self._sink: Optional[DeliverySink] = None
        self._coarse_adapter: Optional[CoarseFocusAdapter] = None
        self._accessibility_adapter: Optional[AccessibilityFocusAdapter] = None

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def channel(self) -> Optional[PipeChannel]:
        return self._channel

    @property
    def sink(self) -> Optional[DeliverySink]:
        return self._sink

    @property
    def has_accessibility_listener(self) -> bool:
        return self._accessibility_listener is not None

    def configure(
        self,
        settings: SensorSettings,
        pipe_path: Optional[Path] = None,
        accessibility_listener: Optional[IAccessibilityListener] = None,
    ) -> None:
        """Replace the settings used from the next enable() on."""
        self.settings = settings
        if pipe_path is not None:
            self.pipe_path = Path(pipe_path)
        if accessibility_listener is not None:
            self._accessibility_listener = accessibility_listener

    def enable(self) -> None:
        """Start forwarding focus changes. Does nothing if already enabled."""
        if self._enabled:
            return

        logger.info("Enabling focus sensor for %s", self.pipe_path)

        self._channel = PipeChannel(self.pipe_path, self._pipe_opener)
        self._sink = DeliverySink(self._channel)
        normalizer = EventNormalizer(self._focus_tracker)

        self._coarse_adapter = CoarseFocusAdapter(
            self._focus_tracker, normalizer, self._sink
        )
        self._coarse_adapter.enable()

        if self.settings.accessibility.enabled and self._accessibility_listener:
            self._accessibility_adapter = AccessibilityFocusAdapter(
                self._accessibility_listener,
                normalizer,
                self._sink,
                self.settings.accessibility.event_types,
            )
            self._accessibility_adapter.enable()
        else:
            logger.info("Accessibility focus events are disabled")

        self._enabled = True
        self._channel.ensure_open()

    def disable(self) -> None:
        """Stop forwarding and release the pipe. Does nothing if disabled."""
        if not self._enabled:
            return

        logger.info("Disabling focus sensor")
        self._enabled = False

        if self._accessibility_adapter is not None:
            self._accessibility_adapter.disable()
            self._accessibility_adapter = None
        if self._coarse_adapter is not None:
            self._coarse_adapter.disable()
            self._coarse_adapter = None
        if self._channel is not None:
            self._channel.close()
            self._channel = None
        self._sink = None

    def reload(self) -> None:
        logger.info("Reloading focus sensor")
        self.disable()
        self.enable()

    def status(self) -> dict:
        """
        Describe the current state for diagnostics.

        Returns:
            Dict with enabled flag, channel state, pipe path and last event
        """
        last = self._sink.last_delivered if self._sink else None
        return {
            "enabled": self._enabled,
            "channel_state": self._channel.state.value if self._channel else "closed",
            "pipe_path": str(self.pipe_path),
            "accessibility": self._accessibility_adapter is not None
            and self._accessibility_adapter.enabled,
            "last_delivered": last.to_dict() if last else None,
        }
