"""Hands normalized focus events to the pipe channel."""
import logging
from typing import Optional

from eruption_sensor.application.pipe_channel import PipeChannel
from eruption_sensor.application.suppressor import DuplicateSuppressor
from eruption_sensor.domain.focus_event import FocusEvent

logger = logging.getLogger("EruptionSensor.DeliverySink")


class DeliverySink:
    """Serializes new events and writes them to the channel."""

    def __init__(
        self,
        channel: PipeChannel,
        suppressor: Optional[DuplicateSuppressor] = None,
    ):
        self._channel = channel
        self._suppressor = suppressor or DuplicateSuppressor()
        self._last_delivered: Optional[FocusEvent] = None

    @property
    def last_delivered(self) -> Optional[FocusEvent]:
        """Get the last event confirmed written to the pipe."""
        return self._last_delivered

    def deliver(self, event: FocusEvent) -> bool:
        """
        Deliver an event unless it repeats the last delivered one.

        The last delivered event only changes after a successful write, so
        an event that failed to send is attempted again next time.

        Args:
            event: Normalized focus event

        Returns:
            True if the event was written, False if suppressed or dropped
        """
        try:
            if not self._suppressor.is_new(event, self._last_delivered):
                logger.debug("Suppressing duplicate event %s", event)
                return False

            if not self._channel.try_write(event.to_bytes()):
                logger.debug("Dropped event %s, sensor pipe unavailable", event)
                return False
        except Exception as e:
            logger.error("Error delivering event %s: %s", event, e)
            return False

        self._last_delivered = event
        logger.info("event: %s", event.to_json_line().rstrip("\n"))
        return True
