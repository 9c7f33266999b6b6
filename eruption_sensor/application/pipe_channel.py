"""Owns the write end of the sensor pipe and keeps it open."""
import logging
from enum import Enum
from pathlib import Path
from typing import Optional, Protocol

from eruption_sensor.interfaces.pipe import IPipeOpener, IPipeStream, PendingOpen

logger = logging.getLogger("EruptionSensor.PipeChannel")


class ChannelState(Enum):
    CLOSED = "closed"
    OPENING = "opening"
    OPEN = "open"
    FAULTED = "faulted"


class ChannelObserver(Protocol):
    """Observer protocol for channel state transitions."""

    def on_channel_state_changed(self, state: ChannelState) -> None:
        """Called after every state transition."""
        pass


class PipeChannel:
    """
    Best-effort write path to the named pipe.

    Opening happens asynchronously through the opener; writing is
    synchronous. A failed write drops the handle and starts reopening right
    away. Every open attempt carries a generation number, and completions
    from older attempts or arriving after close() are discarded.
    """

    def __init__(self, path: Path, opener: IPipeOpener):
        """
        Initialize the channel in the CLOSED state.

        Args:
            path: Filesystem path of the pipe
            opener: Opens the pipe without blocking
        """
        self.path = Path(path)
        self._opener = opener
        self._state = ChannelState.CLOSED
        self._stream: Optional[IPipeStream] = None
        self._pending: Optional[PendingOpen] = None
        self._generation = 0
        self._active = True
        self._observers: list[ChannelObserver] = []

    def add_observer(self, observer: ChannelObserver) -> None:
        """Add an observer for state transitions."""
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: ChannelObserver) -> None:
        """Remove an observer."""
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def state(self) -> ChannelState:
        """Get the current channel state."""
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is ChannelState.OPEN

    def ensure_open(self) -> None:
        """Request an asynchronous open unless one is open or in flight."""
        if not self._active:
            return
        if self._state in (ChannelState.OPEN, ChannelState.OPENING):
            return

        self._generation += 1
        generation = self._generation
        self._set_state(ChannelState.OPENING)
        logger.debug("Opening sensor pipe %s", self.path)

        try:
            pending = self._opener.open_async(
                self.path,
                lambda stream, error: self._on_open_finished(generation, stream, error),
            )
        except Exception as e:
            logger.debug("Could not request sensor pipe open: %s", e)
            if generation == self._generation:
                self._set_state(ChannelState.CLOSED)
            return

        # The opener may already have reported back
        if generation == self._generation and self._state is ChannelState.OPENING:
            self._pending = pending

    def try_write(self, data: bytes) -> bool:
        """
        Write the data if the pipe is open.

        Args:
            data: Bytes to write

        Returns:
            True if the write succeeded, False otherwise
        """
        if not self.is_open or self._stream is None:
            logger.debug("Sensor pipe is not open (%s), dropping write", self._state.value)
            self.ensure_open()
            return False

        try:
            self._stream.write_all(data)
        except Exception as e:
            logger.debug("Sensor pipe write failed: %s", e)
            self._fault()
            return False

        return True

    def close(self) -> None:
        """Tear the channel down. No further opens or writes happen."""
        self._active = False
        self._generation += 1

        if self._pending is not None:
            pending, self._pending = self._pending, None
            try:
                pending.cancel()
            except Exception as e:
                logger.debug("Could not cancel pending open: %s", e)

        self._discard_stream()
        if self._state is not ChannelState.CLOSED:
            self._set_state(ChannelState.CLOSED)
        logger.debug("Sensor pipe channel closed")

    def _on_open_finished(
        self,
        generation: int,
        stream: Optional[IPipeStream],
        error: Optional[Exception],
    ) -> None:
        if generation != self._generation or not self._active:
            logger.debug("Ignoring stale sensor pipe open completion")
            if stream is not None:
                self._close_quietly(stream)
            return

        self._pending = None

        if error is not None or stream is None:
            logger.debug("Sensor pipe is not available: %s", error)
            self._set_state(ChannelState.CLOSED)
            return

        self._stream = stream
        self._set_state(ChannelState.OPEN)
        logger.info("Sensor pipe %s has been opened", self.path)

    def _fault(self) -> None:
        self._set_state(ChannelState.FAULTED)
        self._discard_stream()
        logger.info("Sensor pipe was closed")
        self._set_state(ChannelState.CLOSED)
        self.ensure_open()

    def _discard_stream(self) -> None:
        if self._stream is not None:
            stream, self._stream = self._stream, None
            self._close_quietly(stream)

    @staticmethod
    def _close_quietly(stream: IPipeStream) -> None:
        try:
            stream.close()
        except Exception as e:
            logger.debug("Error closing sensor pipe handle: %s", e)

    def _set_state(self, state: ChannelState) -> None:
        self._state = state
        for observer in list(self._observers):
            try:
                observer.on_channel_state_changed(state)
            except Exception as e:
                logger.error("Channel observer failed: %s", e)
