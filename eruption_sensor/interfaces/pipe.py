"""Named pipe access interfaces."""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Optional, Protocol


class IPipeStream(ABC):
    """A live write handle to the pipe."""

    @abstractmethod
    def write_all(self, data: bytes) -> None:
        """
        Write all bytes synchronously.

        Raises:
            Exception: If the write fails (e.g. the reader went away)
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Close the handle."""
        pass


class PendingOpen(Protocol):
    """Handle for an open request that has not completed yet."""

    def cancel(self) -> None:
        ...


OpenCallback = Callable[[Optional[IPipeStream], Optional[Exception]], None]


class IPipeOpener(ABC):
    """Abstract interface for opening the pipe without blocking the loop."""

    @abstractmethod
    def open_async(self, path: Path, on_done: OpenCallback) -> PendingOpen:
        """
        Start opening the pipe for appending.

        Args:
            path: Filesystem path of the pipe
            on_done: Called from the main loop with (stream, None) on success
                or (None, error) on failure

        Returns:
            Handle that can cancel the request
        """
        pass
