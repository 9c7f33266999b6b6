"""Focus notification source interfaces."""
from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Optional, Protocol


class FocusWindow(Protocol):
    """A top-level window of the focused application."""

    def get_title(self) -> Optional[str]:
        ...

    def get_wm_class(self) -> Optional[str]:
        ...


class FocusApp(Protocol):
    """The application that currently has focus."""

    def get_windows(self) -> List[Optional[FocusWindow]]:
        ...


class AccessibleSubject(Protocol):
    """The accessible object carried by a focus notification."""

    def get_name(self) -> Optional[str]:
        ...

    def get_description(self) -> Optional[str]:
        ...


class IFocusTracker(ABC):
    """Abstract interface for the application-level focus source."""

    @abstractmethod
    def get_focus_app(self) -> Optional[FocusApp]:
        """
        Get the application that currently has focus.

        Returns:
            FocusApp if one is focused, None otherwise
        """
        pass

    @abstractmethod
    def connect_focus_changed(self, callback: Callable[[], None]) -> int:
        """
        Subscribe to "focused application changed" notifications.

        Args:
            callback: Called with no arguments on every change

        Returns:
            Handler id to pass to disconnect_focus_changed()
        """
        pass

    @abstractmethod
    def disconnect_focus_changed(self, handler_id: int) -> None:
        """
        Remove a subscription made with connect_focus_changed().

        Args:
            handler_id: Id returned by connect_focus_changed()
        """
        pass


class IAccessibilityListener(ABC):
    """Abstract interface for the accessibility bus focus source."""

    @abstractmethod
    def register(
        self, callback: Callable[[Any], None], event_types: Iterable[str]
    ) -> None:
        """
        Start delivering "object focused" notifications.

        Args:
            callback: Called with the focused subject
            event_types: Accessibility event types to listen for
        """
        pass

    @abstractmethod
    def deregister(self) -> None:
        """Stop delivering notifications. Safe to call when not registered."""
        pass
