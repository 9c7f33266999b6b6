"""Domain models."""

from .focus_event import FocusEvent

__all__ = ["FocusEvent"]
