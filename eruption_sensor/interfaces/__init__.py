"""Interfaces for external collaborators."""

from .focus_sources import (
    AccessibleSubject,
    FocusApp,
    FocusWindow,
    IAccessibilityListener,
    IFocusTracker,
)
from .pipe import IPipeOpener, IPipeStream, OpenCallback, PendingOpen

__all__ = [
    "AccessibleSubject",
    "FocusApp",
    "FocusWindow",
    "IAccessibilityListener",
    "IFocusTracker",
    "IPipeOpener",
    "IPipeStream",
    "OpenCallback",
    "PendingOpen",
]
