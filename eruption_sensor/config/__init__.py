"""Configuration management."""

from .paths import SensorPaths
from .settings import (
    AccessibilitySettings,
    LoggingSettings,
    PipeSettings,
    SensorSettings,
    SettingsManager,
)

__all__ = [
    "AccessibilitySettings",
    "LoggingSettings",
    "PipeSettings",
    "SensorPaths",
    "SensorSettings",
    "SettingsManager",
]
