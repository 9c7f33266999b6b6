"""
Eruption focus sensor settings.
Loads and validates settings from settings.yml using Pydantic
"""

import logging
from pathlib import Path
from typing import List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger("EruptionSensor.Settings")

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PipeSettings(BaseModel):
    """Sensor pipe settings"""
    name: str = Field(
        default="eruption-sensor",
        min_length=1,
        description="File name of the sensor pipe inside the runtime directory"
    )
    runtime_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding the pipe, defaults to $XDG_RUNTIME_DIR"
    )
    require_fifo: bool = Field(
        default=True,
        description="Only open the path if it already exists as a named pipe"
    )

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure the pipe name is a bare file name"""
        if "/" in v or v in (".", ".."):
            raise ValueError("pipe name must be a file name, not a path")
        return v


class AccessibilitySettings(BaseModel):
    """AT-SPI focus source settings"""
    enabled: bool = Field(
        default=True,
        description="Also listen for accessibility focus events"
    )
    event_types: List[str] = Field(
        default_factory=lambda: ["object:state-changed:focused"],
        description="AT-SPI event types to register for"
    )

    @field_validator('event_types')
    @classmethod
    def validate_event_types(cls, v: List[str]) -> List[str]:
        """Drop blanks and duplicates, keeping order"""
        cleaned = []
        for event_type in v:
            event_type = event_type.strip()
            if event_type and event_type not in cleaned:
                cleaned.append(event_type)
        if not cleaned:
            raise ValueError("at least one event type is required")
        return cleaned


class LoggingSettings(BaseModel):
    """Logging settings"""
    level: str = Field(default="INFO", description="Log level name")

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Accept standard level names in any case"""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return level


class SensorSettings(BaseModel):
    """Main settings model"""
    pipe: PipeSettings = Field(default_factory=PipeSettings)
    accessibility: AccessibilitySettings = Field(default_factory=AccessibilitySettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class SettingsManager:
    """Manages loading and accessing settings"""

    def __init__(self, config_path: Path):
        """
        Initialize settings manager

        Args:
            config_path: Path to settings.yml file
        """
        self.config_path = Path(config_path)
        self.settings = self._load_settings()

    def _load_settings(self) -> SensorSettings:
        """Load and validate settings from YAML file"""
        if not self.config_path.exists():
            logger.debug("Settings file not found at %s, using defaults", self.config_path)
            return SensorSettings()

        try:
            with open(self.config_path, 'r') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error("Error parsing settings YAML: %s", e)
            return SensorSettings()
        except OSError as e:
            logger.error("Error reading settings: %s", e)
            return SensorSettings()

        if config_data is None:
            logger.info("Settings file is empty, using defaults")
            return SensorSettings()

        if not isinstance(config_data, dict):
            logger.error("Settings file must contain a mapping, using defaults")
            return SensorSettings()

        try:
            settings = SensorSettings(**config_data)
        except ValidationError as e:
            logger.error("Invalid settings in %s: %s", self.config_path, e)
            return SensorSettings()

        logger.info("Loaded settings from %s", self.config_path)
        return settings

    def reload(self) -> SensorSettings:
        """Reload settings from file"""
        self.settings = self._load_settings()
        return self.settings

    @property
    def log_level(self) -> str:
        """Get the log level setting"""
        return self.settings.logging.level
