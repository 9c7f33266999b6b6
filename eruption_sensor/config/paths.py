"""Sensor paths configuration."""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional

from .settings import PipeSettings

DEFAULT_PIPE_NAME = "eruption-sensor"


@dataclass(frozen=True)
class SensorPaths:
    runtime_dir: Path
    config_path: Path
    pipe_name: str = DEFAULT_PIPE_NAME

    @property
    def pipe_path(self) -> Path:
        return self.runtime_dir / self.pipe_name

    @classmethod
    def default(cls, environ: Optional[Mapping[str, str]] = None) -> "SensorPaths":
        env = os.environ if environ is None else environ
        runtime_dir = env.get("XDG_RUNTIME_DIR") or "/tmp"
        config_home = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")

        return cls(
            runtime_dir=Path(runtime_dir),
            config_path=Path(config_home) / "eruption-sensor" / "settings.yml",
        )

    def with_settings(self, pipe: PipeSettings) -> "SensorPaths":
        """Apply the pipe overrides from settings."""
        return replace(
            self,
            runtime_dir=pipe.runtime_dir or self.runtime_dir,
            pipe_name=pipe.name,
        )
