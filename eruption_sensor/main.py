#!/usr/bin/env python3
"""
Eruption Focus Sensor - Entry point
Forwards focus changes to the Eruption daemon through its sensor pipe
"""

import argparse
import logging
import signal
import sys
from pathlib import Path
from typing import Callable, List, Optional

from gi.repository import Gio, GLib

from eruption_sensor.application.sensor_service import SensorService
from eruption_sensor.config.paths import SensorPaths
from eruption_sensor.config.settings import SensorSettings, SettingsManager
from eruption_sensor.dbus_service import SensorDBusService
from eruption_sensor.infrastructure.gio_pipe_opener import GioPipeOpener
from eruption_sensor.infrastructure.unavailable_focus_tracker import (
    UnavailableFocusTracker,
)
from eruption_sensor.interfaces.focus_sources import (
    IAccessibilityListener,
    IFocusTracker,
)
from eruption_sensor.interfaces.pipe import IPipeOpener

logger = logging.getLogger("EruptionSensor")


def create_focus_tracker() -> IFocusTracker:
    """Build the libwnck tracker, or a stand-in when libwnck cannot load."""
    try:
        from eruption_sensor.infrastructure.wnck_focus_tracker import WnckFocusTracker
    except (ImportError, ValueError) as e:
        logger.warning("libwnck is not available, application focus disabled: %s", e)
        return UnavailableFocusTracker(str(e))
    return WnckFocusTracker()


def create_accessibility_listener(
    settings: SensorSettings,
) -> Optional[IAccessibilityListener]:
    if not settings.accessibility.enabled:
        return None
    try:
        from eruption_sensor.infrastructure.atspi_listener import AtspiFocusListener
    except (ImportError, ValueError) as e:
        logger.warning("AT-SPI is not available, accessibility events disabled: %s", e)
        return None
    return AtspiFocusListener()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="eruption-focus-sensor",
        description="Forward focused window changes to the Eruption daemon",
    )
    parser.add_argument("--config", type=Path, help="Path to settings.yml")
    parser.add_argument("--pipe", type=Path, help="Full path of the sensor pipe")
    parser.add_argument(
        "--no-accessibility",
        action="store_true",
        help="Do not listen for AT-SPI focus events",
    )
    parser.add_argument(
        "--no-dbus", action="store_true", help="Do not expose the D-Bus control interface"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


class SensorDaemon:
    """Main application wiring the sensor service to the desktop"""

    def __init__(
        self,
        args: argparse.Namespace,
        paths: Optional[SensorPaths] = None,
        focus_tracker: Optional[IFocusTracker] = None,
        pipe_opener: Optional[IPipeOpener] = None,
        accessibility_listener_factory: Optional[
            Callable[[SensorSettings], Optional[IAccessibilityListener]]
        ] = None,
    ):
        self.args = args
        paths = paths or SensorPaths.default()
        if args.config:
            paths = SensorPaths(
                runtime_dir=paths.runtime_dir,
                config_path=args.config,
                pipe_name=paths.pipe_name,
            )
        self.paths = paths
        self.settings_manager = SettingsManager(paths.config_path)
        self.loop = GLib.MainLoop()
        self.settings_monitor = None
        self.dbus_service = None

        self._create_accessibility_listener = (
            accessibility_listener_factory or create_accessibility_listener
        )

        settings = self._effective_settings()
        if pipe_opener is None:
            pipe_opener = GioPipeOpener(require_fifo=settings.pipe.require_fifo)
        if focus_tracker is None:
            focus_tracker = create_focus_tracker()
        self.pipe_opener = pipe_opener
        self.service = SensorService(
            pipe_path=self._pipe_path(),
            focus_tracker=focus_tracker,
            pipe_opener=self.pipe_opener,
            accessibility_listener=self._create_accessibility_listener(settings),
            settings=settings,
        )

    def _effective_settings(self):
        settings = self.settings_manager.settings
        if self.args.no_accessibility:
            settings = settings.model_copy(
                update={
                    "accessibility": settings.accessibility.model_copy(
                        update={"enabled": False}
                    )
                }
            )
        return settings

    def _pipe_path(self) -> Path:
        if self.args.pipe:
            return self.args.pipe
        return self.paths.with_settings(self.settings_manager.settings.pipe).pipe_path

    def reload(self):
        """Re-read settings and restart the sensor with them"""
        self.settings_manager.reload()
        settings = self._effective_settings()
        logging.getLogger().setLevel(self.log_level())

        listener = None
        if not self.service.has_accessibility_listener:
            listener = self._create_accessibility_listener(settings)
        self.pipe_opener.require_fifo = settings.pipe.require_fifo

        self.service.configure(
            settings, pipe_path=self._pipe_path(), accessibility_listener=listener
        )
        # A sensor stopped over D-Bus stays stopped until Enable
        if self.service.enabled:
            self.service.reload()
        else:
            logger.info("Sensor is disabled, new settings apply on the next Enable")

    def quit(self):
        logger.info("Shutting down focus sensor...")
        self.loop.quit()

    def log_level(self) -> int:
        if self.args.verbose:
            return logging.DEBUG
        return getattr(logging, self.settings_manager.log_level)

    def _monitor_settings(self):
        config_file = Gio.File.new_for_path(str(self.paths.config_path))
        try:
            self.settings_monitor = config_file.monitor_file(Gio.FileMonitorFlags.NONE, None)
        except GLib.Error as e:
            logger.warning("Cannot monitor settings file: %s", e.message)
            return
        self.settings_monitor.connect("changed", self._on_settings_changed)

    def _on_settings_changed(self, _monitor, _file, _other_file, event_type):
        if event_type in (Gio.FileMonitorEvent.CHANGES_DONE_HINT, Gio.FileMonitorEvent.DELETED):
            logger.info("Settings file changed, reloading sensor.")
            self.reload()

    def _on_signal(self, signum):
        if signum == signal.SIGHUP:
            self.reload()
            return GLib.SOURCE_CONTINUE
        self.quit()
        return GLib.SOURCE_REMOVE

    def run(self) -> int:
        for signum in (signal.SIGINT, signal.SIGTERM, signal.SIGHUP):
            GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, self._on_signal, signum)

        if not self.args.no_dbus:
            self.dbus_service = SensorDBusService(
                self.service, on_quit=self.quit, on_reload=self.reload
            )
            self.dbus_service.start()

        self._monitor_settings()
        self.service.enable()

        try:
            self.loop.run()
        finally:
            self.service.disable()
            if self.settings_monitor:
                self.settings_monitor.cancel()
                self.settings_monitor = None
            if self.dbus_service:
                self.dbus_service.stop()
        return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point"""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    daemon = SensorDaemon(args)
    logging.getLogger().setLevel(daemon.log_level())
    logger.info("Eruption focus sensor starting...")
    return daemon.run()


if __name__ == "__main__":
    sys.exit(main())
