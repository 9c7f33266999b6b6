"""Gio-based pipe opener.

Opens the sensor pipe with Gio.File.append_to_async so that waiting for the
reader side never blocks the main loop. Completion is dispatched on the
thread-default main context.
"""

import logging
import os
import stat
from pathlib import Path

from gi.repository import Gio, GLib

from eruption_sensor.interfaces.pipe import IPipeOpener, IPipeStream, OpenCallback

logger = logging.getLogger("EruptionSensor.GioPipe")


class GioPipeStream(IPipeStream):
    """Write handle wrapping a Gio.FileOutputStream."""

    def __init__(self, stream: Gio.FileOutputStream):
        self._stream = stream

    def write_all(self, data: bytes) -> None:
        ok, _written = self._stream.write_all(data, None)
        if not ok:
            raise OSError("short write to sensor pipe")

    def close(self) -> None:
        if not self._stream.is_closed():
            self._stream.close(None)


class GioPipeOpener(IPipeOpener):
    """Opens the pipe for appending through GIO's async file API."""

    def __init__(self, require_fifo: bool = True):
        """
        Args:
            require_fifo: Report a missing path or a non-FIFO path as a
                failed open instead of creating a regular file there
        """
        self.require_fifo = require_fifo

    def open_async(self, path: Path, on_done: OpenCallback) -> Gio.Cancellable:
        cancellable = Gio.Cancellable()

        if self.require_fifo:
            error = self._check_fifo(Path(path))
            if error is not None:
                # Report from the loop, the same way a real completion arrives
                GLib.idle_add(self._report_failure, cancellable, on_done, error)
                return cancellable

        gfile = Gio.File.new_for_path(str(path))
        gfile.append_to_async(
            Gio.FileCreateFlags.NONE,
            GLib.PRIORITY_DEFAULT,
            cancellable,
            self._on_append_ready,
            on_done,
        )
        return cancellable

    @staticmethod
    def _check_fifo(path: Path):
        try:
            mode = os.stat(path).st_mode
        except OSError as e:
            return e
        if not stat.S_ISFIFO(mode):
            return OSError(f"{path} is not a named pipe")
        return None

    @staticmethod
    def _report_failure(cancellable, on_done: OpenCallback, error: Exception) -> bool:
        if cancellable.is_cancelled():
            return GLib.SOURCE_REMOVE
        on_done(None, error)
        return GLib.SOURCE_REMOVE

    @staticmethod
    def _on_append_ready(gfile, result, on_done: OpenCallback) -> None:
        try:
            stream = gfile.append_to_finish(result)
        except GLib.Error as e:
            on_done(None, e)
            return
        on_done(GioPipeStream(stream), None)
