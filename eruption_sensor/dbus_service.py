"""
Eruption focus sensor D-Bus service - Exposes Enable/Disable/Reload/Status/Quit
over the session bus.
"""

import json
import logging
import traceback
from typing import Callable, Optional

from gi.repository import Gio, GLib

from eruption_sensor.application.sensor_service import SensorService

logger = logging.getLogger("EruptionSensor.DBus")

BUS_NAME = "org.eruption.FocusSensor"
OBJECT_PATH = "/org/eruption/FocusSensor"

DBUS_XML = """
<!DOCTYPE node PUBLIC "-//freedesktop//DTD D-BUS Object Introspection 1.0//EN"
"http://www.freedesktop.org/standards/dbus/1.0/introspect.dtd">
<node>
    <interface name="org.eruption.FocusSensor">
        <method name="Enable"/>
        <method name="Disable"/>
        <method name="Reload"/>
        <method name="Status">
            <arg type="s" name="status" direction="out"/>
        </method>
        <method name="Quit"/>
    </interface>
</node>
"""


class SensorDBusService:
    """DBus service exposing the sensor lifecycle over the session bus."""

    def __init__(
        self,
        service: SensorService,
        on_quit: Optional[Callable[[], None]] = None,
        on_reload: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize DBus service.

        Args:
            service: The sensor service to control
            on_quit: Called from the main loop when Quit is requested
            on_reload: Called for Reload instead of service.reload(), so
                the caller can re-read settings first
        """
        self.service = service
        self.on_quit = on_quit
        self.on_reload = on_reload
        self.connection = None
        self.registration_id = None
        self.bus_name_id = None

    def start(self) -> bool:
        """Register DBus service"""
        try:
            self.connection = Gio.bus_get_sync(Gio.BusType.SESSION, None)
            if not self.connection:
                logger.error("Failed to get DBus connection")
                return False

            node_info = Gio.DBusNodeInfo.new_for_xml(DBUS_XML)
            interface_info = node_info.interfaces[0]

            self.registration_id = self.connection.register_object(
                OBJECT_PATH,
                interface_info,
                self._handle_method_call,
                None,  # get_property
                None,  # set_property
            )
            logger.info("DBus object registered at %s", OBJECT_PATH)

            self.bus_name_id = Gio.bus_own_name_on_connection(
                self.connection,
                BUS_NAME,
                Gio.BusNameOwnerFlags.NONE,
                None,  # name_acquired_closure
                None,  # name_lost_closure
            )
            logger.info("Owned D-Bus name %s", BUS_NAME)
            return True

        except Exception as e:
            logger.error("Failed to register DBus service: %s", e)
            logger.debug(traceback.format_exc())
            return False

    def stop(self):
        """Unregister DBus service"""
        if self.connection and self.registration_id:
            self.connection.unregister_object(self.registration_id)
            self.registration_id = None
            logger.info("DBus service unregistered")
        if self.bus_name_id:
            Gio.bus_unown_name(self.bus_name_id)
            self.bus_name_id = None
            logger.info("DBus name unowned")

    def _handle_method_call(
        self,
        connection,
        sender,
        object_path,
        interface_name,
        method_name,
        parameters,
        invocation,
    ):
        """Handle incoming DBus method calls"""
        try:
            if method_name == "Enable":
                self.service.enable()
                invocation.return_value(None)

            elif method_name == "Disable":
                self.service.disable()
                invocation.return_value(None)

            elif method_name == "Reload":
                if self.on_reload:
                    self.on_reload()
                else:
                    self.service.reload()
                invocation.return_value(None)

            elif method_name == "Status":
                status = json.dumps(self.service.status())
                invocation.return_value(GLib.Variant("(s)", (status,)))

            elif method_name == "Quit":
                self._handle_quit(invocation)

            else:
                invocation.return_error_literal(
                    Gio.io_error_quark(),
                    Gio.IOErrorEnum.NOT_SUPPORTED,
                    f"Method {method_name} not supported",
                )

        except Exception as e:
            logger.error("Error handling DBus call %s: %s", method_name, e)
            invocation.return_error_literal(
                Gio.io_error_quark(),
                Gio.IOErrorEnum.FAILED,
                str(e),
            )

    def _handle_quit(self, invocation):
        """Handle Quit method - stop the sensor."""
        logger.info("DBus Quit called")
        invocation.return_value(None)

        if self.on_quit:
            GLib.idle_add(self._quit_idle)
        else:
            self.service.disable()

    def _quit_idle(self):
        self.on_quit()
        return GLib.SOURCE_REMOVE
