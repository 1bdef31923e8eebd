#!/usr/bin/env python3

"""
Errors for Cockpit-Uplink
Exception hierarchy shared by the device model, builders and bridge.

Part of the Cockpit-Uplink project.
"""

from typing import Iterable


class UplinkError(Exception):
    """Base class for all Cockpit-Uplink errors"""


class UnknownActionError(UplinkError, KeyError):
    """Raised in strict mode when a device has no action with the given name"""

    def __init__(self, device: str, names: Iterable[str]):
        self.device = device
        self.names = list(names)
        super().__init__(f"Device {device} has no action(s): {', '.join(self.names)}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownDeviceError(UplinkError, KeyError):
    """Raised when a registry has no device with the given name"""

    def __init__(self, airframe: str, name: str):
        self.airframe = airframe
        self.name = name
        super().__init__(f"Airframe {airframe} has no device {name}")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateActionError(UplinkError, ValueError):
    """Raised when an action name is added twice to a device"""


class DuplicateDeviceError(UplinkError, ValueError):
    """Raised when a device name is added twice to a registry"""


class DeviceSealedError(UplinkError):
    """Raised when modifying a device that already belongs to a registry"""


class BlockNestingError(UplinkError, ValueError):
    """Raised when a block reuses the condition name of a block that is still open"""


class QueryStreamError(UplinkError, ValueError):
    """Raised when a stream does not carry exactly one query"""


class QueryInFlightError(UplinkError):
    """Raised when a query is issued while another one awaits its response"""
