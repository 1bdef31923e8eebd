#!/usr/bin/env python3

"""
Device Registry for Cockpit-Uplink
Per-airframe lookup of cockpit devices by name.

Part of the Cockpit-Uplink project.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from cockpit_uplink.devices.device import Device
from cockpit_uplink.errors import DuplicateDeviceError, UnknownDeviceError

logger = logging.getLogger('registry')


class DeviceRegistry:
    """
    The set of devices for one airframe.

    Registries are populated during construction, either by passing the
    devices in or from a subclass __init__ through add_device(), and are
    read-only afterwards. Registering a device seals it.
    """
    def __init__(self, airframe: str, devices: Optional[Iterable[Device]] = None):
        """
        Initialize the registry.

        Args:
            airframe: Airframe the devices belong to
            devices: Devices to register (optional)
        """
        self.airframe = airframe
        self._devices: Dict[str, Device] = {}

        for device in devices or ():
            self.add_device(device)

    def add_device(self, device: Device) -> Device:
        """
        Register a device and seal it.

        Args:
            device: Device to add

        Returns:
            Device: The registered device
        """
        if device.name in self._devices:
            raise DuplicateDeviceError(f"Airframe {self.airframe} already has a device named {device.name}")

        device.seal()
        self._devices[device.name] = device
        logger.debug(f"Registered device {device.name} ({len(device)} actions) for {self.airframe}")
        return device

    def get_device(self, name: str) -> Device:
        """
        Get a device by name.

        Raises:
            UnknownDeviceError: If the airframe has no such device
        """
        try:
            return self._devices[name]
        except KeyError:
            raise UnknownDeviceError(self.airframe, name) from None

    @property
    def device_names(self) -> List[str]:
        return list(self._devices)

    def __contains__(self, name: str) -> bool:
        return name in self._devices

    def __iter__(self) -> Iterator[Device]:
        return iter(self._devices.values())

    def __len__(self) -> int:
        return len(self._devices)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], strict: bool = False) -> "DeviceRegistry":
        """
        Build a registry from plain data, e.g. a decoded JSON catalog.

        Expected layout:
            {"airframe": "F-16C",
             "devices": [{"name": "UFC", "id": 17,
                          "actions": [{"name": "ENTR", "code": 3016,
                                       "delay": 50, "dn": 1, "up": 0}]}]}

        Args:
            data: Catalog dictionary
            strict: Create strict devices (unknown actions raise)

        Returns:
            DeviceRegistry: The populated registry
        """
        registry = cls(str(data.get('airframe', '')))
        for dev_data in data.get('devices', []):
            device = Device(int(dev_data['id']), str(dev_data['name']), strict=strict)
            for act_data in dev_data.get('actions', []):
                device.add_action(
                    code=int(act_data['code']),
                    name=str(act_data['name']),
                    delay=int(act_data.get('delay', 0)),
                    value_dn=act_data.get('dn', 1),
                    value_up=act_data.get('up', 0),
                )
            registry.add_device(device)

        logger.info(f"Loaded {len(registry)} devices for airframe {registry.airframe}")
        return registry
