#!/usr/bin/env python3

"""
Package initialization for cockpit_uplink.devices
Airframe device model: actions, devices and per-airframe registries.

Part of the Cockpit-Uplink project.
"""

from cockpit_uplink.devices.action import Action
from cockpit_uplink.devices.device import Device
from cockpit_uplink.devices.registry import DeviceRegistry

__all__ = ['Action', 'Device', 'DeviceRegistry']
