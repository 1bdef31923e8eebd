#!/usr/bin/env python3

"""
Package initialization for cockpit_uplink.core
Core components for the Cockpit-Uplink application.

Part of the Cockpit-Uplink project.
"""

from cockpit_uplink.core.settings import Settings
from cockpit_uplink.core.uplink import Uplink

__all__ = ['Settings', 'Uplink']
