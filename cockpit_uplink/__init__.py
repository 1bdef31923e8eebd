#!/usr/bin/env python3

"""
Cockpit-Uplink
Compiles cockpit configuration into instruction streams for a remote
in-simulator command interpreter, and answers synchronous queries over
the asynchronous telemetry feed.

Main components:
- Devices: Named catalogs of clickable cockpit actions per airframe
- Builders: Instruction stream DSL with If/While blocks, keystroke synthesis,
  query and upload composition
- IO: Query bridge between the outbound sender and inbound telemetry
- Parsers: Telemetry packet decoding
- Core: Settings, logging and the uplink orchestrator
"""

from cockpit_uplink.commands import InstructionStream
from cockpit_uplink.devices import Action, Device, DeviceRegistry
from cockpit_uplink.builders import CommandBuilder, QueryBuilder, UploadAgent
from cockpit_uplink.io import QueryBridge
from cockpit_uplink.parsers import TelemetryParser, TelemetryPacket
from cockpit_uplink.core import Settings, Uplink

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    'InstructionStream',
    'Action', 'Device', 'DeviceRegistry',
    'CommandBuilder', 'QueryBuilder', 'UploadAgent',
    'QueryBridge',
    'TelemetryParser', 'TelemetryPacket',
    'Settings', 'Uplink'
]
