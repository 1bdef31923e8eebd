#!/usr/bin/env python3

"""
Package initialization for cockpit_uplink.parsers
Module for decoding data streamed back from the simulation.

Part of the Cockpit-Uplink project.
"""

from cockpit_uplink.parsers.telemetry_parser import TelemetryParser, TelemetryPacket

__all__ = ['TelemetryParser', 'TelemetryPacket']
