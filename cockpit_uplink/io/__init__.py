#!/usr/bin/env python3

"""
Package initialization for cockpit_uplink.io
Module for exchanging command streams and query responses with the simulation.

Part of the Cockpit-Uplink project.
"""

from cockpit_uplink.io.query_bridge import QueryBridge, BridgeState

__all__ = ['QueryBridge', 'BridgeState']
