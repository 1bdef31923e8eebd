#!/usr/bin/env python3

"""
Telemetry Parser for Cockpit-Uplink
Decodes the JSON telemetry packets the simulation export streams back,
including the Response field that answers queries.

Part of the Cockpit-Uplink project.
"""

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cockpit_uplink import constants

logger = logging.getLogger('telemetry_parser')


@dataclass
class TelemetryPacket:
    """One telemetry packet from the simulation export"""
    timestamp: float                    # System time when received
    model: Optional[str] = None         # Active airframe
    marker: Optional[str] = None        # Last marker reached in the command stream
    latitude: Optional[str] = None      # Position, decimal degrees
    longitude: Optional[str] = None
    elevation: Optional[str] = None     # Meters
    upload: Optional[str] = None        # Cockpit control: upload configuration
    increment: Optional[str] = None     # Cockpit control: increment
    decrement: Optional[str] = None     # Cockpit control: decrement
    show: Optional[str] = None          # Cockpit control: raise application window
    hide: Optional[str] = None          # Cockpit control: lower application window
    toggle: Optional[str] = None        # Cockpit control: toggle application window
    response: Optional[str] = None      # Answer to the outstanding query

    @property
    def has_response(self) -> bool:
        return bool(self.response)


# Wire field name -> TelemetryPacket attribute
_FIELD_MAP = {
    'Model': 'model',
    'Marker': 'marker',
    'Latitude': 'latitude',
    'Longitude': 'longitude',
    'Elevation': 'elevation',
    'Upload': 'upload',
    'Increment': 'increment',
    'Decrement': 'decrement',
    'Show': 'show',
    'Hide': 'hide',
    'Toggle': 'toggle',
    'Response': 'response',
}


class TelemetryParser:
    """
    Parser for telemetry packets in JSON format
    """
    def __init__(self):
        self.last_packet: Optional[TelemetryPacket] = None
        self.last_marker: Optional[str] = None

        # Statistics
        self.packets_parsed = 0
        self.error_count = 0
        self.last_data_time = 0.0

    def _validate_packet_length(self, raw: str) -> bool:
        if len(raw) > constants.MAX_TELEMETRY_LENGTH:
            logger.warning(f"Telemetry packet too long: {len(raw)} chars (max: {constants.MAX_TELEMETRY_LENGTH})")
            return False
        return True

    def parse_packet(self, raw: Optional[str]) -> Optional[TelemetryPacket]:
        """
        Parse one telemetry packet.

        Args:
            raw: Packet text as received

        Returns:
            TelemetryPacket or None: None for empty, oversized or malformed packets
        """
        if not raw:
            return None

        if not self._validate_packet_length(raw):
            self.error_count += 1
            return None

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Malformed telemetry packet: {e}")
            self.error_count += 1
            return None

        if not isinstance(data, dict):
            logger.warning(f"Telemetry packet is not an object: {type(data).__name__}")
            self.error_count += 1
            return None

        packet = self._packet_from_dict(data, time.time())

        self.last_packet = packet
        if packet.marker:
            self.last_marker = packet.marker
        self.packets_parsed += 1
        self.last_data_time = packet.timestamp
        return packet

    @staticmethod
    def _packet_from_dict(data: Dict[str, Any], timestamp: float) -> TelemetryPacket:
        values = {}
        for key, attr in _FIELD_MAP.items():
            value = data.get(key)
            values[attr] = None if value is None else str(value)
        return TelemetryPacket(timestamp=timestamp, **values)

    def is_data_fresh(self) -> bool:
        """
        Check if a packet arrived within the last 5 seconds
        """
        return (time.time() - self.last_data_time) < 5.0

    def get_status(self) -> Dict[str, Any]:
        return {
            "packets_parsed": self.packets_parsed,
            "error_count": self.error_count,
            "fresh": self.is_data_fresh(),
            "model": self.last_packet.model if self.last_packet else None,
            "last_marker": self.last_marker,
        }
