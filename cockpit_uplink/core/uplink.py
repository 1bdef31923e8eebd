#!/usr/bin/env python3

"""
Uplink for Cockpit-Uplink
Main orchestrator that wires settings, telemetry decoding, the query
bridge and upload agents around an injected outbound transport.

Part of the Cockpit-Uplink project.
"""

import logging
import time
from typing import Any, Callable, Dict, Iterable, Optional

from cockpit_uplink.builders.query_builder import QueryBuilder
from cockpit_uplink.builders.upload_agent import UploadAgent
from cockpit_uplink.core.settings import Settings
from cockpit_uplink.io.query_bridge import QueryBridge
from cockpit_uplink.parsers.telemetry_parser import TelemetryPacket, TelemetryParser

logger = logging.getLogger('uplink')

Sender = Callable[[str], bool]


class Uplink:
    """
    Main orchestrator for Cockpit-Uplink.

    Coordinates:
    - TelemetryParser: Decodes packets handed over by the external receiver
    - QueryBridge: Turns query streams plus telemetry into blocking calls
    - UploadAgent: Composes and sends configuration uploads

    The transport is not owned here. The caller supplies sender, and its
    receiver calls handle_telemetry_data() for every inbound packet.
    """
    def __init__(self, sender: Sender, settings_file: Optional[str] = None,
                 apply_logging: bool = True):
        """
        Initialize the uplink.

        Args:
            sender: Outbound transport, takes a framed stream and returns
                    True if it was delivered
            settings_file: Path to settings file (optional)
            apply_logging: Configure the logging system from settings
        """
        self.sender = sender
        self.settings = Settings(settings_file)

        if apply_logging:
            self.settings.apply_logging_settings()

        self.telemetry_parser = TelemetryParser()
        self.query_bridge = QueryBridge(
            sender,
            timeout=self.settings.get('query', 'timeout'),
            log_streams=self.settings.get('builder', 'log_streams')
        )

        self.running = True
        self.startup_time = time.time()
        self.error_count = 0
        self.uploads_sent = 0

    @property
    def strict_actions(self) -> bool:
        return bool(self.settings.get('builder', 'strict_actions'))

    def handle_telemetry_data(self, data: str) -> Optional[TelemetryPacket]:
        """
        Process one inbound telemetry packet. Called on the receiver thread.

        Args:
            data: Raw telemetry packet

        Returns:
            TelemetryPacket or None: The decoded packet
        """
        packet = self.telemetry_parser.parse_packet(data)
        if packet is None:
            if data:
                self.error_count += 1
            return None

        self.query_bridge.handle_telemetry(packet)
        return packet

    def query(self, fn: str, args: Optional[Iterable[Any]] = None,
              timeout: Optional[float] = None) -> Optional[str]:
        """
        Run a single remote query.

        Returns:
            str or None: The response, None on timeout, send failure or stop
        """
        return self.query_bridge.query(fn, args, timeout)

    def run_query(self, builder: QueryBuilder, timeout: Optional[float] = None) -> Optional[str]:
        """
        Submit a query builder's stream through this uplink's bridge.
        With builder.strict_actions set, an unknown action raises before
        anything is sent.

        Args:
            builder: Query builder (built on demand if empty)
            timeout: Seconds to wait

        Returns:
            str or None: The response

        Raises:
            UnknownActionError: In strict mode, for an unknown action name
        """
        builder.bridge = self.query_bridge
        strict = builder.strict
        builder.strict = strict or self.strict_actions
        try:
            return builder.query(timeout)
        finally:
            builder.strict = strict

    def upload(self, agent: UploadAgent) -> bool:
        """
        Run an upload agent.

        Args:
            agent: Agent for the active airframe

        Returns:
            bool: True if the upload stream was delivered

        Raises:
            UnknownActionError: In strict mode, for an unknown action name
        """
        if not self.running:
            logger.warning("Uplink is stopped, upload dropped")
            return False

        strict = agent.strict
        agent.strict = strict or self.strict_actions
        try:
            loaded = agent.load()
        finally:
            agent.strict = strict

        if loaded:
            self.uploads_sent += 1
            return True

        self.error_count += 1
        return False

    def stop(self) -> None:
        """Stop the uplink, abandoning any in-flight query."""
        if not self.running:
            logger.warning("Uplink is not running")
            return

        logger.info("Stopping Cockpit-Uplink...")
        self.running = False
        self.query_bridge.shutdown()
        logger.info("Uplink stopped")

    def get_status(self) -> Dict[str, Any]:
        """
        Get the status of the uplink and all components.

        Returns:
            dict: Status information
        """
        return {
            "running": self.running,
            "uptime": time.time() - self.startup_time if self.startup_time > 0 else 0,
            "error_count": self.error_count,
            "uploads_sent": self.uploads_sent,
            "telemetry": self.telemetry_parser.get_status(),
            "query": self.query_bridge.get_status(),
        }


# Example usage:
if __name__ == "__main__":
    def print_sender(payload: str) -> bool:
        print(f"-> {payload}")
        return True

    uplink = Uplink(print_sender)
    uplink.upload(UploadAgent(print_sender))
    print(uplink.query("QueryMarker", timeout=0.5))
    uplink.stop()
    print(uplink.get_status())
