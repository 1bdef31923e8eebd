#!/usr/bin/env python3

"""
Upload Agent for Cockpit-Uplink
Composes a complete upload stream (setup, per-system translators,
teardown) and hands it to the outbound transport.

Part of the Cockpit-Uplink project.
"""

import logging
from typing import Any, Callable, Dict

from cockpit_uplink import constants
from cockpit_uplink.builders.builder import BuildContext, CommandBuilder
from cockpit_uplink.commands import InstructionStream

logger = logging.getLogger('upload_agent')

Sender = Callable[[str], bool]


class CoreSetupBuilder(CommandBuilder):
    """Leading commands of every upload: a no-op breadcrumb and the start marker"""

    def build(self, context: BuildContext = None) -> None:
        self.add_exec_function(constants.NOP_FUNCTION, [f"==== {type(self).__name__}:build()"])
        self.add_marker(constants.UPLOAD_START_MARKER)


class CoreTeardownBuilder(CommandBuilder):
    """Trailing commands of every upload: clear the marker"""

    def build(self, context: BuildContext = None) -> None:
        self.add_marker(constants.UPLOAD_END_MARKER)


class UploadAgent:
    """
    Base class for airframe upload agents.

    Subclasses override build_systems() to add the per-system translators
    with builder.add_build(). The composed stream is sent in one piece.
    """
    def __init__(self, sender: Sender, log_streams: bool = False, strict: bool = False):
        """
        Initialize the upload agent.

        Args:
            sender: Outbound transport, takes a framed stream and returns
                    True if it was delivered
            log_streams: Log the outgoing stream at DEBUG level
            strict: Raise on unknown action names in any translator
        """
        self.sender = sender
        self.log_streams = log_streams
        self.strict = strict

        # Statistics
        self.uploads_sent = 0
        self.upload_failures = 0

    def setup_builder(self) -> CommandBuilder:
        return CoreSetupBuilder()

    def teardown_builder(self) -> CommandBuilder:
        return CoreTeardownBuilder()

    def build_systems(self, builder: CommandBuilder, context: BuildContext = None) -> None:
        """
        Add the system translators for this airframe. The base agent adds
        nothing.

        Args:
            builder: Builder receiving the composed stream
            context: State passed through to each translator
        """

    def build_stream(self, context: BuildContext = None) -> InstructionStream:
        """
        Compose setup, systems and teardown into one stream.

        Returns:
            InstructionStream: The composed stream
        """
        builder = CommandBuilder(strict=self.strict)
        builder.add_build(self.setup_builder(), context)
        self.build_systems(builder, context)
        builder.add_build(self.teardown_builder(), context)
        return builder.stream

    def load(self, context: BuildContext = None) -> bool:
        """
        Build the upload stream and send it.

        Returns:
            bool: True if the stream was delivered (or there was nothing to send)
        """
        stream = self.build_stream(context)
        if len(stream) == 0:
            logger.info("Upload stream is empty, nothing to send")
            return True

        payload = stream.to_wire()
        if self.log_streams:
            logger.debug(f"Upload stream ({len(stream)} commands): {payload}")

        try:
            sent = bool(self.sender(payload))
        except OSError as e:
            logger.error(f"Transport error sending upload: {e}")
            sent = False

        if sent:
            self.uploads_sent += 1
            logger.info(f"Upload sent: {len(stream)} commands, {len(payload)} chars")
        else:
            self.upload_failures += 1
            logger.error("Upload failed to send")
        return sent

    def get_status(self) -> Dict[str, Any]:
        return {
            "uploads_sent": self.uploads_sent,
            "upload_failures": self.upload_failures,
        }
