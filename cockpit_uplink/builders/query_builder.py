#!/usr/bin/env python3

"""
Query Builder for Cockpit-Uplink
A command builder whose stream ends in exactly one query, plus the
plumbing to submit that stream through a QueryBridge.

Part of the Cockpit-Uplink project.
"""

import logging
from typing import Any, Iterable, Optional

from cockpit_uplink.builders.builder import BuildContext, CommandBuilder
from cockpit_uplink.devices.registry import DeviceRegistry
from cockpit_uplink.io.query_bridge import QueryBridge

logger = logging.getLogger('query_builder')


class QueryBuilder(CommandBuilder):
    """
    Builds a stream that runs some setup (e.g. selecting a display page)
    and finishes with a single query.

    The default build() emits only the query given to the constructor.
    Subclasses override build() to add actions ahead of the query.
    """
    def __init__(self,
                 registry: Optional[DeviceRegistry] = None,
                 fn: Optional[str] = None,
                 args: Optional[Iterable[Any]] = None,
                 bridge: Optional[QueryBridge] = None,
                 strict: bool = False):
        """
        Initialize the query builder.

        Args:
            registry: Device registry for the airframe
            fn: Query function the default build() emits
            args: Arguments for fn
            bridge: Bridge used by query()
            strict: Raise on unknown action names
        """
        super().__init__(registry, strict)
        self.fn = fn
        self.args = list(args) if args else []
        self.bridge = bridge

    def build(self, context: BuildContext = None) -> None:
        if not self.fn:
            raise ValueError(f"{type(self).__name__} has no query function to build")
        self.add_query(self.fn, self.args)

    def query(self, timeout: Optional[float] = None) -> Optional[str]:
        """
        Submit the current stream and wait for the answer. Builds first if
        the stream is empty. Call clear_commands() before building the next
        query with the same builder.

        Args:
            timeout: Seconds to wait (defaults to the bridge timeout)

        Returns:
            str or None: The response, None on timeout or transport failure
        """
        if self.bridge is None:
            raise ValueError(f"{type(self).__name__} has no query bridge")
        if len(self.stream) == 0:
            self.build()
        logger.debug(f"{type(self).__name__} submitting {len(self.stream)} commands")
        return self.bridge.query_stream(self.stream, timeout)
