#!/usr/bin/env python3

"""
Query Bridge for Cockpit-Uplink
Blocking "ask the simulation a question" primitive built on a one-way
command channel and an asynchronous telemetry feed.

A query stream goes out through the injected sender. The answer arrives
later as the Response field of some telemetry packet, decoded on the
receiver's own thread. Responses carry no correlation id, so the bridge
allows only one outstanding query and treats the first non-empty response
that arrives while it waits as the answer.

Part of the Cockpit-Uplink project.
"""

import asyncio
import logging
import threading
import time
from concurrent.futures import CancelledError, Future, TimeoutError as FutureTimeoutError
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Optional

from cockpit_uplink import constants
from cockpit_uplink.commands import InstructionStream, QueryCommand, stream_of
from cockpit_uplink.errors import QueryInFlightError, QueryStreamError
from cockpit_uplink.parsers.telemetry_parser import TelemetryPacket

logger = logging.getLogger('query_bridge')

Sender = Callable[[str], bool]


class BridgeState(Enum):
    IDLE = "idle"
    AWAITING_RESPONSE = "awaiting_response"


class QueryBridge:
    """
    Turns a query stream plus the inbound telemetry feed into a blocking
    call with a timeout.

    query() runs on the caller's thread; handle_response() runs on the
    telemetry receiver's thread and never blocks. The pending answer lives
    in a single-slot Future owned by this bridge instance.
    """
    def __init__(self,
                 sender: Sender,
                 timeout: float = constants.QUERY_TIMEOUT,
                 log_streams: bool = False):
        """
        Initialize the query bridge.

        Args:
            sender: Outbound transport, takes a framed stream and returns
                    True if it was delivered
            timeout: Default seconds to wait for a response
            log_streams: Log outgoing streams at DEBUG level
        """
        self.sender = sender
        self.timeout = timeout
        self.log_streams = log_streams

        self._lock = threading.Lock()
        self._pending: Optional[Future] = None
        self._closed = False

        # Statistics
        self.queries_sent = 0
        self.responses_received = 0
        self.timeouts = 0
        self.send_failures = 0
        self.stray_responses = 0
        self.last_response_time = 0.0

    @property
    def state(self) -> BridgeState:
        with self._lock:
            return BridgeState.AWAITING_RESPONSE if self._pending is not None else BridgeState.IDLE

    @property
    def is_closed(self) -> bool:
        return self._closed

    def query(self, fn: str, args: Optional[Iterable[Any]] = None,
              timeout: Optional[float] = None) -> Optional[str]:
        """
        Run a single query function remotely and wait for its answer.

        Args:
            fn: Remote query function name
            args: Positional string arguments
            timeout: Seconds to wait (defaults to the bridge timeout)

        Returns:
            str or None: The response, None on timeout, send failure or shutdown
        """
        return self.query_stream(stream_of([QueryCommand(fn, args)]), timeout)

    def query_stream(self, stream: InstructionStream, timeout: Optional[float] = None) -> Optional[str]:
        """
        Send a stream that carries exactly one query and wait for the answer.
        Commands ahead of the query (e.g. page changes) run remotely first.

        Args:
            stream: Stream to send
            timeout: Seconds to wait (defaults to the bridge timeout)

        Returns:
            str or None: The response, None on timeout, send failure or shutdown

        Raises:
            QueryStreamError: If the stream does not hold exactly one query
            QueryInFlightError: If another query is awaiting its response
        """
        if stream.query_count != 1:
            raise QueryStreamError(f"Query stream must hold exactly one query, found {stream.query_count}")

        future = self._reserve()
        if future is None:
            return None
        return self._complete(future, stream, self.timeout if timeout is None else timeout)

    def _reserve(self) -> Optional[Future]:
        future: Future = Future()
        with self._lock:
            if self._closed:
                logger.info("Query bridge is shut down, query dropped")
                return None
            if self._pending is not None:
                raise QueryInFlightError("Another query is awaiting its response")
            self._pending = future
        return future

    def _abandon(self, future: Future) -> None:
        """Release the slot held by future and wake its waiter."""
        with self._lock:
            if self._pending is future:
                self._pending = None
        if future.cancel():
            logger.info("Cancelled in-flight query")

    def _complete(self, future: Future, stream: InstructionStream, wait: float) -> Optional[str]:
        try:
            if not self._send(stream):
                self.send_failures += 1
                logger.error("Query failed to send, aborting")
                return None
            self.queries_sent += 1

            try:
                response = future.result(timeout=wait)
            except FutureTimeoutError:
                self.timeouts += 1
                logger.warning(f"Query response timed out after {wait:.2f}s")
                return None
            except CancelledError:
                logger.info("Query abandoned before a response arrived")
                return None

            self.responses_received += 1
            self.last_response_time = time.time()
            return response

        finally:
            with self._lock:
                if self._pending is future:
                    self._pending = None

    def _send(self, stream: InstructionStream) -> bool:
        payload = stream.to_wire()
        if self.log_streams:
            logger.debug(f"Query stream ({len(payload)} chars): {payload}")
        try:
            return bool(self.sender(payload))
        except OSError as e:
            logger.error(f"Transport error sending query: {e}")
            return False

    async def query_async(self, fn: str, args: Optional[Iterable[Any]] = None,
                          timeout: Optional[float] = None) -> Optional[str]:
        """
        Asynchronously run a query. For use with asyncio-based applications;
        the blocking wait runs in the default executor. Cancelling the
        awaiting task releases the query slot at once.

        Returns:
            str or None: The response, None on timeout, send failure or shutdown

        Raises:
            QueryInFlightError: If another query is awaiting its response
        """
        stream = stream_of([QueryCommand(fn, args)])
        future = self._reserve()
        if future is None:
            return None

        wait = self.timeout if timeout is None else timeout
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, self._complete, future, stream, wait)
        except asyncio.CancelledError:
            self._abandon(future)
            raise

    def handle_response(self, response: Optional[str]) -> bool:
        """
        Deliver a response from the telemetry feed. Safe to call from the
        receiver thread for every packet.

        Args:
            response: Response field of a telemetry packet

        Returns:
            bool: True if the response answered the outstanding query
        """
        if not response:
            return False

        with self._lock:
            future = self._pending
            if future is None or future.done():
                self.stray_responses += 1
                logger.debug(f"Ignoring response with no outstanding query: {response[:100]}")
                return False
            self._pending = None
            future.set_result(response)
        return True

    def handle_telemetry(self, packet: Optional[TelemetryPacket]) -> bool:
        """Forward the response carried by a decoded telemetry packet, if any."""
        if packet is None:
            return False
        return self.handle_response(packet.response)

    def shutdown(self) -> None:
        """Abandon any in-flight query and refuse new ones."""
        with self._lock:
            self._closed = True
            future = self._pending
        if future is not None:
            self._abandon(future)

    def reopen(self) -> None:
        """Accept queries again after shutdown()."""
        with self._lock:
            self._closed = False

    def get_status(self) -> Dict[str, Any]:
        """
        Get the current status of the query bridge.

        Returns:
            dict: Status information
        """
        now = time.time()
        return {
            "state": self.state.value,
            "closed": self._closed,
            "timeout": self.timeout,
            "queries_sent": self.queries_sent,
            "responses_received": self.responses_received,
            "timeouts": self.timeouts,
            "send_failures": self.send_failures,
            "stray_responses": self.stray_responses,
            "last_response_ago": now - self.last_response_time if self.last_response_time > 0 else None,
        }
