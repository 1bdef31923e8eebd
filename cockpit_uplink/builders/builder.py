#!/usr/bin/env python3

"""
Command Builder for Cockpit-Uplink
The instruction stream DSL every translator implements.

A builder appends commands to a private InstructionStream. Structured
If/While blocks are represented as a flat sequence of open/close commands
matched by condition name, because the remote interpreter is a one-pass
executor. Only the block helpers emit those commands, so a stream is
well-formed by construction.

Part of the Cockpit-Uplink project.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from cockpit_uplink import constants
from cockpit_uplink.builders import keystrokes
from cockpit_uplink.commands import (
    AbortCommand, ActionCommand, Command, EndIfCommand, EndWhileCommand, ExecCommand,
    IfCommand, InstructionStream, MarkerCommand, QueryCommand, WaitCommand, WhileCommand
)
from cockpit_uplink.devices.device import Device
from cockpit_uplink.devices.registry import DeviceRegistry
from cockpit_uplink.errors import BlockNestingError, QueryStreamError

logger = logging.getLogger('builder')

BlockBody = Callable[[], None]
BuildContext = Optional[Dict[str, Any]]


class CommandBuilder:
    """
    Base class for command stream builders.

    Derived classes implement build() to translate some piece of
    configuration into commands using the add_* helpers. Larger translators
    are assembled from single-responsibility builders with add_build().

    The builder is synchronous: every add_* call appends and returns
    immediately on the calling thread.
    """

    # Named waits (ms) reflecting remote timing, not measured latency
    WAIT_NONE = constants.WAIT_NONE
    WAIT_SHORT = constants.WAIT_SHORT
    WAIT_BASE = constants.WAIT_BASE
    WAIT_LONG = constants.WAIT_LONG
    WAIT_VERY_LONG = constants.WAIT_VERY_LONG

    def __init__(self, registry: Optional[DeviceRegistry] = None, strict: bool = False):
        """
        Initialize the builder.

        Args:
            registry: Device registry for the airframe (optional for builders
                      that only emit markers, waits or queries)
            strict: Raise on unknown action names instead of skipping them
        """
        self.registry = registry
        self.strict = strict

        self._stream = InstructionStream()
        self._open_conditions: List[str] = []

    # -------------------------------------------------------------------------
    # translator contract
    # -------------------------------------------------------------------------

    def build(self, context: BuildContext = None) -> None:
        """
        Append the commands for this builder to its stream.

        Args:
            context: Caller-supplied state, e.g. which display shows which page
        """
        raise NotImplementedError(f"{type(self).__name__} must implement build()")

    # -------------------------------------------------------------------------
    # stream access
    # -------------------------------------------------------------------------

    @property
    def stream(self) -> InstructionStream:
        return self._stream

    @property
    def commands(self) -> Tuple[Command, ...]:
        return self._stream.commands

    def clear_commands(self) -> None:
        """Empty the stream so the builder can be reused, e.g. between queries."""
        self._stream.clear()

    def get_device(self, name: str) -> Device:
        if self.registry is None:
            raise ValueError(f"{type(self).__name__} has no device registry")
        return self.registry.get_device(name)

    def __str__(self) -> str:
        return str(self._stream)

    def __len__(self) -> int:
        return len(self._stream)

    # -------------------------------------------------------------------------
    # primitive commands
    # -------------------------------------------------------------------------

    def _append(self, command: Command) -> None:
        self._stream.append(command)

    def _action_command(self, device: Device, name: str, wait: int) -> Optional[ActionCommand]:
        if self.strict:
            device.require(name)
        return device.action_command(name, wait)

    def add_action(self, device: Device, name: str, wait: int = WAIT_NONE) -> None:
        """
        Add an action, followed by an optional wait.

        Args:
            device: Device that owns the action
            name: Action name (unknown names are logged and skipped)
            wait: Milliseconds to wait after the action
        """
        command = self._action_command(device, name, wait)
        if command is not None:
            self._append(command)

    def add_dynamic_action(self, device: Device, name: str,
                           value_dn: Optional[float] = None,
                           value_up: Optional[float] = None,
                           delay: int = 0,
                           wait: int = WAIT_NONE) -> None:
        """Add a re-parameterized action, see Action.customize()."""
        if self.strict:
            device.require(name)
        command = device.customized_action_command(name, delay, value_dn, value_up, wait)
        if command is not None:
            self._append(command)

    def add_actions(self, device: Device, names: Optional[Iterable[str]],
                    post_names: Optional[Iterable[str]] = None,
                    wait: int = WAIT_NONE) -> None:
        """
        Add a sequence of actions on one device. post_names are always added
        after names, even when names is empty. The wait trails the last
        action added.
        """
        pending: List[ActionCommand] = []
        for name in list(names or []) + list(post_names or []):
            command = self._action_command(device, name, 0)
            if command is not None:
                pending.append(command)

        if not pending:
            self.add_wait(wait)
            return
        if wait > 0:
            pending[-1] = pending[-1].with_post_wait(wait)
        self._stream.extend(pending)

    def add_repeated_action(self, device: Device, name: str, count: int, wait: int = WAIT_NONE) -> None:
        """Add the same action count times; nothing is added if count < 1."""
        if count < 1:
            return
        self.add_actions(device, [name] * count, None, wait)

    def add_wait(self, delay: int) -> None:
        if delay > 0:
            self._append(WaitCommand(delay))

    def add_marker(self, mark: str) -> None:
        self._append(MarkerCommand(mark))

    def add_abort(self, message: str) -> None:
        self._append(AbortCommand(message))

    def add_error_abort(self, message: str) -> None:
        """Abort with a message the remote interpreter surfaces to the user."""
        self.add_abort(f"{constants.ERROR_PREFIX}{message}")

    def add_exec_function(self, fn: str, args: Optional[Iterable[Any]] = None, wait: int = WAIT_NONE) -> None:
        self._append(ExecCommand(fn, args, max(0, wait)))

    def add_query(self, fn: str, args: Optional[Iterable[Any]] = None) -> None:
        """
        Add the query for this stream. A stream carries at most one query
        since responses have no correlation id.
        """
        if self._stream.query_count:
            raise QueryStreamError(f"Stream already holds a query, cannot add {fn}")
        self._append(QueryCommand(fn, args))

    # -------------------------------------------------------------------------
    # structured blocks
    # -------------------------------------------------------------------------

    def _add_block(self, opener: Command, closer: Command, condition: str, body: BlockBody) -> None:
        if condition in self._open_conditions:
            raise BlockNestingError(f"Condition {condition} is already open in an enclosing block")

        start = len(self._stream)
        self._append(opener)
        self._open_conditions.append(condition)
        try:
            body()
        except Exception:
            self._stream.truncate(start)
            raise
        finally:
            self._open_conditions.pop()
        self._append(closer)

    def add_if_block(self, condition: str, expected: bool,
                     args: Optional[Iterable[Any]], body: BlockBody) -> None:
        """
        Add a block that runs remotely only when condition == expected.

        Args:
            condition: Name of the remote predicate
            expected: Value the predicate must have
            args: Predicate arguments
            body: Callable that adds the block contents to this builder
        """
        self._add_block(IfCommand(condition, expected, args), EndIfCommand(condition), condition, body)

    def add_while_block(self, condition: str, expected: bool,
                        args: Optional[Iterable[Any]], body: BlockBody,
                        timeout: int = 0) -> None:
        """
        Add a block the remote interpreter repeats while condition == expected.

        Args:
            condition: Name of the remote predicate
            expected: Value the predicate must have to keep looping
            args: Predicate arguments
            body: Callable that adds the loop contents to this builder
            timeout: Maximum iterations before the remote aborts with an
                     error (0 for no limit)
        """
        self._add_block(WhileCommand(condition, expected, max(0, timeout), args),
                        EndWhileCommand(condition), condition, body)

    # -------------------------------------------------------------------------
    # composition
    # -------------------------------------------------------------------------

    def add_build(self, builder: "CommandBuilder", context: BuildContext = None) -> None:
        """
        Run another builder and splice its commands into this stream.

        The sub-builder's stream is cleared first, so a builder instance can
        be spliced more than once. It runs with this builder's open block
        conditions and strictness in effect.

        Args:
            builder: Sub-builder to run
            context: State passed to the sub-builder's build()
        """
        builder.clear_commands()
        saved = (builder._open_conditions, builder.strict)
        builder._open_conditions = list(self._open_conditions)
        builder.strict = builder.strict or self.strict
        try:
            builder.build(context)
        finally:
            builder._open_conditions, builder.strict = saved
        if self._stream.query_count + builder.stream.query_count > 1:
            raise QueryStreamError(f"{type(builder).__name__} would add a second query to the stream")
        self._stream.extend(builder.commands)
        logger.debug(f"Added {len(builder)} commands from {type(builder).__name__}")

    # -------------------------------------------------------------------------
    # keystroke helpers
    # -------------------------------------------------------------------------

    def add_string(self, device: Device, value: Optional[str], wait: int = WAIT_NONE) -> None:
        self.add_actions(device, keystrokes.string_to_actions(value), None, wait)

    def add_coordinate(self, device: Device, coord: Optional[str], wait: int = WAIT_NONE) -> None:
        self.add_actions(device, keystrokes.coordinate_to_actions(coord), None, wait)

    def add_value_entry(self, device: Device, value: Optional[str],
                        enter: Optional[str] = constants.DEFAULT_ENTER_KEY,
                        negative_ok: bool = False,
                        clean: bool = False,
                        wait: int = WAIT_NONE) -> bool:
        """
        Type a numeric value followed by the enter key, predicated on the
        value being non-empty.

        Args:
            device: Keypad device
            value: Value to enter
            enter: Action that commits the entry (None to skip)
            negative_ok: Whether the keypad takes a sign entry
            clean: Strip leading zeros before typing
            wait: Milliseconds to wait after the entry

        Returns:
            bool: True if anything was added
        """
        if not value:
            return False

        if clean:
            names = keystrokes.clean_numeric_to_actions(value, negative_ok)
        else:
            names = keystrokes.numeric_to_actions(value, negative_ok)
        self.add_actions(device, names, [enter] if enter else None, wait)
        return True
