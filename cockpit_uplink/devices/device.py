#!/usr/bin/env python3

"""
Device for Cockpit-Uplink
Named, addressable group of clickable-cockpit actions.

Part of the Cockpit-Uplink project.
"""

import logging
from typing import Dict, Iterator, List, Optional

from cockpit_uplink.commands import ActionCommand
from cockpit_uplink.devices.action import Action, Number
from cockpit_uplink.errors import DeviceSealedError, DuplicateActionError, UnknownActionError

logger = logging.getLogger('device')


class Device:
    """
    A cockpit device (UFC, MFD, radio panel, ...) that owns a set of
    actions addressable by name.

    Unknown action names are authoring defects in a translator. By default
    they are logged and the lookup degrades to a no-op so a partially
    misconfigured translator still yields a best-effort stream. A strict
    device raises UnknownActionError instead.
    """
    def __init__(self, device_id: int, name: str, strict: bool = False):
        """
        Initialize the device.

        Args:
            device_id: Remote device id the actions are addressed to
            name: Device name, unique within its registry
            strict: Raise on unknown action names instead of logging
        """
        self.device_id = device_id
        self.name = name
        self.strict = strict

        self._actions: Dict[str, Action] = {}
        self._sealed = False

    def add_action(self, code: int, name: str, delay: int, value_dn: Number, value_up: Number = 0) -> Action:
        """
        Add an action to the device.

        Args:
            code: Clickable cockpit id of the control
            name: Action name, unique within this device
            delay: Milliseconds between "down" and "up"
            value_dn: Value on "down"
            value_up: Value on "up"

        Returns:
            Action: The new action
        """
        if self._sealed:
            raise DeviceSealedError(f"Device {self.name} is read-only once registered")
        if name in self._actions:
            raise DuplicateActionError(f"Device {self.name} already has an action named {name}")

        action = Action(name=name, code=code, delay=delay, value_dn=value_dn, value_up=value_up)
        self._actions[name] = action
        return action

    def seal(self) -> None:
        """Make the device read-only."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def action_names(self) -> List[str]:
        return list(self._actions)

    def get_action(self, name: str) -> Optional[Action]:
        return self._actions.get(name)

    def require(self, *names: str) -> None:
        """
        Validate action names up front, typically when a translator is
        constructed.

        Raises:
            UnknownActionError: Naming every action the device lacks
        """
        missing = [name for name in names if name not in self._actions]
        if missing:
            raise UnknownActionError(self.name, missing)

    def _lookup(self, name: str) -> Optional[Action]:
        action = self._actions.get(name)
        if action is None:
            if self.strict:
                raise UnknownActionError(self.name, [name])
            logger.error(f"Unknown action {name} on device {self.name}, skipping")
        return action

    def _command(self, action: Action, post_wait: int = 0) -> ActionCommand:
        return ActionCommand(
            device_id=self.device_id,
            code=action.code,
            value_dn=action.value_dn,
            value_up=action.value_up,
            delay=action.delay,
            post_wait=max(0, post_wait),
        )

    def action_command(self, name: str, post_wait: int = 0) -> Optional[ActionCommand]:
        """
        Build the command for a named action.

        Args:
            name: Action name
            post_wait: Milliseconds to wait after the action

        Returns:
            ActionCommand or None: None if the device has no such action
        """
        action = self._lookup(name)
        if action is None:
            return None
        return self._command(action, post_wait)

    def customized_action_command(self,
                                  name: str,
                                  delay: int = 0,
                                  value_dn: Optional[Number] = None,
                                  value_up: Optional[Number] = None,
                                  post_wait: int = 0) -> Optional[ActionCommand]:
        """
        Build the command for a named action with different parameters,
        see Action.customize().

        Returns:
            ActionCommand or None: None if the device has no such action
        """
        action = self._lookup(name)
        if action is None:
            return None
        return self._command(action.customize(delay, value_dn, value_up), post_wait)

    def __getitem__(self, name: str) -> str:
        """Serialized interaction for the named action, empty if unknown."""
        command = self.action_command(name)
        return command.serialize() if command else ""

    def __contains__(self, name: str) -> bool:
        return name in self._actions

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def __repr__(self) -> str:
        return f"Device(id={self.device_id}, name={self.name!r}, actions={len(self._actions)})"
