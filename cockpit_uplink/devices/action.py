#!/usr/bin/env python3

"""
Action for Cockpit-Uplink
Immutable descriptor of one discrete clickable-cockpit interaction.

Part of the Cockpit-Uplink project.
"""

from dataclasses import dataclass, replace
from typing import Optional, Union

Number = Union[int, float]


@dataclass(frozen=True)
class Action:
    """
    One physical interaction with a control: knob turn, button push,
    switch flip.

    The remote interpreter sets the control to value_dn, waits delay
    milliseconds, then sets it to value_up.
    """
    name: str               # Unique within the owning device
    code: int               # Clickable cockpit id of the control
    delay: int = 0          # Milliseconds between "down" and "up"
    value_dn: Number = 1    # Value on "down"
    value_up: Number = 0    # Value on "up"

    def customize(self,
                  delay: int = 0,
                  value_dn: Optional[Number] = None,
                  value_up: Optional[Number] = None) -> "Action":
        """
        Return a re-parameterized copy of this action.

        Args:
            delay: Replacement delay in ms (0 keeps the base delay)
            value_dn: Replacement "down" value (defaults to the base "up" value)
            value_up: Replacement "up" value (defaults to the base "down" value)

        Returns:
            Action: New action with the same name and code
        """
        return replace(
            self,
            delay=delay if delay != 0 else self.delay,
            value_dn=self.value_up if value_dn is None else value_dn,
            value_up=self.value_dn if value_up is None else value_up,
        )
