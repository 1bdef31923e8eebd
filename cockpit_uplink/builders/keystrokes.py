#!/usr/bin/env python3

"""
Keystroke synthesis for Cockpit-Uplink
Pure functions that turn numbers, strings and coordinates into the
ordered action names a keypad device must press to enter them.

All synthesizers return an empty list for empty input so callers can tell
"nothing to enter" apart from "enter zero".

Part of the Cockpit-Uplink project.
"""

from typing import List, Optional

from cockpit_uplink import constants


def remove_separators(value: str) -> str:
    """Strip the separators that appear in formatted values (, . ° ’ ” " ' :)"""
    for sep in constants.SEPARATOR_CHARS:
        value = value.replace(sep, "")
    return value


def delete_leading_zeros(value: str) -> str:
    """Strip leading zeros; an all-zero value collapses to "0"."""
    return value.lstrip("0") or "0"


def string_to_actions(value: Optional[str]) -> List[str]:
    """
    One action name per character.

    Args:
        value: Text to type, e.g. "AB12"

    Returns:
        list: Action names, e.g. ["A", "B", "1", "2"]
    """
    if not value:
        return []
    return list(value)


def numeric_to_actions(value: Optional[str], negative_ok: bool = False,
                       sign_key: str = constants.DEFAULT_SIGN_KEY) -> List[str]:
    """
    Action names that enter a numeric value with separators removed.

    Keypads that allow negative values enter the sign by pressing the sign
    key twice before the digits. When negatives are not allowed the value
    is expanded verbatim and the caller owns the result.

    Args:
        value: Numeric string, e.g. "-1,250"
        negative_ok: Whether the keypad accepts a sign entry
        sign_key: Action name pressed twice to enter the sign

    Returns:
        list: Action names
    """
    if not value:
        return []

    digits = remove_separators(value)
    actions: List[str] = []
    if negative_ok and digits.startswith("-"):
        actions.extend([sign_key, sign_key])
        digits = digits[1:]
    actions.extend(string_to_actions(digits))
    return actions


def clean_numeric_to_actions(value: Optional[str], negative_ok: bool = False,
                             sign_key: str = constants.DEFAULT_SIGN_KEY) -> List[str]:
    """Like numeric_to_actions() but with leading zeros of the magnitude removed first."""
    if not value:
        return []

    digits = remove_separators(value)
    sign = "-" if digits.startswith("-") else ""
    magnitude = delete_leading_zeros(digits[len(sign):])
    return numeric_to_actions(sign + magnitude, negative_ok, sign_key)


def coordinate_to_actions(value: Optional[str]) -> List[str]:
    """
    Action names that enter a lat/lon coordinate on keypads using the
    2/8/6/4 keys for N/S/E/W.

    Args:
        value: Coordinate such as "N 41° 06.123’"

    Returns:
        list: Action names, e.g. ["2", "4", "1", "0", "6", "1", "2", "3"]
    """
    if not value:
        return []

    coord = remove_separators(value.replace(" ", "")).upper()
    return [constants.COORDINATE_KEYS.get(c, c) for c in coord]


def clicks_for_wraparound(current: int, desired: int, num_options: int) -> int:
    """
    Number of forward clicks to move a wrap-around selector from current
    to desired.

    Args:
        current: Current selector position
        desired: Target selector position
        num_options: Number of positions on the selector

    Returns:
        int: Clicks in [0, num_options)
    """
    if num_options < 1:
        raise ValueError(f"num_options must be positive, got {num_options}")

    clicks = desired - current
    if clicks < 0:
        clicks += num_options
    return clicks % num_options
