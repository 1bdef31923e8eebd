#!/usr/bin/env python3

"""
Constants for Cockpit-Uplink
Centralized timing values, wire-format tags and limits.

Part of the Cockpit-Uplink project.
"""

# =============================================================================
# WAIT CONSTANTS (milliseconds, remote interpreter timing)
# =============================================================================

WAIT_NONE = 0                       # No trailing wait
WAIT_SHORT = 100                    # Short settle time
WAIT_BASE = 200                     # Typical settle time after a button press
WAIT_LONG = 600                     # Page changes, mode switches
WAIT_VERY_LONG = 17000              # Alignment-class operations


# =============================================================================
# QUERY CONSTANTS (seconds)
# =============================================================================

QUERY_TIMEOUT = 2.0                 # Ceiling on waiting for a query response
QUERY_TIMEOUT_MIN = 0.05            # Smallest accepted timeout
QUERY_TIMEOUT_MAX = 30.0            # Largest accepted timeout


# =============================================================================
# WIRE FORMAT
# =============================================================================

STREAM_SEPARATOR = ","              # Separator between serialized commands
STREAM_OPEN = "["                   # Framing expected by the command server
STREAM_CLOSE = "]"
ERROR_PREFIX = "ERROR: "            # Abort messages surfaced to the user

TAG_ACTION = "Actn"
TAG_WAIT = "Wait"
TAG_MARKER = "Mark"
TAG_QUERY = "Query"
TAG_EXEC = "Exec"
TAG_ABORT = "Abort"
TAG_IF = "If"
TAG_END_IF = "EndIf"
TAG_WHILE = "While"
TAG_END_WHILE = "EndWhile"


# =============================================================================
# UPLOAD MARKERS
# =============================================================================

UPLOAD_START_MARKER = "<upload_prog>"
UPLOAD_END_MARKER = ""
NOP_FUNCTION = "NOP"


# =============================================================================
# KEYSTROKE SYNTHESIS
# =============================================================================

SEPARATOR_CHARS = (",", ".", "°", "’", "”", "\"", "'", ":")
DEFAULT_SIGN_KEY = "0"              # Pressed twice to enter a minus sign
DEFAULT_ENTER_KEY = "ENTR"
COORDINATE_KEYS = {                 # Keypad digits that enter hemispheres
    "N": "2",
    "S": "8",
    "E": "6",
    "W": "4",
}


# =============================================================================
# VALIDATION CONSTANTS - TELEMETRY
# =============================================================================

MAX_TELEMETRY_LENGTH = 8192         # Maximum telemetry packet length
