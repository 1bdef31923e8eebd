#!/usr/bin/env python3

"""
Package initialization for cockpit_uplink.builders
Instruction stream DSL, keystroke synthesis, query and upload composition.

Part of the Cockpit-Uplink project.
"""

from cockpit_uplink.builders.builder import CommandBuilder
from cockpit_uplink.builders.query_builder import QueryBuilder
from cockpit_uplink.builders.upload_agent import CoreSetupBuilder, CoreTeardownBuilder, UploadAgent

__all__ = ['CommandBuilder', 'QueryBuilder', 'UploadAgent', 'CoreSetupBuilder', 'CoreTeardownBuilder']
