"""
Gate Module - Black Box Interface

Purpose: Decide whether registration is open and whether a token grants access
Interface: AccessGate.status(), AccessGate.validate_token(), cutoff_for_event()
Hidden: Cutoff rule, time zone handling
"""

from .gate import AccessGate, AccessStatus, cutoff_for_event

__all__ = ["AccessGate", "AccessStatus", "cutoff_for_event"]
