"""
Event Module - Black Box Interface

Purpose: Hold and persist the event configuration record
Interface: EventConfigStore.load_or_init(), get(), replace()
Hidden: File format, atomic writes, reader/writer locking

Replaceable with any other persistence for a single record.
"""

from .store import EventConfigStore

__all__ = ["EventConfigStore"]
