"""
Error taxonomy for Eventgate.

The API layer maps each error type to one HTTP status. Messages of
UpstreamError and PersistenceError are for server logs only.
"""


class EventgateError(Exception):
    """Base class for all Eventgate errors."""


class ValidationError(EventgateError):
    """Malformed input: bad JSON, unknown fields, or invariant violations."""


class AuthError(EventgateError):
    """Wrong or missing credential."""

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message)


class PersistenceError(EventgateError):
    """The event configuration could not be written."""


class UpstreamError(EventgateError):
    """The remote store was unreachable or answered with something unusable."""
