"""
Authentication Module - Black Box Interface

Purpose: Verify the registration password and manage access tokens
Interface: AuthFactory.build(), AuthenticationService.authenticate(), TokenBackend
Hidden: Token storage, hashing, remote store protocol

The local and remote token backends are interchangeable; the choice is
made once at startup from configuration.
"""

from .factory import AuthFactory
from .interfaces import IssuedToken, PasswordVerifier, TokenBackend
from .local import LocalTokenBackend
from .remote import RemoteTokenBackend
from .service import AuthenticationService

__all__ = [
    "AuthFactory",
    "AuthenticationService",
    "IssuedToken",
    "LocalTokenBackend",
    "PasswordVerifier",
    "RemoteTokenBackend",
    "TokenBackend",
]
