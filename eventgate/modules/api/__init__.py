"""
API Module - Black Box Interface

Purpose: HTTP data models and static frontend routing
Interface: Pydantic models, create_static_router()
Hidden: JSON key naming, field validation rules

The API module only describes data - it contains no business logic.
"""

from .models import (
    DEFAULT_EVENT_CONFIG,
    AccessStatusResponse,
    AuthRequest,
    AuthResponse,
    EventConfig,
    Fee,
)
from .static import create_static_router

__all__ = [
    "DEFAULT_EVENT_CONFIG",
    "AccessStatusResponse",
    "AuthRequest",
    "AuthResponse",
    "EventConfig",
    "Fee",
    "create_static_router",
]
