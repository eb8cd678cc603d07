"""
Eventgate - Event Registration Backend

Serves the event configuration and gates registration access.

Architecture:
- Each module is self-contained with clear interfaces
- State lives in one application context built at startup
- Token storage is swappable (local memory or remote REST store)

Modules:
- api: Request/response models and static file routing
- auth: Password verification and access token backends
- event: Event configuration persistence
- gate: Registration cutoff and token checks
"""

__version__ = "1.0.0"
