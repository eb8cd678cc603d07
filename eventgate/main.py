#!/usr/bin/env python3
"""
Eventgate - Main Entry Point

This is the thin orchestration layer that:
1. Loads configuration
2. Builds the application context (event store, auth stack, access gate)
3. Exposes the HTTP API

All business logic is in the modules, following black box principles.
"""

import json
import logging
import secrets
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx
from fastapi import Depends, FastAPI, Header, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from eventgate import __version__
from eventgate.config.provider import APIConfig, AuthConfig, ConfigProvider, EnvConfigProvider
from eventgate.errors import AuthError, PersistenceError, UpstreamError, ValidationError
from eventgate.modules.api import (
    AccessStatusResponse,
    AuthRequest,
    AuthResponse,
    create_static_router,
)
from eventgate.modules.auth import AuthenticationService, AuthFactory
from eventgate.modules.clock import format_rfc3339
from eventgate.modules.event import EventConfigStore
from eventgate.modules.gate import AccessGate

logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "X-Admin-Token"
ACCESS_TOKEN_HEADER = "X-Access-Token"


@dataclass
class AppContext:
    """Everything a request handler may touch, built once at startup."""
    api_config: APIConfig
    auth_config: AuthConfig
    event_store: EventConfigStore
    auth_service: AuthenticationService
    gate: AccessGate
    http_client: Optional[httpx.AsyncClient] = None


def build_context(
    config_provider: ConfigProvider, http_client: Optional[httpx.AsyncClient]
) -> AppContext:
    """Load the event config and wire all modules together."""
    api_config = config_provider.get_api_config()
    auth_config = config_provider.get_auth_config()
    remote_config = config_provider.get_remote_store_config()
    storage_config = config_provider.get_storage_config()

    event_store = EventConfigStore(storage_config.config_file)
    event_store.load_or_init()

    auth_service = AuthFactory.build(auth_config, remote_config, http_client)
    gate = AccessGate(event_store, auth_service.backend)

    return AppContext(
        api_config=api_config,
        auth_config=auth_config,
        event_store=event_store,
        auth_service=auth_service,
        gate=gate,
        http_client=http_client,
    )


def create_app(
    config_provider: Optional[ConfigProvider] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        config_provider: Configuration source, environment by default
        http_client: Client for the remote store; created and closed by the app when None

    Returns:
        Configured FastAPI application
    """
    config_provider = config_provider or EnvConfigProvider()
    api_config = config_provider.get_api_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Manage application lifecycle - initialize and cleanup resources.
        """
        logger.info("Starting Eventgate API...")

        owned_client = None
        client = http_client
        if client is None:
            remote_config = config_provider.get_remote_store_config()
            owned_client = httpx.AsyncClient(timeout=remote_config.timeout_seconds)
            client = owned_client

        try:
            app.state.context = build_context(config_provider, client)
            logger.info(
                f"Eventgate API started (token backend: {app.state.context.auth_service.mode})"
            )
            yield
        finally:
            logger.info("Shutting down Eventgate API...")
            app.state.context = None
            if owned_client is not None:
                await owned_client.aclose()
            logger.info("Eventgate API shutdown complete")

    app = FastAPI(
        title="Eventgate API",
        description="Event configuration and registration access gate",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.context = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[api_config.cors_origin],
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", ADMIN_TOKEN_HEADER, ACCESS_TOKEN_HEADER],
    )

    _register_routes(app)
    _register_error_handlers(app)

    # Catch-all static route goes last so it never shadows the API
    if Path(api_config.static_dir).is_dir():
        app.include_router(create_static_router(api_config.static_dir))
        logger.info(f"Serving static frontend from {api_config.static_dir}")

    return app


# Dependency injection helpers


def get_context(request: Request) -> AppContext:
    """Return the application context or fail with 503 before startup."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise HTTPException(503, "Service not initialized")
    return context


async def verify_admin_token(
    x_admin_token: Optional[str] = Header(None, description="Admin credential"),
    context: AppContext = Depends(get_context),
) -> None:
    """Reject requests without the admin credential."""
    expected = context.auth_config.admin_token
    if not x_admin_token or not secrets.compare_digest(
        x_admin_token.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected config update with missing or wrong admin token")
        raise AuthError()


async def read_json_body(request: Request):
    """Decode a JSON request body, mapping failures to ValidationError."""
    raw = await request.body()
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ValidationError(f"invalid json: {e}") from e


def _register_routes(app: FastAPI) -> None:
    @app.get("/api/access-status", response_model=AccessStatusResponse)
    async def access_status(
        x_access_token: Optional[str] = Header(None, description="Candidate access token"),
        context: AppContext = Depends(get_context),
    ):
        """
        Report whether registration is open and whether the caller's token is valid.

        Returns:
            200: Access status
        """
        status = await context.gate.status()
        has_valid_token = await context.gate.validate_token(x_access_token)

        return AccessStatusResponse(
            is_registration_open=status.is_open,
            cutoff_at=format_rfc3339(status.cutoff_at) if status.cutoff_at else None,
            now=format_rfc3339(status.now),
            event_date=status.event_date,
            has_valid_token=has_valid_token,
        )

    @app.post("/api/auth", response_model=AuthResponse)
    async def authenticate(request: Request, context: AppContext = Depends(get_context)):
        """
        Exchange the registration password for an access token.

        Returns:
            200: Token issued
            400: Malformed body
            401: Unauthorized
        """
        data = await read_json_body(request)
        try:
            auth_request = AuthRequest.model_validate(data)
        except PydanticValidationError as e:
            raise ValidationError("invalid request body: password required") from e

        issued = await context.auth_service.authenticate(auth_request.password)
        return AuthResponse(
            access_token=issued.token,
            expires_at=format_rfc3339(issued.expires_at),
        )

    @app.get("/api/config")
    async def get_event_config(context: AppContext = Depends(get_context)):
        """
        Get the current event configuration.

        Returns:
            200: Event configuration
        """
        config = await context.event_store.get()
        return config.to_json_dict()

    @app.put("/api/config", dependencies=[Depends(verify_admin_token)])
    async def put_event_config(request: Request, context: AppContext = Depends(get_context)):
        """
        Replace the event configuration.

        Returns:
            200: Stored configuration
            400: Invalid JSON or validation failure
            401: Unauthorized
            500: Configuration could not be persisted
        """
        raw = await request.body()
        updated = EventConfigStore.parse(raw.decode("utf-8", errors="replace"))
        stored = await context.event_store.replace(updated)
        return stored.to_json_dict()

    # Health/Monitoring Endpoints

    @app.get("/healthz")
    async def healthz():
        """
        Minimal health check endpoint for readiness/liveness probes.

        Returns:
            200: Service is running
        """
        return {"status": "ok"}


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ValidationError)
    async def validation_error_handler(request, exc):
        """Handle validation errors."""
        logger.info(f"Validation error on {request.url.path}: {exc}")
        return JSONResponse(status_code=400, content={"error": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request, exc):
        """Handle FastAPI request validation errors as plain bad requests."""
        logger.info(f"Request validation error on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "invalid request"})

    @app.exception_handler(AuthError)
    async def auth_error_handler(request, exc):
        """Handle authentication errors uniformly."""
        return JSONResponse(status_code=401, content={"error": "unauthorized"})

    @app.exception_handler(PersistenceError)
    async def persistence_error_handler(request, exc):
        """Handle storage errors."""
        logger.error(f"Persistence error: {exc}")
        return JSONResponse(status_code=500, content={"error": "failed to persist config"})

    @app.exception_handler(UpstreamError)
    async def upstream_error_handler(request, exc):
        """Handle remote store errors without leaking detail."""
        logger.error(f"Remote store error: {exc}")
        return JSONResponse(status_code=500, content={"error": "internal error"})


app = create_app()
