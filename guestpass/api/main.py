"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures routes and lifespan events, and builds the adapters
selected by settings.
"""

import logging
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from psycopg_pool import ConnectionPool

from guestpass.adapters.challenge import ChallengeImageRenderer, StoreChallengeVerifier
from guestpass.adapters.identity import DISPOSABLE_DOMAINS, DnsEmailVerifier, load_domains
from guestpass.adapters.smtp import ConsoleNotifier, SmtpNotifier
from guestpass.adapters.store import (
    MemoryCredentialStore,
    PostgresCredentialStore,
    RedisCredentialStore,
    run_migrations,
)
from guestpass.api.v1 import router as v1_router
from guestpass.config.settings import Settings, get_settings
from guestpass.domain.exceptions import StoreError
from guestpass.domain.ports import CredentialStore, Notifier

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Guest network access API v1 - Register, approve and receive Wi-Fi credentials",
    },
]


def open_store(settings: Settings) -> tuple[CredentialStore, Callable[[], None]]:
    """
    Create the configured credential store.

    Returns:
        (store, close) where close releases connections on shutdown
    """
    if settings.store_backend == "memory":
        logger.warning("Using in-memory credential store; state is lost on restart")
        return MemoryCredentialStore(), lambda: None

    if settings.store_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            timeout=settings.store_timeout_seconds,
            open=True,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        return PostgresCredentialStore(pool), pool.close

    logger.info("Connecting to Redis...")
    store = RedisCredentialStore.from_url(settings.redis_url, settings.store_timeout_seconds)
    return store, store.close


def build_notifier(settings: Settings) -> Notifier:
    if settings.notifier == "smtp":
        return SmtpNotifier(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.email_sender,
            admin_email=settings.email_admin,
            ssid=settings.ssid,
            username=settings.smtp_username,
            password=settings.smtp_password,
            starttls=settings.smtp_starttls,
            timeout_seconds=settings.smtp_timeout_seconds,
        )
    return ConsoleNotifier(admin_email=settings.email_admin)


def build_identity_verifier(settings: Settings) -> DnsEmailVerifier:
    disposable = DISPOSABLE_DOMAINS
    if settings.disposable_domains_path:
        disposable = disposable | load_domains(settings.disposable_domains_path)
    return DnsEmailVerifier(disposable_domains=disposable, timeout_seconds=settings.dns_timeout_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Opens the credential store (and runs migrations for Postgres)
    - Builds verifiers, notifier and registration policy
    - Closes store connections on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    store, close_store = open_store(settings)

    # Store adapters in app state for dependency injection
    app.state.store = store
    app.state.identity_verifier = build_identity_verifier(settings)
    app.state.challenge_verifier = StoreChallengeVerifier(
        store,
        ttl_seconds=settings.challenge_ttl_seconds,
        length=settings.challenge_length,
    )
    app.state.challenge_renderer = ChallengeImageRenderer(settings.captcha_width, settings.captcha_height)
    app.state.notifier = build_notifier(settings)
    app.state.password_policy = settings.password_policy()
    app.state.registration_config = settings.registration_config()

    logger.info("Application startup complete (store=%s, notifier=%s)", settings.store_backend,
                settings.notifier)

    yield

    # Shutdown
    logger.info("Shutting down application...")
    close_store()
    logger.info("Credential store closed")


app = FastAPI(
    title="guestpass",
    description="Guest network access API - Time-limited Wi-Fi credentials with optional approval",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

# Include v1 API routes
app.include_router(v1_router, prefix="/api/v1")


@app.get("/health")
def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with store validation.

    Returns 200 OK if application and credential store are healthy.
    """
    try:
        request.app.state.store.get("health:check")
    except StoreError:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Credential store unavailable",
        ) from None

    return {"status": "healthy"}
