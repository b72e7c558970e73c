"""Application lifespan: startup and shutdown.

Single place for startup/shutdown wiring: document client, shared HTTP
client, identity provider, storage backend and telemetry. No business
logic here.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from portal.core.config import get_settings
from portal.infrastructure.external.storage import StorageFactory
from portal.infrastructure.firebase import close_database, init_database
from portal.infrastructure.identity import IdentityProviderFactory

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup order: document client, shared HTTP client, identity provider,
    storage, telemetry (if enabled). Shutdown runs in reverse.
    """
    settings = get_settings()

    # ---- Startup ----
    if not init_database(settings):
        logger.error("Document database is not available; requests will fail with 503")

    # Shared HTTP client for identity provider calls (connection reuse).
    app.state.http_client = httpx.AsyncClient(
        timeout=settings.identity_provider_timeout_seconds
    )
    app.state.identity_provider = IdentityProviderFactory.create_identity_provider(
        settings, http_client=app.state.http_client
    )
    app.state.storage = StorageFactory.create_storage_service(settings)
    logger.info(
        "Identity provider %s and storage backend %s ready",
        settings.identity_provider,
        settings.storage_backend,
    )

    if settings.telemetry_enabled:
        from portal.shared.telemetry.telemetry import TelemetryConfig, set_telemetry

        telemetry = TelemetryConfig(
            service_name=settings.app_name,
            service_version=settings.app_version,
            enabled=True,
            environment=settings.telemetry_environment,
        )
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        set_telemetry(telemetry)
        telemetry.instrument_fastapi(app)
        logger.info("Telemetry initialized")

    yield

    # ---- Shutdown ----
    from portal.shared.telemetry.telemetry import get_telemetry

    telemetry_instance = get_telemetry()
    if telemetry_instance is not None:
        telemetry_instance.shutdown()
        logger.info("Telemetry shutdown complete")

    if getattr(app.state, "identity_provider", None) is not None:
        await app.state.identity_provider.aclose()
        app.state.identity_provider = None

    if getattr(app.state, "http_client", None) is not None:
        await app.state.http_client.aclose()
        app.state.http_client = None
        logger.info("Shared HTTP client closed")

    await close_database()
