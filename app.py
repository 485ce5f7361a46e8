"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient

from config import AppSettings
from errors import register_error_handlers
from infrastructure.geoip import build_geo_resolver
from infrastructure.http_client import HttpClient
from repositories import (
    CLICKS_COLLECTION,
    LINKS_COLLECTION,
    ClickRepository,
    UrlRepository,
    ensure_indexes,
)
from routes.analytics_routes import router as analytics_router
from routes.health_routes import router as health_router
from routes.redirect_routes import router as redirect_router
from routes.url_routes import router as url_router
from services.analytics_service import AnalyticsService
from services.click_recorder import ClickRecorder
from services.code_generator import CodeGenerator
from services.url_service import RESERVED_CODES, UrlService
from shared.datetime_utils import resolve_timezone
from shared.logging import SAMPLING_RATES, get_logger, setup_logging

log = get_logger(__name__)


def _configure_logging(settings: AppSettings) -> None:
    setup_logging(settings.logging.log_level, settings.logging.log_format)
    SAMPLING_RATES.update(
        {
            "url_redirect": settings.logging.sample_rate_redirect,
            "analytics_query": settings.logging.sample_rate_analytics,
            "geo_lookup": settings.logging.sample_rate_geo,
        }
    )


def _reserved_codes(settings: AppSettings) -> set[str]:
    reserved = set(RESERVED_CODES)
    if settings.docs_url:
        reserved.add(settings.docs_url.strip("/").split("/")[0])
    return reserved


def create_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Create and return a fully configured FastAPI application."""
    if settings is None:
        settings = AppSettings()

    _configure_logging(settings)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            profiles_sample_rate=settings.sentry.sentry_profile_sample_rate,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongodb_uri, tz_aware=True
        )
        db = mongo_client[settings.db.db_name]
        app.state.mongo_client = mongo_client
        app.state.db = db
        app.state.settings = settings

        await ensure_indexes(db)

        links = UrlRepository(db[LINKS_COLLECTION])
        clicks = ClickRepository(db[CLICKS_COLLECTION])

        http_client = HttpClient(timeout=settings.geo.geo_timeout_seconds)
        geo_resolver = build_geo_resolver(settings.geo, http_client)

        generator = CodeGenerator(
            length=settings.shortener.short_code_length,
            max_attempts=settings.shortener.max_code_attempts,
        )
        app.state.url_service = UrlService(
            links,
            clicks,
            ClickRecorder(links, clicks, geo_resolver),
            generator,
            blocked_self_domains=settings.shortener.blocked_self_domains,
            reserved_codes=_reserved_codes(settings),
        )
        app.state.analytics_service = AnalyticsService(
            links, clicks, tz=resolve_timezone(settings.dashboard_timezone)
        )

        log.info(
            "app_started",
            env=settings.env,
            db_name=settings.db.db_name,
            geo_provider=settings.geo.geo_provider,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        geo_resolver.close()
        await http_client.aclose()
        await mongo_client.close()
        log.info("app_stopped")

    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(url_router)
    app.include_router(analytics_router)
    # Catch-all /{code} goes last so it never shadows the routes above
    app.include_router(redirect_router)

    return app
