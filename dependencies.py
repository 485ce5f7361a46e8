"""
FastAPI dependency providers.

All injectable dependencies are defined here as plain functions used with
FastAPI's Depends() system. Services are built once in the app lifespan and
read back from app.state.
"""

from __future__ import annotations

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Header, Request

from config import AppSettings
from errors import AuthenticationError
from services.analytics_service import AnalyticsService
from services.context import Caller, RequestContext
from services.url_service import UrlService

ADMIN_ROLE = "admin"


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


def get_url_service(request: Request) -> UrlService:
    return request.app.state.url_service


def get_analytics_service(request: Request) -> AnalyticsService:
    return request.app.state.analytics_service


def get_request_context(request: Request) -> RequestContext:
    return RequestContext.from_request(request)


def get_caller(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Caller:
    """Build the Caller from the identity headers set by the auth gateway.

    ``X-User-Id`` must be a 24-character ObjectId hex string; ``X-User-Role:
    admin`` lifts the owner filter.
    """
    if not x_user_id:
        raise AuthenticationError("Missing X-User-Id header")
    try:
        user_id = ObjectId(x_user_id)
    except (InvalidId, TypeError):
        raise AuthenticationError("Invalid X-User-Id header", field="X-User-Id")
    is_admin = (x_user_role or "").strip().lower() == ADMIN_ROLE
    return Caller(user_id=user_id, is_admin=is_admin)
