"""
Short link management for the calling user.

POST   /api/v1/shorten       — create a short link
GET    /api/v1/urls          — the caller's links, newest first (admins see all)
GET    /api/v1/urls/{code}   — one link, whatever its state
DELETE /api/v1/urls/{code}   — delete a link and its recorded clicks

Links the caller neither owns nor administers answer 404, like missing codes.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from config import AppSettings
from dependencies import get_caller, get_settings, get_url_service
from schemas.dto.requests.stats import PageQuery
from schemas.dto.requests.url import ShortenRequest
from schemas.dto.responses.common import ErrorResponse, PageResponse
from schemas.dto.responses.url import UrlResponse
from services.context import Caller
from services.url_service import UrlService

router = APIRouter(
    prefix="/api/v1",
    tags=["urls"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
    },
)


@router.post(
    "/shorten",
    status_code=201,
    response_model=UrlResponse,
    responses={409: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def shorten_url(
    body: ShortenRequest,
    caller: Caller = Depends(get_caller),
    url_service: UrlService = Depends(get_url_service),
    settings: AppSettings = Depends(get_settings),
) -> UrlResponse:
    doc = await url_service.shorten(
        body.long_url,
        caller.user_id,
        custom_code=body.code,
        expiration_days=body.expiration_days,
        title=body.title,
    )
    return UrlResponse.from_doc(doc, settings.shortener.base_url)


@router.get("/urls", response_model=PageResponse[UrlResponse])
async def list_urls(
    query: Annotated[PageQuery, Query()],
    caller: Caller = Depends(get_caller),
    url_service: UrlService = Depends(get_url_service),
    settings: AppSettings = Depends(get_settings),
) -> PageResponse[UrlResponse]:
    page = await url_service.list_links(caller, query.page, query.size)
    base_url = settings.shortener.base_url
    return PageResponse[UrlResponse].build(
        [UrlResponse.from_doc(doc, base_url) for doc in page.items],
        page.page,
        page.page_size,
        page.total,
    )


@router.get(
    "/urls/{code}",
    response_model=UrlResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_url(
    code: str,
    caller: Caller = Depends(get_caller),
    url_service: UrlService = Depends(get_url_service),
    settings: AppSettings = Depends(get_settings),
) -> UrlResponse:
    doc = await url_service.get_link(code, caller)
    return UrlResponse.from_doc(doc, settings.shortener.base_url)


@router.delete(
    "/urls/{code}",
    status_code=204,
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def delete_url(
    code: str,
    caller: Caller = Depends(get_caller),
    url_service: UrlService = Depends(get_url_service),
) -> Response:
    await url_service.delete(code, caller)
    return Response(status_code=204)
