"""
Short link redirector.

GET /{code} — 302 to the destination and one recorded click, or the HTML
"link unavailable" page. Missing, deactivated and expired links all render
the same 404 page.
"""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from dependencies import get_request_context, get_url_service
from errors import NotFoundError
from services.context import RequestContext
from services.url_service import UrlService

router = APIRouter(tags=["redirect"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


@router.get("/{code}", include_in_schema=False)
async def redirect_url(
    code: str,
    request: Request,
    context: RequestContext = Depends(get_request_context),
    url_service: UrlService = Depends(get_url_service),
):
    try:
        destination = await url_service.redirect(unquote(code), context)
    except NotFoundError:
        return templates.TemplateResponse(
            request,
            "error.html",
            {
                "error_code": "404",
                "error_message": "LINK UNAVAILABLE",
                "host_url": str(request.base_url),
            },
            status_code=404,
        )
    return RedirectResponse(destination, status_code=302)
