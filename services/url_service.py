"""
Short-link lifecycle: create a link, resolve a redirect, and let owners view,
list and delete their links.

Redirect eligibility, first failure wins:
1. no link for the code          → NotFoundError
2. link deactivated              → LinkUnavailableError(reason="deactivated")
3. ``expires_at`` in the past    → LinkUnavailableError(reason="expired")
4. otherwise record the click, bump the counter, return the destination.

Management calls by a caller who neither owns the link nor is an
administrator get the same NotFoundError as for a missing code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from bson import ObjectId

from errors import (
    DuplicateCodeError,
    LinkUnavailableError,
    NotFoundError,
    ValidationError,
)
from repositories.protocol import ClickStore, LinkStore
from schemas.dto.responses.common import PageResponse
from schemas.models.url import CODE_TYPE_CUSTOM, CODE_TYPE_GENERATED, ShortLinkDoc
from services.click_recorder import ClickRecorder
from services.code_generator import CodeGenerator
from services.context import Caller, RequestContext
from shared.datetime_utils import days_from_now, utcnow
from shared.logging import get_logger, should_sample
from shared.validators import validate_alias, validate_url

log = get_logger(__name__)

# Path segments served by other routes; a link under one of these could never
# be reached through GET /{code}.
RESERVED_CODES = frozenset({"health", "docs", "api", "openapi.json"})


class UrlService:
    def __init__(
        self,
        links: LinkStore,
        clicks: ClickStore,
        recorder: ClickRecorder,
        generator: CodeGenerator,
        *,
        blocked_self_domains: Sequence[str] = (),
        reserved_codes: Iterable[str] = RESERVED_CODES,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._links = links
        self._clicks = clicks
        self._recorder = recorder
        self._generator = generator
        self._blocked_self_domains = tuple(blocked_self_domains)
        self._reserved_codes = frozenset(code.lower() for code in reserved_codes)
        self._clock = clock

    async def shorten(
        self,
        destination: str,
        owner_id: ObjectId,
        custom_code: Optional[str] = None,
        expiration_days: Optional[int] = None,
        title: Optional[str] = None,
    ) -> ShortLinkDoc:
        """Create a link for *destination*.

        A custom code that is already taken raises DuplicateCodeError. A
        generated code that loses an insert race is regenerated once.
        """
        if not validate_url(destination, self._blocked_self_domains):
            raise ValidationError("Invalid destination URL", field="long_url")
        if custom_code is not None and not validate_alias(custom_code):
            raise ValidationError(
                "Code may only contain letters, digits, '-' and '_' (max 50)",
                field="code",
            )
        if custom_code is not None and custom_code.lower() in self._reserved_codes:
            raise ValidationError(f"Code is reserved: {custom_code}", field="code")
        if expiration_days is not None and expiration_days <= 0:
            raise ValidationError("expiration_days must be positive", field="expiration_days")

        now = self._clock()

        def build(code: str, code_type: str) -> ShortLinkDoc:
            return ShortLinkDoc(
                alias=code,
                long_url=destination,
                owner_id=owner_id,
                title=title or destination,
                created_at=now,
                expires_at=days_from_now(expiration_days, now) if expiration_days else None,
                code_type=code_type,
            )

        if custom_code is not None:
            if await self._links.alias_exists(custom_code):
                raise DuplicateCodeError(
                    f"Code already exists: {custom_code}", field="code"
                )
            saved = await self._links.insert(build(custom_code, CODE_TYPE_CUSTOM))
        else:
            saved = await self._insert_generated(build)

        log.info(
            "link_created",
            short_code=saved.alias,
            code_type=saved.code_type,
            owner_id=str(owner_id),
            expires_at=saved.expires_at.isoformat() if saved.expires_at else None,
        )
        return saved

    async def _is_taken(self, code: str) -> bool:
        if code.lower() in self._reserved_codes:
            return True
        return await self._links.alias_exists(code)

    async def _insert_generated(
        self, build: Callable[[str, str], ShortLinkDoc]
    ) -> ShortLinkDoc:
        code = await self._generator.generate_unique(self._is_taken)
        try:
            return await self._links.insert(build(code, CODE_TYPE_GENERATED))
        except DuplicateCodeError:
            # Lost a race between the existence check and the insert
            log.warning("generated_code_race", short_code=code)
            code = await self._generator.generate_unique(self._is_taken)
            return await self._links.insert(build(code, CODE_TYPE_GENERATED))

    async def resolve(self, code: str) -> ShortLinkDoc:
        """Return the link for *code* if it may be followed right now."""
        link = await self._links.find_by_alias(code)
        if link is None:
            raise NotFoundError(f"Short URL not found: {code}")
        if not link.is_active:
            raise LinkUnavailableError(
                "This URL has been deactivated", reason="deactivated", short_code=code
            )
        if link.is_expired(self._clock()):
            raise LinkUnavailableError(
                "This URL has expired", reason="expired", short_code=code
            )
        return link

    async def redirect(self, code: str, context: RequestContext) -> str:
        """Resolve *code*, record the click and return the destination URL."""
        try:
            link = await self.resolve(code)
        except NotFoundError as e:
            if should_sample("url_redirect"):
                log.info(
                    "redirect_refused",
                    short_code=code,
                    reason=getattr(e, "reason", "not_found"),
                )
            raise

        await self._recorder.record(link, context)
        return link.long_url

    # ── Link management ──────────────────────────────────────────────────────

    async def _owned_link(self, code: str, caller: Caller) -> ShortLinkDoc:
        link = await self._links.find_by_alias(code)
        if link is None or not caller.can_view(link.owner_id):
            raise NotFoundError(f"Short URL not found: {code}")
        return link

    async def get_link(self, code: str, caller: Caller) -> ShortLinkDoc:
        """Return the link for *code* whatever its state; owners and admins only."""
        return await self._owned_link(code, caller)

    async def list_links(
        self, caller: Caller, page: int, size: int
    ) -> PageResponse[ShortLinkDoc]:
        """Newest-first page of the caller's links (every link for admins)."""
        scope = caller.owner_scope
        docs = await self._links.find_page(scope, (page - 1) * size, size)
        total = await self._links.count(scope)
        return PageResponse[ShortLinkDoc].build(docs, page, size, total)

    async def delete(self, code: str, caller: Caller) -> None:
        """Delete the link for *code* and every click recorded against it."""
        link = await self._owned_link(code, caller)
        if not await self._links.delete_by_alias(link.alias):
            raise NotFoundError(f"Short URL not found: {code}")
        removed = await self._clicks.delete_by_url(link.id)
        log.info(
            "link_deleted",
            short_code=link.alias,
            owner_id=str(link.owner_id),
            deleted_by=str(caller.user_id),
            clicks_deleted=removed,
        )
