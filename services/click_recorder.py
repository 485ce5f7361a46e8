"""Per-redirect click capture.

Builds one ClickDoc from the request context, persists it and bumps the
link's counter. Extraction and classification cannot fail; geo resolution
degrades to Unknown inside the resolver. Only the store writes may raise.
"""

from __future__ import annotations

from infrastructure.geoip import GeoResolver
from repositories.protocol import ClickStore, LinkStore
from schemas.models.click import ClickDoc, ClickMeta
from schemas.models.url import ShortLinkDoc
from services.context import RequestContext
from shared import user_agent as ua
from shared.ip_utils import extract_client_ip
from shared.logging import get_logger, hash_ip, should_sample

log = get_logger(__name__)


class ClickRecorder:
    def __init__(
        self, links: LinkStore, clicks: ClickStore, geo: GeoResolver
    ) -> None:
        self._links = links
        self._clicks = clicks
        self._geo = geo

    async def build_click(self, link: ShortLinkDoc, context: RequestContext) -> ClickDoc:
        ip_address = extract_client_ip(context.headers, context.remote_addr)
        location = await self._geo.resolve(ip_address)
        user_agent = context.user_agent

        return ClickDoc(
            clicked_at=context.received_at,
            meta=ClickMeta(
                url_id=link.id,
                short_code=link.alias,
                owner_id=link.owner_id,
            ),
            ip_address=ip_address,
            country=location.country,
            city=location.city,
            user_agent=user_agent,
            device_type=ua.device_type(user_agent),
            browser=ua.browser(user_agent),
            os=ua.operating_system(user_agent),
            referrer=context.referrer,
        )

    async def record(self, link: ShortLinkDoc, context: RequestContext) -> ClickDoc:
        """Persist one click for *link* and increment its counter.

        The event is written first; the counter is only bumped once the event
        exists, so a failed write leaves both untouched.
        """
        click = await self.build_click(link, context)
        saved = await self._clicks.insert(click)
        await self._links.increment_clicks(link.id, click.clicked_at)

        if should_sample("url_redirect"):
            log.info(
                "click_recorded",
                short_code=link.alias,
                ip_hash=hash_ip(click.ip_address),
                country=click.country,
                device_type=click.device_type,
                browser=click.browser,
            )
        return saved
