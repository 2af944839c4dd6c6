"""Shanghai Metals Market (SMM) lithium page scraper.

SMM renders most of its prices with JavaScript, so the static HTML only
sometimes carries the carbonate table. The scraper therefore layers what it
finds over a fallback snapshot: when the page has a 99.5% carbonate USD
price, that price replaces the fallback's; otherwise the fallback is served
unchanged and a warning is logged.
"""

import re
from dataclasses import replace
from decimal import Decimal, InvalidOperation

import httpx
from bs4 import BeautifulSoup

from lithium_prices.config import SourceSettings
from lithium_prices.logging import get_logger
from lithium_prices.models import Snapshot
from lithium_prices.sources.base import SnapshotSource

logger = get_logger(__name__)

# Carbonate trades well above this in USD/t; smaller numbers in the row are grades or changes
MIN_CARBONATE_PRICE_USD = Decimal("10000")

_LEADING_NUMBER = re.compile(r"^\d+(?:\.\d+)?")


def _parse_price_cell(text: str) -> Decimal | None:
    match = _LEADING_NUMBER.match(text.replace(",", "").replace("$", "").strip())
    if match is None:
        return None
    try:
        return Decimal(match.group(0))
    except InvalidOperation:
        return None


def parse_carbonate_price(html: str) -> Decimal | None:
    """Find the 99.5% lithium carbonate USD price in the page's tables."""
    soup = BeautifulSoup(html, "html.parser")
    for row in soup.find_all("tr"):
        text = row.get_text(" ", strip=True).lower()
        if "lithium carbonate" not in text or "99.5" not in text:
            continue
        for cell in row.find_all("td"):
            value = _parse_price_cell(cell.get_text(strip=True))
            if value is not None and value > MIN_CARBONATE_PRICE_USD:
                return value
    return None


class SmmSnapshotSource(SnapshotSource):
    """Overlay the scraped carbonate price on another source's snapshot."""

    def __init__(
        self,
        settings: SourceSettings,
        fallback: SnapshotSource,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings
        self._fallback = fallback
        self._client = client
        self._headers = {
            "User-Agent": settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        }

    async def fetch(self) -> Snapshot:
        base = await self._fallback.fetch()
        url = self._settings.smm_url

        try:
            html = await self._fetch_page()
        except httpx.HTTPError as e:
            logger.warning("smm_fetch_failed", url=url, error=str(e))
            return base

        price = parse_carbonate_price(html)
        if price is None:
            logger.warning("smm_price_not_found", url=url)
            return base

        logger.info(
            "smm_carbonate_price",
            price=str(price),
            previous=str(base.carbonate.price),
        )
        return replace(base, carbonate=replace(base.carbonate, price=price))

    async def _fetch_page(self) -> str:
        if self._client is not None:
            return await self._get(self._client)
        async with httpx.AsyncClient(
            timeout=self._settings.request_timeout_seconds,
            follow_redirects=True,
        ) as client:
            return await self._get(client)

    async def _get(self, client: httpx.AsyncClient) -> str:
        response = await client.get(self._settings.smm_url, headers=self._headers)
        response.raise_for_status()
        return response.text
