"""
RetailClient: runs one domain operation for one identity snapshot.

Read operations go through the configured MarkupSource (live browser or
snapshot files) and then through the pure extractors. Cart-mutating
operations always drive a live page.
"""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import quote_plus

from automation.cart_actions import run_add_to_cart_flow, run_clear_cart_loop
from automation.extraction import (
    AddToCartResult,
    CartContent,
    ClearCartResult,
    OrderHistoryEntry,
    ProductDetail,
    ProductSummary,
    extract_cart_content,
    extract_orders_history,
    extract_product_details,
    extract_search_results,
)
from automation.images import fetch_image_base64_async
from automation.navigation import build_url
from automation.sources import LiveMarkupSource, MarkupRequest, MarkupSource, build_markup_source
from profiles.session import SessionSnapshot
from shared.config import AppConfig
from shared.errors import InvalidInputError
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)

ASIN_PATTERN = re.compile(r"^[A-Za-z0-9]{10}$")


def validate_asin(asin: str) -> str:
    value = (asin or "").strip()
    if not ASIN_PATTERN.match(value):
        raise InvalidInputError(
            "Invalid ASIN provided. ASIN should be a 10-character alphanumeric string."
        )
    return value


class RetailClient:
    def __init__(
        self,
        config: AppConfig,
        session: SessionSnapshot,
        source: Optional[MarkupSource] = None,
        live_source: Optional[LiveMarkupSource] = None,
    ) -> None:
        self.config = config
        self.session = session
        self.source = source or build_markup_source(config, session.cookies, session.domain)
        self.live_source = live_source or LiveMarkupSource(session.cookies, session.domain, config)

    @property
    def base_url(self) -> str:
        return build_url(self.session.domain, "")

    def _bind(self, operation: str, **extra) -> None:
        bind_request_context(
            profile=self.session.profile,
            operation=operation,
            domain=self.session.domain,
            **extra,
        )

    async def search_products(self, term: str) -> list[ProductSummary]:
        term = (term or "").strip()
        if not term:
            raise InvalidInputError("Search term must not be empty.")
        self._bind("searchProducts", mock=not self.source.is_live)

        request = MarkupRequest.for_operation(
            "searchProducts", requires_login=False, term=quote_plus(term)
        )
        html = await self.source.fetch(request)
        return extract_search_results(html, base_url=self.base_url)

    async def get_product_details(self, asin: str) -> ProductDetail:
        asin = validate_asin(asin)
        self._bind("getProductDetails", asin=asin, mock=not self.source.is_live)

        request = MarkupRequest.for_operation("getProductDetails", requires_login=False, asin=asin)
        html = await self.source.fetch(request)
        detail = extract_product_details(html, asin)

        if self.source.is_live and self.config.include_product_image and detail.main_image_url:
            detail.main_image_base64 = await fetch_image_base64_async(detail.main_image_url)
        return detail

    async def get_cart_content(self) -> CartContent:
        self._bind("getCartContent", mock=not self.source.is_live)
        html = await self.source.fetch(MarkupRequest.for_operation("getCartContent"))
        return extract_cart_content(html)

    async def get_orders_history(self) -> list[OrderHistoryEntry]:
        self._bind("getOrdersHistory", mock=not self.source.is_live)
        html = await self.source.fetch(MarkupRequest.for_operation("getOrdersHistory"))
        return extract_orders_history(html)

    async def add_to_cart(self, asin: str) -> AddToCartResult:
        asin = validate_asin(asin)
        self._bind("addToCart", asin=asin)
        logger.info("add_to_cart_requested", asin=asin)

        request = MarkupRequest.for_operation("addToCart", asin=asin)
        async with self.live_source.open_page(request) as page:
            return await run_add_to_cart_flow(
                page, asin, confirm_timeout_ms=self.config.add_to_cart_confirm_timeout_ms
            )

    async def clear_cart(self) -> ClearCartResult:
        self._bind("clearCart")
        logger.info("clear_cart_requested")

        async with self.live_source.open_page(MarkupRequest.for_operation("clearCart")) as page:
            return await run_clear_cart_loop(page)
