"""
Unit tests for markup sources and RetailClient operations.

Read operations run against snapshot files in tmp_path; live paths use
stubbed sources and pages, never a real browser.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import replace
from unittest.mock import AsyncMock, patch

import pytest
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from automation.client import RetailClient, validate_asin
from automation.constants import ADD_TO_CART_BUTTON_SELECTOR, ADD_TO_CART_CONFIRMATION_SELECTOR
from automation.sources import (
    LiveMarkupSource,
    MarkupRequest,
    SnapshotMarkupSource,
    build_markup_source,
)
from profiles.models import Cookie
from profiles.session import SessionSnapshot
from shared.config import AppConfig
from shared.errors import InvalidInputError, SnapshotNotFoundError

CART_SNAPSHOT = """
<div id="sc-active-cart">
  <div data-asin="B0F2255HFW">
    <a class="sc-product-title"><span class="a-truncate-full">Sparkling Water</span></a>
    <div class="apex-price-to-pay-value"><span class="a-offscreen">$18.99</span></div>
  </div>
</div>
"""
SEARCH_SNAPSHOT = """
<div data-component-type="s-search-result" data-asin="B07THHPGCV">
  <h2><span>USB Cable</span></h2>
  <span class="a-price"><span class="a-offscreen">$5.00</span></span>
</div>
"""
PRODUCT_SNAPSHOT = """
<span id="productTitle">USB Cable</span>
<img id="landingImage" src="https://img.example/usb.jpg">
"""
ORDERS_SNAPSHOT = """
<div class="order-card">
  <div class="yohtmlc-order-id"><span>Order #</span><span>111-2</span></div>
</div>
"""


def make_config(tmp_path, **overrides) -> AppConfig:
    config = AppConfig(
        environment="local",
        log_level="INFO",
        log_file=None,
        log_stdout=True,
        profiles_dir=str(tmp_path / "profiles"),
        legacy_cookies_path=str(tmp_path / "amazonCookies.json"),
        default_profile="personal",
        snapshots_dir=str(tmp_path / "mocks"),
        use_mocks=True,
        export_live_snapshots=False,
        browser_visible=False,
        browser_executable_path=None,
        default_domain="amazon.com",
        brand_token="amazon",
        nav_timeout_ms=30_000,
        marker_timeout_ms=10_000,
        add_to_cart_confirm_timeout_ms=15_000,
        include_product_image=True,
    )
    return replace(config, **overrides)


def make_session(domain: str = "amazon.co.uk") -> SessionSnapshot:
    return SessionSnapshot(
        profile="work",
        cookies=(Cookie(domain=f".{domain}", name="session-id", value="1"),),
        confirmed=True,
        domain=domain,
        domain_low_confidence=False,
    )


@pytest.fixture
def mocks_dir(tmp_path):
    directory = tmp_path / "mocks"
    directory.mkdir()
    (directory / "getCartContent.html").write_text(CART_SNAPSHOT)
    (directory / "searchProducts.html").write_text(SEARCH_SNAPSHOT)
    (directory / "getProductDetails.html").write_text(PRODUCT_SNAPSHOT)
    (directory / "getOrdersHistory_2025-01-01_00-00-00.html").write_text(ORDERS_SNAPSHOT)
    return directory


def test_markup_request_for_operation_fills_path():
    request = MarkupRequest.for_operation("getProductDetails", requires_login=False, asin="B0F2255HFW")

    assert request.path == "/-/en/gp/product/B0F2255HFW"
    assert request.marker == "#productTitle"
    assert request.requires_login is False


def test_build_markup_source_follows_use_mocks(tmp_path):
    assert isinstance(build_markup_source(make_config(tmp_path), (), "amazon.com"), SnapshotMarkupSource)
    live = build_markup_source(make_config(tmp_path, use_mocks=False), (), "amazon.com")
    assert isinstance(live, LiveMarkupSource)
    assert live.is_live is True


@pytest.mark.parametrize("asin", ["B0F2255HF", "B0F2255HFW1", "B0F2255HF!", ""])
def test_validate_asin_rejects_malformed(asin):
    with pytest.raises(InvalidInputError):
        validate_asin(asin)


@pytest.mark.asyncio
async def test_cart_from_snapshot(tmp_path, mocks_dir):
    client = RetailClient(make_config(tmp_path), make_session())

    cart = await client.get_cart_content()

    assert cart.is_empty is False
    assert [item.title for item in cart.items] == ["Sparkling Water"]


@pytest.mark.asyncio
async def test_search_from_snapshot_builds_urls_on_profile_domain(tmp_path, mocks_dir):
    client = RetailClient(make_config(tmp_path), make_session("amazon.co.uk"))

    results = await client.search_products("usb cable")

    assert [r.url for r in results] == ["https://www.amazon.co.uk/dp/B07THHPGCV"]


@pytest.mark.asyncio
async def test_search_requires_a_term(tmp_path, mocks_dir):
    client = RetailClient(make_config(tmp_path), make_session())

    with pytest.raises(InvalidInputError):
        await client.search_products("   ")


@pytest.mark.asyncio
async def test_orders_from_newest_timestamped_snapshot(tmp_path, mocks_dir):
    client = RetailClient(make_config(tmp_path), make_session())

    orders = await client.get_orders_history()

    assert [o.order_info.order_number for o in orders] == ["111-2"]


@pytest.mark.asyncio
async def test_product_details_from_snapshot_skip_image_download(tmp_path, mocks_dir):
    client = RetailClient(make_config(tmp_path), make_session())

    with patch("automation.client.fetch_image_base64_async", new_callable=AsyncMock) as fetch:
        detail = await client.get_product_details("B07THHPGCV")

    assert detail.main_image_url == "https://img.example/usb.jpg"
    assert detail.main_image_base64 is None
    fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_product_details_live_downloads_image(tmp_path):
    source = AsyncMock()
    source.is_live = True
    source.fetch = AsyncMock(return_value=PRODUCT_SNAPSHOT)
    client = RetailClient(make_config(tmp_path, use_mocks=False), make_session(), source=source)

    with patch(
        "automation.client.fetch_image_base64_async",
        new_callable=AsyncMock,
        return_value="aW1hZ2U=",
    ) as fetch:
        detail = await client.get_product_details("B07THHPGCV")

    assert detail.main_image_base64 == "aW1hZ2U="
    fetch.assert_awaited_once_with("https://img.example/usb.jpg")
    request = source.fetch.await_args.args[0]
    assert request.operation == "getProductDetails"
    assert request.requires_login is False


@pytest.mark.asyncio
async def test_missing_snapshot_surfaces_not_found(tmp_path):
    client = RetailClient(make_config(tmp_path), make_session())

    with pytest.raises(SnapshotNotFoundError):
        await client.get_cart_content()


@pytest.mark.asyncio
async def test_invalid_asin_fails_before_any_markup_is_loaded(tmp_path):
    source = AsyncMock()
    source.is_live = True
    client = RetailClient(make_config(tmp_path), make_session(), source=source)

    with pytest.raises(InvalidInputError):
        await client.get_product_details("short")

    source.fetch.assert_not_awaited()


class StubLiveSource:
    """Stands in for LiveMarkupSource.open_page, handing out a fixed page."""

    is_live = True

    def __init__(self, page):
        self.page = page
        self.requests: list[MarkupRequest] = []

    @asynccontextmanager
    async def open_page(self, request):
        self.requests.append(request)
        yield self.page


@pytest.mark.asyncio
async def test_add_to_cart_runs_on_live_page(tmp_path):
    confirmation = AsyncMock()
    confirmation.text_content = AsyncMock(return_value="Added to cart")
    elements = {
        ADD_TO_CART_BUTTON_SELECTOR: AsyncMock(),
        ADD_TO_CART_CONFIRMATION_SELECTOR: confirmation,
    }

    async def wait_for_selector(selector, timeout=None):
        if selector in elements:
            return elements[selector]
        raise PlaywrightTimeoutError("Timeout")

    page = AsyncMock()
    page.wait_for_selector = AsyncMock(side_effect=wait_for_selector)
    live = StubLiveSource(page)
    client = RetailClient(make_config(tmp_path), make_session(), live_source=live)

    result = await client.add_to_cart("B0F2255HFW")

    assert result.success is True
    assert live.requests[0].operation == "addToCart"
    assert live.requests[0].path == "/-/en/gp/product/B0F2255HFW"
    assert live.requests[0].requires_login is True


@pytest.mark.asyncio
async def test_clear_cart_runs_on_live_page(tmp_path):
    page = AsyncMock()
    page.query_selector_all = AsyncMock(return_value=[])
    live = StubLiveSource(page)
    client = RetailClient(make_config(tmp_path), make_session(), live_source=live)

    result = await client.clear_cart()

    assert result.items_observed == 0
    assert live.requests[0].operation == "clearCart"


@pytest.mark.asyncio
async def test_live_source_runs_navigation_steps_in_order(tmp_path):
    page = AsyncMock()
    page.content = AsyncMock(return_value="<html></html>")
    session = AsyncMock()
    session.page = page

    @asynccontextmanager
    async def fake_session(cookies, **kwargs):
        yield session

    config = make_config(tmp_path, use_mocks=False)
    source = LiveMarkupSource(make_session().cookies, "amazon.de", config)
    with patch("automation.sources.open_browser_session", fake_session), patch(
        "automation.sources.navigate", new_callable=AsyncMock
    ) as navigate, patch(
        "automation.sources.raise_if_not_logged_in", new_callable=AsyncMock
    ) as login_check, patch(
        "automation.sources.wait_for_marker", new_callable=AsyncMock
    ) as marker, patch(
        "automation.sources.capture_snapshot", new_callable=AsyncMock
    ) as capture:
        html = await source.fetch(MarkupRequest.for_operation("getCartContent"))

    assert html == "<html></html>"
    assert navigate.await_args.args[1] == "https://www.amazon.de/-/en/gp/cart/view.html?ref_=nav_cart"
    login_check.assert_awaited_once()
    assert marker.await_args.args[1] == "#sc-active-cart"
    capture.assert_not_awaited()
