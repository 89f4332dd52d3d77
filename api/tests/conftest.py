"""
Pytest configuration and fixtures for API tests.

Provides a temporary profiles directory (personal + work), a session
controller over it, a recording RetailClient factory (no browser), and a
FastAPI test client built with those dependencies.
"""

from __future__ import annotations

import json
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from api.main import build_session_controller, create_app
from automation.extraction import (
    AddToCartResult,
    CartContent,
    CartItem,
    ClearCartResult,
    ProductDetail,
    ProductSummary,
)
from profiles.session import SessionController
from shared.config import AppConfig

PERSONAL_COOKIES = [
    {"domain": ".amazon.com", "name": "session-id", "value": "123-456"},
    {"domain": ".amazon.com", "name": "at-main", "value": "Atza|abc"},
]
WORK_COOKIES = [{"domain": ".amazon.co.uk", "name": "session-id", "value": "999-000"}]


class FakeRetailClient:
    """Stands in for RetailClient; returns canned records."""

    def __init__(self, config, session):
        self.config = config
        self.session = session

    async def search_products(self, term):
        return [ProductSummary(asin="B07THHPGCV", title=f"{term} result", price="$5.00")]

    async def get_product_details(self, asin):
        return ProductDetail(asin=asin, title="USB Cable", price="$5.00")

    async def get_cart_content(self):
        return CartContent(
            is_empty=False,
            items=[CartItem(title="USB Cable", price="$5.00", asin="B07THHPGCV")],
            subtotal="$5.00",
            total_items=1,
        )

    async def get_orders_history(self):
        return []

    async def add_to_cart(self, asin):
        return AddToCartResult(
            success=True,
            message=f"Product {asin} successfully added to cart",
            asin=asin,
            confirmation_text="Added to cart",
        )

    async def clear_cart(self):
        return ClearCartResult(
            success=True,
            message="Partially cleared cart. Removed 1 of 2 items.",
            items_observed=2,
            items_removed=1,
            failures=1,
        )


class RecordingClientFactory:
    """Client factory that records the identity each operation ran with."""

    def __init__(self, client_class=FakeRetailClient):
        self.client_class = client_class
        self.sessions = []

    def __call__(self, config, session):
        self.sessions.append(session)
        return self.client_class(config, session)


@pytest.fixture
def test_config(tmp_path) -> AppConfig:
    profiles_dir = tmp_path / "profiles"
    profiles_dir.mkdir()
    (profiles_dir / "personal.json").write_text(json.dumps(PERSONAL_COOKIES))
    (profiles_dir / "work.json").write_text(json.dumps(WORK_COOKIES))
    config = AppConfig(
        environment="local",
        log_level="INFO",
        log_file=None,
        log_stdout=True,
        profiles_dir=str(profiles_dir),
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
        include_product_image=False,
    )
    return config


@pytest.fixture
def controller(test_config) -> SessionController:
    return build_session_controller(test_config)


@pytest.fixture
def client_factory() -> RecordingClientFactory:
    return RecordingClientFactory()


@pytest.fixture
def client(test_config, controller, client_factory) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client over the temporary profiles."""
    app = create_app(config=test_config, controller=controller, client_factory=client_factory)
    with TestClient(app) as test_client:
        yield test_client
