"""
Markup sources: where an operation's HTML comes from.

`LiveMarkupSource` drives a real browser session (navigate, sign-in check,
marker wait, optional snapshot capture). `SnapshotMarkupSource` reads a
previously captured snapshot, so extraction runs without a browser or
network. `build_markup_source` picks one from configuration.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Protocol, Sequence

from playwright.async_api import Page

from automation.browser import open_browser_session
from automation.constants import MARKERS, PATHS, SNAPSHOT_SELECTORS
from automation.navigation import (
    build_url,
    capture_snapshot,
    navigate,
    raise_if_not_logged_in,
    wait_for_marker,
)
from automation.snapshots import read_snapshot
from profiles.models import Cookie
from shared.config import AppConfig
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class MarkupRequest:
    """What an operation needs loaded before extraction."""

    operation: str
    path: str
    marker: str
    snapshot_selector: Optional[str] = None
    requires_login: bool = True

    @classmethod
    def for_operation(
        cls, operation: str, *, requires_login: bool = True, **path_params: str
    ) -> "MarkupRequest":
        return cls(
            operation=operation,
            path=PATHS[operation].format(**path_params),
            marker=MARKERS[operation],
            snapshot_selector=SNAPSHOT_SELECTORS.get(operation),
            requires_login=requires_login,
        )


class MarkupSource(Protocol):
    is_live: bool

    async def fetch(self, request: MarkupRequest) -> str:
        ...


class LiveMarkupSource:
    """Open a browser session per request; the session never outlives the request."""

    is_live = True

    def __init__(
        self,
        cookies: Sequence[Cookie],
        domain: str,
        config: AppConfig,
    ) -> None:
        self.cookies = list(cookies)
        self.domain = domain
        self.config = config

    @asynccontextmanager
    async def open_page(self, request: MarkupRequest) -> AsyncIterator[Page]:
        """
        Yield a page that has been navigated, checked for the sign-in redirect
        and has shown the operation's marker. The browser closes on exit.
        """
        url = build_url(self.domain, request.path)
        async with open_browser_session(
            self.cookies,
            headless=not self.config.browser_visible,
            executable_path=self.config.browser_executable_path,
        ) as session:
            page = session.page
            await navigate(
                page, url, operation=request.operation, timeout_ms=self.config.nav_timeout_ms
            )
            if request.requires_login:
                await raise_if_not_logged_in(page, operation=request.operation)
            await wait_for_marker(
                page,
                request.marker,
                operation=request.operation,
                timeout_ms=self.config.marker_timeout_ms,
            )
            if self.config.export_live_snapshots and request.snapshot_selector:
                await capture_snapshot(
                    page,
                    request.snapshot_selector,
                    operation=request.operation,
                    snapshots_dir=self.config.snapshots_dir,
                )
            yield page

    async def fetch(self, request: MarkupRequest) -> str:
        async with self.open_page(request) as page:
            return await page.content()


class SnapshotMarkupSource:
    """Serve markup from snapshot files; no browser, no network."""

    is_live = False

    def __init__(self, snapshots_dir: str) -> None:
        self.snapshots_dir = snapshots_dir

    async def fetch(self, request: MarkupRequest) -> str:
        logger.info("markup_from_snapshot", operation=request.operation)
        return read_snapshot(self.snapshots_dir, request.operation)


def build_markup_source(
    config: AppConfig, cookies: Sequence[Cookie], domain: str
) -> MarkupSource:
    if config.use_mocks:
        return SnapshotMarkupSource(config.snapshots_dir)
    return LiveMarkupSource(cookies, domain, config)
