"""
Navigation steps shared by every live operation: go to URL and wait for
network quiescence, detect the sign-in redirect, wait for the operation's
structural marker, capture a snapshot.

Each step fails with its own error type so callers can tell an auth problem
from markup drift from slowness. Nothing here retries.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from playwright.async_api import Error as PlaywrightError, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from automation.constants import LOGIN_FORM_SELECTORS, MARKER_TIMEOUT_MS, NAV_TIMEOUT_MS
from automation.snapshots import build_snapshot_path, write_snapshot
from shared.errors import (
    ExpectedContentNotFoundError,
    NavigationError,
    NavigationTimeoutError,
    NotAuthenticatedError,
)
from shared.logging import get_logger

logger = get_logger(__name__)


def build_url(domain: str, path: str) -> str:
    return f"https://www.{domain}{path}"


async def navigate(
    page: Page,
    url: str,
    *,
    operation: str,
    timeout_ms: int = NAV_TIMEOUT_MS,
) -> None:
    """Navigate and wait for network idle, bounded by timeout_ms."""
    logger.info("navigation_started", url=url, operation=operation)
    try:
        await page.goto(url, wait_until="networkidle", timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        logger.error("navigation_failed", url=url, operation=operation, reason="timeout")
        raise NavigationTimeoutError(operation, url, f"timed out after {timeout_ms} ms") from e
    except PlaywrightError as e:
        logger.error("navigation_failed", url=url, operation=operation, error=str(e))
        raise NavigationError(operation, url, str(e)) from e
    logger.info("navigation_completed", url=url, operation=operation)


async def is_login_page(page: Page) -> bool:
    for selector in LOGIN_FORM_SELECTORS:
        if await page.query_selector(selector) is not None:
            return True
    return False


async def raise_if_not_logged_in(page: Page, *, operation: str) -> None:
    if await is_login_page(page):
        logger.warning("login_redirect_detected", operation=operation)
        raise NotAuthenticatedError(operation)


async def wait_for_marker(
    page: Page,
    selector: str,
    *,
    operation: str,
    timeout_ms: int = MARKER_TIMEOUT_MS,
) -> None:
    """Wait for the operation's structural marker; absence is markup drift."""
    try:
        await page.wait_for_selector(selector, timeout=timeout_ms)
    except PlaywrightTimeoutError as e:
        logger.error(
            "expected_content_not_found",
            operation=operation,
            marker=selector,
            timeout_ms=timeout_ms,
        )
        raise ExpectedContentNotFoundError(
            operation, selector, f"not present after {timeout_ms} ms"
        ) from e


async def capture_snapshot(
    page: Page,
    selector: str,
    *,
    operation: str,
    snapshots_dir: str | Path,
) -> Optional[Path]:
    """
    Write the outer HTML of every element matching `selector` to a
    timestamped snapshot file. Failures are logged and swallowed: the
    snapshot has no bearing on the operation's result.
    """
    try:
        html = await page.eval_on_selector_all(
            selector, "elements => elements.map(el => el.outerHTML).join('\\n')"
        )
        if not html:
            logger.warning("snapshot_skipped", operation=operation, reason="no_match")
            return None
        path = build_snapshot_path(snapshots_dir, operation)
        size = write_snapshot(path, html)
    except (PlaywrightError, OSError) as e:
        logger.warning(
            "snapshot_write_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
        )
        return None
    logger.info("snapshot_saved", operation=operation, path=str(path), size_bytes=size)
    return path
