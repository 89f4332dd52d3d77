"""
Browser session provisioning: launch Chromium with anti-automation flags,
inject the active profile's cookies, hand out a page, always close.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence

from playwright.async_api import Browser, BrowserContext, Error as PlaywrightError, Page
from playwright.async_api import async_playwright

from automation.constants import (
    BROWSER_IGNORE_DEFAULT_ARGS,
    BROWSER_LAUNCH_ARGS,
    HIDE_WEBDRIVER_SCRIPT,
    LOCALE,
    USER_AGENT,
    VIEWPORT,
)
from profiles.models import Cookie
from shared.errors import BrowserLaunchError
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BrowserSession:
    browser: Browser
    context: BrowserContext
    page: Page


async def create_browser_context(browser: Browser) -> BrowserContext:
    """
    Create a context with the fixed desktop viewport and user agent, and
    register the webdriver-hiding init script.
    """
    context = await browser.new_context(
        viewport=dict(VIEWPORT),
        user_agent=USER_AGENT,
        locale=LOCALE,
    )
    await context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
    return context


async def inject_cookies(context: BrowserContext, cookies: Sequence[Cookie]) -> int:
    """Add all cookies to the context. Zero cookies is a warning, not an error."""
    if not cookies:
        logger.warning("browser_no_cookies", detail="proceeding unauthenticated")
        return 0
    await context.add_cookies([cookie.to_playwright() for cookie in cookies])
    logger.info("browser_cookies_injected", cookie_count=len(cookies))
    return len(cookies)


@asynccontextmanager
async def open_browser_session(
    cookies: Sequence[Cookie],
    *,
    headless: bool = True,
    executable_path: Optional[str] = None,
) -> AsyncIterator[BrowserSession]:
    """
    Yield a ready page seeded with `cookies`.

    The browser process is closed on every exit path. Launch failures raise
    BrowserLaunchError and are not retried.
    """
    async with async_playwright() as p:
        try:
            browser = await p.chromium.launch(
                headless=headless,
                executable_path=executable_path,
                args=list(BROWSER_LAUNCH_ARGS),
                ignore_default_args=list(BROWSER_IGNORE_DEFAULT_ARGS),
            )
        except PlaywrightError as e:
            logger.error("browser_launch_failed", error=str(e), executable_path=executable_path)
            raise BrowserLaunchError(f"Failed to launch browser: {e}") from e

        logger.info("browser_launched", headless=headless)
        try:
            context = await create_browser_context(browser)
            await inject_cookies(context, cookies)
            page = await context.new_page()
            yield BrowserSession(browser=browser, context=context, page=page)
        finally:
            await browser.close()
            logger.info("browser_closed")
