"""
Cart-mutating page flows: add a product to the cart, delete every cart line.

Both run on an already navigated, signed-in page and only use
wait_for_selector / query_selector_all / click, so tests drive them with
AsyncMock pages.
"""

from __future__ import annotations

import asyncio

from playwright.async_api import Error as PlaywrightError, Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from automation.constants import (
    ADD_TO_CART_ACCEPTANCE_PHRASES,
    ADD_TO_CART_BUTTON_SELECTOR,
    ADD_TO_CART_BUTTON_TIMEOUT_MS,
    ADD_TO_CART_CONFIRM_TIMEOUT_MS,
    ADD_TO_CART_CONFIRMATION_SELECTOR,
    DECLINE_COVERAGE_SELECTOR,
    DELETE_ITEM_SELECTOR,
    DELETE_SETTLE_SECONDS,
    ONE_TIME_PURCHASE_SELECTOR,
    ONE_TIME_PURCHASE_TIMEOUT_MS,
    PURCHASE_MODE_SETTLE_SECONDS,
    UPSELL_TIMEOUT_MS,
)
from automation.extraction.records import AddToCartResult, ClearCartResult
from automation.extraction.text import normalize_whitespace
from shared.errors import AddToCartNotConfirmedError, ExpectedContentNotFoundError
from shared.logging import get_logger

logger = get_logger(__name__)


def is_add_to_cart_confirmed(text: str) -> bool:
    return any(phrase in (text or "") for phrase in ADD_TO_CART_ACCEPTANCE_PHRASES)


async def _select_one_time_purchase(page: Page, settle_seconds: float) -> bool:
    """Pick "One-time purchase" on subscribe-and-save products. Absence is normal."""
    try:
        option = await page.wait_for_selector(
            ONE_TIME_PURCHASE_SELECTOR, timeout=ONE_TIME_PURCHASE_TIMEOUT_MS
        )
    except PlaywrightTimeoutError:
        logger.info("one_time_purchase_not_offered")
        return False
    if option is None:
        return False
    try:
        await option.click()
    except PlaywrightError as e:
        logger.warning("one_time_purchase_click_failed", error=str(e))
        return False
    logger.info("one_time_purchase_selected")
    if settle_seconds:
        await asyncio.sleep(settle_seconds)
    return True


async def _click_add_to_cart(page: Page) -> None:
    try:
        button = await page.wait_for_selector(
            ADD_TO_CART_BUTTON_SELECTOR, timeout=ADD_TO_CART_BUTTON_TIMEOUT_MS
        )
    except PlaywrightTimeoutError as e:
        raise ExpectedContentNotFoundError(
            "addToCart",
            ADD_TO_CART_BUTTON_SELECTOR,
            f"not present after {ADD_TO_CART_BUTTON_TIMEOUT_MS} ms",
        ) from e
    if button is None:
        raise ExpectedContentNotFoundError("addToCart", ADD_TO_CART_BUTTON_SELECTOR)
    await button.click()
    logger.info("add_to_cart_clicked")


async def _decline_coverage_upsell(page: Page) -> bool:
    try:
        decline = await page.wait_for_selector(DECLINE_COVERAGE_SELECTOR, timeout=UPSELL_TIMEOUT_MS)
    except PlaywrightTimeoutError:
        return False
    if decline is None:
        return False
    try:
        await decline.click()
    except PlaywrightError as e:
        logger.warning("coverage_decline_failed", error=str(e))
        return False
    logger.info("coverage_upsell_declined")
    return True


async def run_add_to_cart_flow(
    page: Page,
    asin: str,
    *,
    confirm_timeout_ms: int = ADD_TO_CART_CONFIRM_TIMEOUT_MS,
    settle_seconds: float = PURCHASE_MODE_SETTLE_SECONDS,
) -> AddToCartResult:
    """
    Add the product shown on `page` to the cart and verify the confirmation.

    Raises ExpectedContentNotFoundError when there is no add-to-cart button and
    AddToCartNotConfirmedError when the confirmation is missing or does not
    say the item was added.
    """
    await _select_one_time_purchase(page, settle_seconds)
    await _click_add_to_cart(page)
    await _decline_coverage_upsell(page)

    try:
        confirmation = await page.wait_for_selector(
            ADD_TO_CART_CONFIRMATION_SELECTOR, timeout=confirm_timeout_ms
        )
    except PlaywrightTimeoutError as e:
        logger.warning("add_to_cart_not_confirmed", asin=asin, reason="no_confirmation")
        raise AddToCartNotConfirmedError(asin, "") from e

    text = ""
    if confirmation is not None:
        text = normalize_whitespace(await confirmation.text_content() or "")
    if not is_add_to_cart_confirmed(text):
        logger.warning("add_to_cart_not_confirmed", asin=asin, observed_text=text)
        raise AddToCartNotConfirmedError(asin, text)

    logger.info("add_to_cart_confirmed", asin=asin)
    return AddToCartResult(
        success=True,
        message=f"Product {asin} successfully added to cart",
        asin=asin,
        confirmation_text=text,
    )


async def run_clear_cart_loop(
    page: Page,
    *,
    settle_seconds: float = DELETE_SETTLE_SECONDS,
) -> ClearCartResult:
    """
    Delete cart lines one at a time.

    Runs at most as many iterations as delete controls were seen up front,
    re-querying before each click since the list re-renders after a delete.
    A failed click is logged and counted; the loop moves on.
    """
    observed = len(await page.query_selector_all(DELETE_ITEM_SELECTOR))
    if observed == 0:
        logger.info("clear_cart_nothing_to_remove")
        return ClearCartResult(
            success=True,
            message="No items found in cart to remove",
            items_observed=0,
            items_removed=0,
        )

    logger.info("clear_cart_started", items_observed=observed)
    removed = 0
    failures = 0
    for attempt in range(observed):
        try:
            buttons = await page.query_selector_all(DELETE_ITEM_SELECTOR)
            if not buttons:
                logger.info("clear_cart_no_more_items", attempt=attempt + 1)
                break
            await buttons[0].click()
            removed += 1
            logger.info("cart_item_removed", items_removed=removed)
        except PlaywrightError as e:
            failures += 1
            logger.warning("cart_item_remove_failed", attempt=attempt + 1, error=str(e))
        if settle_seconds and attempt < observed - 1:
            await asyncio.sleep(settle_seconds)

    if removed == observed:
        message = f"Successfully cleared cart. Removed {removed} items."
    elif removed == 0:
        message = f"Failed to clear cart. None of the {observed} items could be removed."
    else:
        message = f"Partially cleared cart. Removed {removed} of {observed} items."
    logger.info(
        "clear_cart_finished",
        items_observed=observed,
        items_removed=removed,
        failures=failures,
    )
    return ClearCartResult(
        success=removed > 0,
        message=message,
        items_observed=observed,
        items_removed=removed,
        failures=failures,
    )
