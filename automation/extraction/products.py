"""
Search-result and product-detail extraction from page markup.
"""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup

from automation.extraction.records import ProductDetail, ProductSummary, ReviewSummary
from automation.extraction.rules import PRODUCT_RULES, SEARCH_RULES, ProductRules, SearchRules
from automation.extraction.text import (
    first_text,
    normalize_whitespace,
    parse_count,
    parse_rating,
    text_of,
)
from shared.errors import ExpectedContentNotFoundError
from shared.logging import get_logger

logger = get_logger(__name__)


def product_url(base_url: Optional[str], asin: str) -> Optional[str]:
    if not base_url:
        return None
    return f"{base_url.rstrip('/')}/dp/{asin}"


def extract_search_results(
    html: str,
    rules: SearchRules = SEARCH_RULES,
    base_url: Optional[str] = None,
) -> list[ProductSummary]:
    """
    One ProductSummary per search result block.

    Blocks without an ASIN or without a price (ads, placeholders, unavailable
    listings) are dropped.
    """
    soup = BeautifulSoup(html, "html.parser")
    results: list[ProductSummary] = []
    dropped = 0

    for block in soup.select(rules.result):
        asin = (block.get(rules.asin_attr) or "").strip()
        price = first_text(block, rules.price)
        if not asin or not price:
            dropped += 1
            continue

        title = normalize_whitespace(first_text(block, rules.title))
        sponsored = block.select_one(rules.sponsored) is not None or (
            rules.sponsored_phrase in text_of(block, rules.sponsored_phrase_scope)
        )
        results.append(
            ProductSummary(
                asin=asin,
                title=title,
                price=price,
                is_prime_eligible=block.select_one(rules.prime) is not None,
                is_sponsored=sponsored,
                url=product_url(base_url, asin),
            )
        )

    logger.info("search_results_extracted", count=len(results), dropped=dropped)
    return results


def _extract_rating(soup: BeautifulSoup, rules: ProductRules) -> Optional[float]:
    for selector in rules.rating:
        el = soup.select_one(selector)
        if el is None:
            continue
        candidates = [el.get(rules.rating_attr) or "", el.get_text()]
        alt = el.select_one(".a-icon-alt")
        if alt is not None:
            candidates.append(alt.get_text())
        for candidate in candidates:
            rating = parse_rating(str(candidate), rules.rating_pattern)
            if rating is not None:
                return rating
    return None


def _extract_main_image(soup: BeautifulSoup, rules: ProductRules) -> Optional[str]:
    el = soup.select_one(rules.main_image)
    if el is None:
        return None
    for attr in rules.main_image_attrs:
        value = el.get(attr)
        if value and not str(value).startswith("data:"):
            return str(value)
    return None


def extract_product_details(
    html: str,
    asin: str,
    rules: ProductRules = PRODUCT_RULES,
) -> ProductDetail:
    """Extract the product detail record; a page without a title is treated as drift."""
    soup = BeautifulSoup(html, "html.parser")

    title = normalize_whitespace(text_of(soup, rules.title))
    if not title:
        raise ExpectedContentNotFoundError("getProductDetails", rules.title, "no product title")

    price = first_text(soup, rules.price) or None
    count_text = first_text(soup, (rules.reviews_count,))
    detail = ProductDetail(
        asin=asin,
        title=title,
        price=price,
        reviews=ReviewSummary(
            average_rating=_extract_rating(soup, rules),
            reviews_count=parse_count(count_text),
        ),
        can_use_subscribe_and_save=soup.select_one(rules.subscribe_and_save) is not None,
        main_image_url=_extract_main_image(soup, rules),
    )
    logger.info(
        "product_details_extracted",
        asin=asin,
        has_price=price is not None,
        subscribe_and_save=detail.can_use_subscribe_and_save,
    )
    return detail
