"""
Order history extraction: one entry per order card, with its item lines.
"""

from __future__ import annotations

from typing import Optional

from bs4 import BeautifulSoup, Tag

from automation.extraction.records import DeliveryAddress, OrderHistoryEntry, OrderInfo, OrderItem
from automation.extraction.rules import ORDER_RULES, OrderRules
from automation.extraction.text import normalize_whitespace, text_of
from shared.logging import get_logger

logger = get_logger(__name__)


def _match_group(pattern, text: str) -> Optional[str]:
    match = pattern.search(text)
    return match.group(1) if match else None


def _header_value(card: Tag, rules: OrderRules, index: int) -> str:
    headers = card.select(rules.header_item)
    if len(headers) <= index:
        return ""
    return text_of(headers[index], rules.header_value)


def _extract_address(card: Tag, rules: OrderRules) -> DeliveryAddress:
    rows = card.select(rules.address_row)
    return DeliveryAddress(
        name=text_of(card, rules.address_name),
        address=normalize_whitespace(rows[1].get_text()) if len(rows) > 1 else "",
        country=rows[-1].get_text().strip() if rows else "",
    )


def _extract_item(box: Tag, rules: OrderRules) -> OrderItem:
    links = box.select(rules.item_title)
    title = "".join(link.get_text() for link in links).strip()
    href = links[0].get("href") if links else None
    image = box.select_one(rules.item_image)
    return_text = text_of(box, rules.item_return_text)

    return_eligible = rules.return_eligible_phrase in return_text
    return OrderItem(
        title=title,
        image=(image.get("src") or None) if image is not None else None,
        product_url=href or None,
        asin=_match_group(rules.asin_in_url_pattern, href) if href else None,
        return_eligible=return_eligible,
        return_date=_match_group(rules.return_date_pattern, return_text) if return_eligible else None,
    )


def _extract_order(card: Tag, rules: OrderRules) -> OrderHistoryEntry:
    order_ids = card.select(rules.order_id)
    status = text_of(card, rules.status)
    info = OrderInfo(
        order_number=order_ids[-1].get_text().strip() if order_ids else "",
        order_date=_header_value(card, rules, 0),
        total=_header_value(card, rules, 1),
        status=status,
        collection_date=_match_group(rules.collection_pattern, status),
        delivery_address=_extract_address(card, rules),
    )
    items = [_extract_item(box, rules) for box in card.select(rules.item)]
    return OrderHistoryEntry(order_info=info, items=items)


def extract_orders_history(html: str, rules: OrderRules = ORDER_RULES) -> list[OrderHistoryEntry]:
    soup = BeautifulSoup(html, "html.parser")
    orders = [_extract_order(card, rules) for card in soup.select(rules.card)]
    logger.info(
        "orders_extracted",
        order_count=len(orders),
        item_count=sum(len(order.items) for order in orders),
    )
    return orders
