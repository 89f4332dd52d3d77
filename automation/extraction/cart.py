"""
Cart page extraction.

The empty-cart phrase is checked before any line is looked at: the page keeps
placeholder item nodes around even when the cart is empty.
"""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

from automation.extraction.records import CartContent, CartItem
from automation.extraction.rules import CART_RULES, CartRules
from automation.extraction.text import attr_of, first_text, parse_quantity, text_of
from shared.errors import ExpectedContentNotFoundError
from shared.logging import get_logger

logger = get_logger(__name__)


def _extract_line(item: Tag, rules: CartRules) -> CartItem | None:
    title_link = item.select_one(rules.title_link)
    title = text_of(title_link, rules.title_text) if title_link is not None else ""
    price = text_of(item, rules.price)
    if not title or not price:
        return None

    checkbox = item.select_one(rules.selected_checkbox)
    return CartItem(
        title=title,
        price=price,
        quantity=parse_quantity(text_of(item, rules.quantity)),
        image=attr_of(item, rules.image, "src"),
        product_url=attr_of(item, rules.product_link, "href"),
        asin=item.get(rules.asin_attr) or None,
        availability=text_of(item, rules.availability) or "Unknown",
        is_selected=checkbox is not None and checkbox.has_attr("checked"),
    )


def extract_cart_content(html: str, rules: CartRules = CART_RULES) -> CartContent:
    soup = BeautifulSoup(html, "html.parser")
    container = soup.select_one(rules.container)
    if container is None:
        raise ExpectedContentNotFoundError("getCartContent", rules.container, "no cart container")

    if rules.empty_phrase in container.get_text():
        logger.info("cart_extracted", is_empty=True, item_count=0)
        return CartContent(is_empty=True, items=[])

    items: list[CartItem] = []
    skipped = 0
    for node in container.select(rules.item):
        line = _extract_line(node, rules)
        if line is None:
            skipped += 1
            continue
        items.append(line)

    subtotal = first_text(container, rules.subtotal) or None
    label = text_of(container, rules.subtotal_label)
    match = rules.item_count_pattern.search(label)
    total_items = int(match.group(1)) if match else len(items)

    logger.info(
        "cart_extracted",
        is_empty=False,
        item_count=len(items),
        skipped_nodes=skipped,
        total_items=total_items,
    )
    return CartContent(is_empty=False, items=items, subtotal=subtotal, total_items=total_items)
