"""
Selector and text-pattern rules per record type.

These are tied to the retailer's current markup and will drift. Fixing a
drift means editing (or passing a replacement of) one of these rule sets;
the extractors themselves only know the rule names.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field


@dataclass(frozen=True)
class SearchRules:
    result: str = 'div[data-component-type="s-search-result"]'
    asin_attr: str = "data-asin"
    title: tuple[str, ...] = ("h2 span", "h2")
    price: tuple[str, ...] = (".a-price:not(.a-text-price) .a-offscreen", ".a-price .a-offscreen")
    prime: str = 'i.a-icon-prime, [aria-label="Amazon Prime"]'
    sponsored: str = ".puis-sponsored-label-text, .s-sponsored-label-text"
    sponsored_phrase: str = "Sponsored"
    sponsored_phrase_scope: str = ".a-color-secondary, .a-size-mini"


@dataclass(frozen=True)
class ProductRules:
    title: str = "#productTitle"
    price: tuple[str, ...] = (
        "#corePrice_feature_div .a-price .a-offscreen",
        "#corePriceDisplay_desktop_feature_div .a-price .a-offscreen",
        ".apexPriceToPay .a-offscreen",
        "#priceblock_ourprice",
        "#price_inside_buybox",
    )
    rating: tuple[str, ...] = ("#acrPopover", "#averageCustomerReviews .a-icon-alt")
    rating_attr: str = "title"
    rating_pattern: re.Pattern = field(default=re.compile(r"(\d+(?:[.,]\d+)?)\s+out of"))
    reviews_count: str = "#acrCustomerReviewText"
    subscribe_and_save: str = (
        "#snsAccordionRowMiddle, #sns-base-price, [id^='snsAccordionRow'], #subscriptionPrice"
    )
    main_image: str = "#landingImage, #imgBlkFront, #main-image"
    main_image_attrs: tuple[str, ...] = ("data-old-hires", "src")


@dataclass(frozen=True)
class CartRules:
    container: str = "#sc-active-cart"
    empty_phrase: str = "Your Amazon Cart is empty"
    item: str = "[data-asin]"
    asin_attr: str = "data-asin"
    title_link: str = "a.sc-product-title"
    title_text: str = ".a-truncate-full"
    price: str = ".apex-price-to-pay-value .a-offscreen"
    quantity: str = '[data-a-selector="value"]'
    image: str = ".sc-product-image"
    product_link: str = ".sc-product-link"
    availability: str = ".sc-product-availability"
    selected_checkbox: str = 'input[type="checkbox"]'
    subtotal: tuple[str, ...] = ("#sc-subtotal-amount-activecart .sc-price", ".sc-subtotal .sc-price")
    subtotal_label: str = "#sc-subtotal-label-activecart"
    item_count_pattern: re.Pattern = field(default=re.compile(r"\((\d+)\s+item"))


@dataclass(frozen=True)
class OrderRules:
    card: str = ".order-card"
    order_id: str = ".yohtmlc-order-id span"
    header_item: str = ".order-header__header-list-item"
    header_value: str = ".a-size-base"
    status: str = ".delivery-box__primary-text"
    collection_pattern: re.Pattern = field(default=re.compile(r"Collected on (.+)"))
    address_name: str = ".a-popover-preload h5"
    address_row: str = ".a-popover-preload .a-row"
    item: str = ".item-box"
    item_title: str = ".yohtmlc-product-title a"
    item_image: str = ".product-image img"
    item_return_text: str = ".a-size-small"
    return_eligible_phrase: str = "Return or Replace Items"
    return_date_pattern: re.Pattern = field(default=re.compile(r"until (.+)"))
    asin_in_url_pattern: re.Pattern = field(default=re.compile(r"/dp/([A-Z0-9]{10})"))


SEARCH_RULES = SearchRules()
PRODUCT_RULES = ProductRules()
CART_RULES = CartRules()
ORDER_RULES = OrderRules()
