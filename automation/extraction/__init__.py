"""
Markup to record extraction. Pure functions over HTML strings: no browser,
no network, so the same code runs on live pages and on snapshot files.
"""

from __future__ import annotations

from automation.extraction.cart import extract_cart_content
from automation.extraction.orders import extract_orders_history
from automation.extraction.products import extract_product_details, extract_search_results
from automation.extraction.records import (
    AddToCartResult,
    CartContent,
    CartItem,
    ClearCartResult,
    DeliveryAddress,
    OrderHistoryEntry,
    OrderInfo,
    OrderItem,
    ProductDetail,
    ProductSummary,
    ReviewSummary,
)
from automation.extraction.rules import (
    CART_RULES,
    ORDER_RULES,
    PRODUCT_RULES,
    SEARCH_RULES,
    CartRules,
    OrderRules,
    ProductRules,
    SearchRules,
)
from automation.extraction.text import normalize_whitespace

__all__ = [
    # records
    "AddToCartResult",
    "CartContent",
    "CartItem",
    "ClearCartResult",
    "DeliveryAddress",
    "OrderHistoryEntry",
    "OrderInfo",
    "OrderItem",
    "ProductDetail",
    "ProductSummary",
    "ReviewSummary",
    # rules
    "CART_RULES",
    "ORDER_RULES",
    "PRODUCT_RULES",
    "SEARCH_RULES",
    "CartRules",
    "OrderRules",
    "ProductRules",
    "SearchRules",
    # extractors
    "extract_cart_content",
    "extract_orders_history",
    "extract_product_details",
    "extract_search_results",
    "normalize_whitespace",
]
