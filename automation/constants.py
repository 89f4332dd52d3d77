"""
Browser and navigation constants: launch flags, viewport, user agent, URL
templates, structural markers and timeouts.
"""

from __future__ import annotations

# Launch flags: no automation markers, no sandbox (containers / ARM boards).
BROWSER_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-blink-features=AutomationControlled",
    "--disable-gpu",
]
BROWSER_IGNORE_DEFAULT_ARGS = ["--enable-automation"]

VIEWPORT = {"width": 1366, "height": 768}
USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/137.0.0.0 Safari/537.36"
)
LOCALE = "en-US"

# Runs before any page script.
HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"
)

# Timeouts (ms)
NAV_TIMEOUT_MS = 30_000
MARKER_TIMEOUT_MS = 10_000
ONE_TIME_PURCHASE_TIMEOUT_MS = 2_000
ADD_TO_CART_BUTTON_TIMEOUT_MS = 10_000
UPSELL_TIMEOUT_MS = 2_000
ADD_TO_CART_CONFIRM_TIMEOUT_MS = 15_000

# Fixed waits (seconds)
PURCHASE_MODE_SETTLE_SECONDS = 2.0
DELETE_SETTLE_SECONDS = 0.8

# Sign-in form fields; their presence means the cookies were not accepted.
LOGIN_FORM_SELECTORS = ("#ap_email", "#signInSubmit")

# Path templates appended to https://www.{domain}
PATHS = {
    "searchProducts": "/s?k={term}",
    "getProductDetails": "/-/en/gp/product/{asin}",
    "getCartContent": "/-/en/gp/cart/view.html?ref_=nav_cart",
    "getOrdersHistory": "/-/en/gp/css/order-history",
    "addToCart": "/-/en/gp/product/{asin}",
    "clearCart": "/-/en/gp/cart/view.html",
}

# Marker awaited after navigation, per operation
MARKERS = {
    "searchProducts": '[data-component-type="s-search-result"], .s-no-results-filler',
    "getProductDetails": "#productTitle",
    "getCartContent": "#sc-active-cart",
    "getOrdersHistory": ".order-card, .your-orders-content-container",
    "addToCart": "body",
    "clearCart": "#sc-active-cart, .sc-cart-item, .sc-empty-cart-banner",
}

# Substructure exported to snapshot files, per operation
SNAPSHOT_SELECTORS = {
    "searchProducts": ".s-main-slot",
    "getProductDetails": "#dp-container, #ppd",
    "getCartContent": "#sc-active-cart",
    "getOrdersHistory": ".order-card, .your-orders-content-container",
}

# Add-to-cart controls
ONE_TIME_PURCHASE_SELECTOR = (
    "xpath=//div[contains(@class, 'accordion-caption')]"
    "//span[contains(text(), 'One-time purchase')]"
)
ADD_TO_CART_BUTTON_SELECTOR = "#add-to-cart-button"
DECLINE_COVERAGE_SELECTOR = "#attachSiNoCoverage"
ADD_TO_CART_CONFIRMATION_SELECTOR = "#sw-atc-confirmation"
ADD_TO_CART_ACCEPTANCE_PHRASES = ("Added to cart", "Added to basket")

# Clear-cart controls
DELETE_ITEM_SELECTOR = 'span[data-action="delete-active"]'

ASIN_LENGTH = 10
