"""
Exception hierarchy shared by the profile layer, the automation layer and the
tool API.

Every error carries an `error_kind` so the tool boundary can report a stable
category (validation, not_found, not_authenticated, ...) without matching on
class names or message text.
"""

from __future__ import annotations

from typing import Optional, Sequence


class RetailAutomationError(Exception):
    """Base class for all expected failures of an operation."""

    error_kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# --- validation ---


class ProfileValidationError(RetailAutomationError):
    """Malformed profile name or cookie payload; nothing was written."""

    error_kind = "validation"


class InvalidInputError(RetailAutomationError):
    """Malformed operation input (e.g. an ASIN of the wrong length)."""

    error_kind = "validation"


# --- not found ---


class ProfileNotFoundError(RetailAutomationError):
    error_kind = "not_found"

    def __init__(self, name: str, available: Sequence[str] = ()) -> None:
        available_text = ", ".join(available) if available else "none"
        super().__init__(f'Profile "{name}" not found. Available profiles: {available_text}')
        self.name = name
        self.available = list(available)


class SnapshotNotFoundError(RetailAutomationError):
    error_kind = "not_found"

    def __init__(self, operation: str, directory: str) -> None:
        super().__init__(f"No markup snapshot for {operation} in {directory}")
        self.operation = operation
        self.directory = directory


# --- parse / io ---


class ProfileParseError(RetailAutomationError):
    error_kind = "parse_error"


class ProfileWriteError(RetailAutomationError):
    error_kind = "io_error"


# --- authentication ---


class NotAuthenticatedError(RetailAutomationError):
    """The site redirected to its sign-in form."""

    error_kind = "not_authenticated"

    def __init__(self, operation: str) -> None:
        super().__init__(
            "You need to be logged in to access this feature. "
            "Refresh the cookies of the active profile and try again."
        )
        self.operation = operation


# --- structural / navigation ---


class BrowserLaunchError(RetailAutomationError):
    error_kind = "browser_launch_failed"


class NavigationError(RetailAutomationError):
    error_kind = "navigation_failed"

    def __init__(self, operation: str, url: str, detail: str) -> None:
        super().__init__(f"[{operation}] Navigation to {url} failed: {detail}")
        self.operation = operation
        self.url = url


class NavigationTimeoutError(NavigationError):
    error_kind = "navigation_timeout"


class ExpectedContentNotFoundError(RetailAutomationError):
    """A structural marker never appeared; usually markup drift, not auth."""

    error_kind = "expected_content_not_found"

    def __init__(self, operation: str, marker: str, detail: Optional[str] = None) -> None:
        message = f"[{operation}] Expected content not found: {marker}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
        self.operation = operation
        self.marker = marker


class AddToCartNotConfirmedError(RetailAutomationError):
    error_kind = "add_to_cart_not_confirmed"

    def __init__(self, asin: str, observed_text: str) -> None:
        observed = observed_text.strip() or "<no confirmation shown>"
        super().__init__(f"Could not verify that product {asin} was added to cart: {observed}")
        self.asin = asin
        self.observed_text = observed_text
