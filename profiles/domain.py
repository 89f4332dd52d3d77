"""
Marketplace domain derivation from a profile's cookies.

A profile exported from amazon.co.uk carries cookies for `.amazon.co.uk`, so
the domain every operation navigates to is read from the cookies rather than
configured per profile.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from profiles.models import Cookie
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DomainResolution:
    domain: str
    low_confidence: bool
    reason: Optional[str] = None


def _strip_prefixes(domain: str) -> str:
    if domain.startswith("."):
        domain = domain[1:]
    if domain.startswith("www."):
        domain = domain[4:]
    return domain


def extract_domain(cookies: Sequence[Cookie], brand_token: str = "amazon") -> Optional[str]:
    """
    Return the marketplace domain carried by the cookies, or None.

    Among cookies whose domain contains the brand token, a dot-prefixed domain
    (`.amazon.de`) wins over a `www.`-prefixed one (`www.amazon.de`).
    """
    candidates = [c.domain for c in cookies if c.domain and brand_token in c.domain]
    if not candidates:
        return None
    for domain in candidates:
        if domain.startswith("."):
            return _strip_prefixes(domain)
    for domain in candidates:
        if domain.startswith("www."):
            return _strip_prefixes(domain)
    return _strip_prefixes(candidates[0])


def resolve_domain(
    cookies: Sequence[Cookie],
    *,
    default_domain: str = "amazon.com",
    brand_token: str = "amazon",
) -> DomainResolution:
    """Like extract_domain, falling back to the default marketplace (low confidence)."""
    if not cookies:
        logger.warning("domain_fallback_default", reason="no_cookies", domain=default_domain)
        return DomainResolution(domain=default_domain, low_confidence=True, reason="no_cookies")

    domain = extract_domain(cookies, brand_token)
    if domain is None:
        logger.warning(
            "domain_fallback_default",
            reason="no_brand_cookie",
            domain=default_domain,
            brand_token=brand_token,
        )
        return DomainResolution(
            domain=default_domain, low_confidence=True, reason="no_brand_cookie"
        )

    return DomainResolution(domain=domain, low_confidence=False)
