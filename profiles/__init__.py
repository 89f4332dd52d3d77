"""
Account profiles: cookie storage, marketplace domain derivation and the
session controller that owns the active identity and its confirmation gate.
"""

from __future__ import annotations

from profiles.domain import DomainResolution, extract_domain, resolve_domain
from profiles.models import (
    ConfirmationPrompt,
    Cookie,
    GateDecision,
    ProfileInfo,
    ProfileResult,
    PromptOption,
    is_valid_profile_name,
    normalize_same_site,
)
from profiles.session import SessionController, SessionSnapshot
from profiles.store import CredentialStore, normalize_cookies, parse_cookies_payload

__all__ = [
    "ConfirmationPrompt",
    "Cookie",
    "CredentialStore",
    "DomainResolution",
    "GateDecision",
    "ProfileInfo",
    "ProfileResult",
    "PromptOption",
    "SessionController",
    "SessionSnapshot",
    "extract_domain",
    "is_valid_profile_name",
    "normalize_cookies",
    "normalize_same_site",
    "parse_cookies_payload",
    "resolve_domain",
]
