"""
Profile data types: cookies, listings, switch/confirm results, confirmation prompt.
"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field
from typing import Any, Literal, Optional

SameSite = Literal["Strict", "Lax", "None"]

PROFILE_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")

_SAME_SITE_VALUES = ("Strict", "Lax", "None")
# Browser-extension exports use "no_restriction" for SameSite=None.
_SAME_SITE_ALIASES = {"no_restriction": "None"}


def is_valid_profile_name(name: str) -> bool:
    return bool(name) and PROFILE_NAME_PATTERN.match(name) is not None


def normalize_same_site(value: Any) -> Optional[SameSite]:
    """Map a raw sameSite value to Strict/Lax/None; anything else is unset."""
    if value in _SAME_SITE_VALUES:
        return value
    if isinstance(value, str) and value in _SAME_SITE_ALIASES:
        return _SAME_SITE_ALIASES[value]  # type: ignore[return-value]
    return None


@dataclass(frozen=True)
class Cookie:
    """One authentication cookie as stored in a profile file."""

    domain: str
    name: str
    value: str
    path: str = "/"
    expiration_date: Optional[float] = None
    host_only: Optional[bool] = None
    http_only: Optional[bool] = None
    secure: Optional[bool] = None
    session: Optional[bool] = None
    same_site: Optional[SameSite] = None

    @classmethod
    def from_raw(cls, raw: dict) -> "Cookie":
        """
        Normalize one cookie object from a profile file / cookie-editor export.

        Raises ValueError when name, value or domain is missing or empty.
        """
        name = raw.get("name")
        value = raw.get("value")
        domain = raw.get("domain")
        if not name or not value or not domain:
            raise ValueError("Each cookie must have name, value, and domain fields")

        expiration = raw.get("expirationDate")
        return cls(
            domain=str(domain),
            name=str(name),
            value=str(value),
            path=raw.get("path") or "/",
            expiration_date=float(expiration) if isinstance(expiration, (int, float)) else None,
            host_only=raw.get("hostOnly"),
            http_only=raw.get("httpOnly"),
            secure=raw.get("secure"),
            session=raw.get("session"),
            same_site=normalize_same_site(raw.get("sameSite")),
        )

    def to_raw(self) -> dict:
        """On-disk (cookie-editor compatible) representation."""
        raw: dict[str, Any] = {
            "domain": self.domain,
            "name": self.name,
            "value": self.value,
            "path": self.path,
        }
        optional = {
            "expirationDate": self.expiration_date,
            "hostOnly": self.host_only,
            "httpOnly": self.http_only,
            "secure": self.secure,
            "session": self.session,
            "sameSite": self.same_site,
        }
        raw.update({k: v for k, v in optional.items() if v is not None})
        return raw

    def to_playwright(self) -> dict:
        """Shape accepted by `BrowserContext.add_cookies`."""
        cookie: dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
        }
        if self.expiration_date is not None and not self.session:
            cookie["expires"] = self.expiration_date
        if self.http_only is not None:
            cookie["httpOnly"] = self.http_only
        if self.secure is not None:
            cookie["secure"] = self.secure
        if self.same_site is not None:
            cookie["sameSite"] = self.same_site
        return cookie


@dataclass(frozen=True)
class ProfileInfo:
    """One entry of a profile listing. Unparseable files report 0 / None."""

    name: str
    cookie_count: int
    domain: Optional[str]

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ProfileResult:
    """Outcome of switch / confirm / save."""

    success: bool
    message: str
    profile: str
    # invalid_name | not_found | load_failed | invalid_payload | write_failed
    reason: Optional[str] = None
    available_profiles: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PromptOption:
    label: str
    value: str
    description: str


@dataclass(frozen=True)
class ConfirmationPrompt:
    """Structured question a calling agent renders as a profile choice."""

    current_profile: str
    available_profiles: list[str]
    question: str
    options: list[PromptOption]
    type: str = "PROFILE_CONFIRMATION_REQUIRED"

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class GateDecision:
    proceed: bool
    prompt: Optional[ConfirmationPrompt] = None
