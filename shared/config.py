"""
Environment-based configuration for the retail automation service.

All values come from environment variables (loaded from `.env` by the entry
points via python-dotenv) with local-development defaults. Cookies are never
read from the environment; they live in profile files under `profiles_dir`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal, Optional

Environment = Literal["local", "dev", "staging", "prod"]


@dataclass(frozen=True)
class AppConfig:
    """Top-level application configuration."""

    environment: Environment
    log_level: str

    # Optional file path for structured JSON logs.
    log_file: Optional[str]
    log_stdout: bool

    # Credential store layout
    profiles_dir: str
    legacy_cookies_path: str
    default_profile: str

    # Snapshot (mock) sourcing
    snapshots_dir: str
    use_mocks: bool
    export_live_snapshots: bool

    # Browser
    browser_visible: bool
    browser_executable_path: Optional[str]

    # Marketplace defaults used when cookies do not reveal a domain
    default_domain: str
    brand_token: str

    # Bounded waits (ms)
    nav_timeout_ms: int
    marker_timeout_ms: int
    add_to_cart_confirm_timeout_ms: int

    include_product_image: bool

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Construct configuration from environment variables."""

        environment = os.getenv("APP_ENV", "local")
        if environment not in {"local", "dev", "staging", "prod"}:
            raise ValueError(f"Unsupported APP_ENV value: {environment!r}")

        def _bool_env(name: str, default: bool) -> bool:
            raw = (os.getenv(name) or str(default)).strip().lower()
            return raw in ("true", "1", "yes")

        def _int_env(name: str, default: int) -> int:
            raw = (os.getenv(name) or "").strip()
            try:
                return int(raw) if raw else default
            except ValueError:
                return default

        return cls(
            environment=environment,  # type: ignore[arg-type]
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            log_stdout=_bool_env("LOG_STDOUT", True),
            profiles_dir=os.getenv("PROFILES_DIR", "./data/profiles"),
            legacy_cookies_path=os.getenv("LEGACY_COOKIES_PATH", "./amazonCookies.json"),
            default_profile=os.getenv("DEFAULT_PROFILE", "personal"),
            snapshots_dir=os.getenv("SNAPSHOTS_DIR", "./mocks"),
            use_mocks=_bool_env("USE_MOCKS", False),
            export_live_snapshots=_bool_env("EXPORT_LIVE_SNAPSHOTS", False),
            browser_visible=_bool_env("BROWSER_VISIBLE", False),
            browser_executable_path=os.getenv("BROWSER_EXECUTABLE_PATH") or None,
            default_domain=os.getenv("DEFAULT_DOMAIN", "amazon.com"),
            brand_token=os.getenv("BRAND_TOKEN", "amazon"),
            nav_timeout_ms=_int_env("NAV_TIMEOUT_MS", 30_000),
            marker_timeout_ms=_int_env("MARKER_TIMEOUT_MS", 10_000),
            add_to_cart_confirm_timeout_ms=_int_env("ADD_TO_CART_CONFIRM_TIMEOUT_MS", 15_000),
            include_product_image=_bool_env("INCLUDE_PRODUCT_IMAGE", True),
        )


def get_config() -> AppConfig:
    """
    Obtain the current configuration.

    Long-lived processes build one `AppConfig` at startup (see
    `api.main.create_app`) and pass it explicitly.
    """

    return AppConfig.from_env()
