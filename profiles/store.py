"""
On-disk credential store: one JSON array of cookies per profile.

Layout: {profiles_dir}/{name}.json. A legacy single-file location is honored
once for the default profile and then copied into the profiles directory.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Optional

from profiles.domain import extract_domain
from profiles.models import Cookie, ProfileInfo, is_valid_profile_name
from shared.errors import (
    ProfileNotFoundError,
    ProfileParseError,
    ProfileValidationError,
    ProfileWriteError,
)
from shared.logging import get_logger

logger = get_logger(__name__)

PROFILE_SUFFIX = ".json"


def invalid_name_message(name: str) -> str:
    return (
        f'Invalid profile name "{name}". '
        "Profile names must be lowercase alphanumeric with hyphens only."
    )


def normalize_cookies(raw_cookies: list[Any], *, source: str = "") -> list[Cookie]:
    """Normalize raw cookie objects, dropping (and logging) invalid ones."""
    cookies: list[Cookie] = []
    for index, raw in enumerate(raw_cookies):
        if not isinstance(raw, dict):
            logger.warning("profile_cookie_dropped", source=source, index=index, reason="not_object")
            continue
        try:
            cookies.append(Cookie.from_raw(raw))
        except ValueError as e:
            logger.warning("profile_cookie_dropped", source=source, index=index, reason=str(e))
    return cookies


def parse_cookies_payload(payload: str) -> list[dict]:
    """
    Validate a cookies payload (JSON text) for saving.

    Raises ProfileValidationError with a message naming the first problem.
    """
    try:
        cookies = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise ProfileValidationError(f"Invalid cookies JSON: {e}") from e

    if not isinstance(cookies, list):
        raise ProfileValidationError("Invalid cookies JSON: Cookies must be a JSON array")
    if len(cookies) == 0:
        raise ProfileValidationError("Invalid cookies JSON: Cookies array is empty")
    for cookie in cookies:
        if not isinstance(cookie, dict) or not (
            cookie.get("name") and cookie.get("value") and cookie.get("domain")
        ):
            raise ProfileValidationError(
                "Invalid cookies JSON: Each cookie must have name, value, and domain fields"
            )
    return cookies


class CredentialStore:
    """File-backed profile store. Pure data access; no browser, no network."""

    def __init__(
        self,
        profiles_dir: str | Path,
        *,
        legacy_cookies_path: Optional[str | Path] = None,
        default_profile: str = "personal",
        brand_token: str = "amazon",
    ) -> None:
        self.profiles_dir = Path(profiles_dir)
        self.legacy_cookies_path = Path(legacy_cookies_path) if legacy_cookies_path else None
        self.default_profile = default_profile
        self.brand_token = brand_token

    def profile_path(self, name: str) -> Path:
        return self.profiles_dir / f"{name}{PROFILE_SUFFIX}"

    def _legacy_available(self, name: str) -> bool:
        return (
            name == self.default_profile
            and self.legacy_cookies_path is not None
            and self.legacy_cookies_path.is_file()
        )

    def ensure_dir(self) -> None:
        if not self.profiles_dir.exists():
            self.profiles_dir.mkdir(parents=True, exist_ok=True)
            logger.info("profiles_dir_created", path=str(self.profiles_dir))

    def migrate_legacy(self) -> bool:
        """
        Copy the legacy cookies file to the default profile if that profile
        does not exist yet. Returns True when a copy was made.
        """
        if not self._legacy_available(self.default_profile):
            return False
        target = self.profile_path(self.default_profile)
        if target.exists():
            return False
        try:
            self.ensure_dir()
            shutil.copyfile(self.legacy_cookies_path, target)
        except OSError as e:
            logger.warning(
                "legacy_cookies_migration_failed",
                source=str(self.legacy_cookies_path),
                error=str(e),
            )
            return False
        logger.info(
            "legacy_cookies_migrated",
            source=str(self.legacy_cookies_path),
            profile=self.default_profile,
        )
        return True

    def exists(self, name: str) -> bool:
        return self.profile_path(name).is_file() or self._legacy_available(name)

    def names(self) -> list[str]:
        if not self.profiles_dir.is_dir():
            return []
        return sorted(
            path.stem
            for path in self.profiles_dir.glob(f"*{PROFILE_SUFFIX}")
            if path.is_file() and is_valid_profile_name(path.stem)
        )

    def list(self) -> list[ProfileInfo]:
        """List every profile file; corrupt ones are reported with 0 cookies."""
        profiles: list[ProfileInfo] = []
        for name in self.names():
            try:
                cookies = self._read_cookies(self.profile_path(name))
            except ProfileParseError:
                profiles.append(ProfileInfo(name=name, cookie_count=0, domain=None))
                continue
            profiles.append(
                ProfileInfo(
                    name=name,
                    cookie_count=len(cookies),
                    domain=extract_domain(cookies, self.brand_token),
                )
            )
        return profiles

    def load(self, name: str) -> list[Cookie]:
        """
        Read and normalize a profile's cookies.

        Raises ProfileNotFoundError or ProfileParseError.
        """
        path = self.profile_path(name)
        if path.is_file():
            return self._read_cookies(path)

        if self._legacy_available(name):
            cookies = self._read_cookies(self.legacy_cookies_path)
            logger.info("profile_loaded_from_legacy_path", profile=name)
            self.migrate_legacy()
            return cookies

        raise ProfileNotFoundError(name, self.names())

    def save(self, name: str, payload: str) -> int:
        """
        Validate and atomically overwrite a profile. Returns the cookie count.

        Raises ProfileValidationError (nothing written) or ProfileWriteError.
        """
        if not is_valid_profile_name(name):
            raise ProfileValidationError(invalid_name_message(name))
        cookies = parse_cookies_payload(payload)

        path = self.profile_path(name)
        tmp_name: Optional[str] = None
        try:
            self.ensure_dir()
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{name}.", suffix=".tmp", dir=str(self.profiles_dir)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(cookies, f, indent=2)
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            logger.error("profile_write_failed", profile=name, error=str(e))
            raise ProfileWriteError(f"Failed to save profile: {e}") from e
        finally:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

        logger.info("profile_saved", profile=name, cookie_count=len(cookies))
        return len(cookies)

    def _read_cookies(self, path: Path) -> list[Cookie]:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ProfileParseError(f"Failed to parse profile file {path.name}: {e}") from e
        if not isinstance(data, list):
            raise ProfileParseError(f"Profile file {path.name} is not a JSON array")
        return normalize_cookies(data, source=path.name)
