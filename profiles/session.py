"""
Profile/session controller: active profile, its cookies, and the
confirmation gate for identity-scoped operations.

State machine: {unconfirmed, confirmed} x active profile.
- A successful switch always lands in `unconfirmed`.
- Only `confirm_session()` moves to `confirmed`, and only after any switch it
  requested has succeeded.

All reads and writes of the state go through one RLock; operations take an
immutable `SessionSnapshot` so the identity they run with cannot change
underneath them.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Optional

from profiles.domain import resolve_domain
from profiles.models import (
    ConfirmationPrompt,
    Cookie,
    GateDecision,
    ProfileInfo,
    ProfileResult,
    PromptOption,
    is_valid_profile_name,
)
from profiles.store import CredentialStore, invalid_name_message
from shared.errors import (
    ProfileNotFoundError,
    ProfileParseError,
    ProfileValidationError,
    ProfileWriteError,
)
from shared.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """Consistent view of the session state at one instant."""

    profile: str
    cookies: tuple[Cookie, ...]
    confirmed: bool
    domain: str
    domain_low_confidence: bool


class SessionController:
    def __init__(
        self,
        store: CredentialStore,
        *,
        default_domain: str = "amazon.com",
        brand_token: str = "amazon",
    ) -> None:
        self.store = store
        self.default_domain = default_domain
        self.brand_token = brand_token
        self._lock = threading.RLock()
        self._current_profile = store.default_profile
        self._cookies: list[Cookie] = []
        self._confirmed = False
        self._initialize()

    def _initialize(self) -> None:
        self.store.ensure_dir()
        self.store.migrate_legacy()
        try:
            self._cookies = self.store.load(self._current_profile)
        except (ProfileNotFoundError, ProfileParseError) as e:
            # Public operations still work without cookies.
            logger.warning(
                "default_profile_not_loaded",
                profile=self._current_profile,
                error=str(e),
                error_kind=e.error_kind,
            )
            return
        logger.info(
            "profile_loaded", profile=self._current_profile, cookie_count=len(self._cookies)
        )

    # --- reads ---

    @property
    def current_profile(self) -> str:
        with self._lock:
            return self._current_profile

    def current_cookies(self) -> list[Cookie]:
        with self._lock:
            return list(self._cookies)

    def is_session_confirmed(self) -> bool:
        with self._lock:
            return self._confirmed

    def list_profiles(self) -> list[ProfileInfo]:
        return self.store.list()

    def snapshot(self) -> SessionSnapshot:
        with self._lock:
            resolution = resolve_domain(
                self._cookies, default_domain=self.default_domain, brand_token=self.brand_token
            )
            return SessionSnapshot(
                profile=self._current_profile,
                cookies=tuple(self._cookies),
                confirmed=self._confirmed,
                domain=resolution.domain,
                domain_low_confidence=resolution.low_confidence,
            )

    # --- transitions ---

    def switch_profile(self, name: str) -> ProfileResult:
        with self._lock:
            if not is_valid_profile_name(name):
                return ProfileResult(
                    success=False,
                    message=invalid_name_message(name),
                    profile=self._current_profile,
                    reason="invalid_name",
                )

            if not self.store.exists(name):
                available = self.store.names()
                return ProfileResult(
                    success=False,
                    message=str(ProfileNotFoundError(name, available)),
                    profile=self._current_profile,
                    reason="not_found",
                    available_profiles=available,
                )

            try:
                cookies = self.store.load(name)
            except (ProfileNotFoundError, ProfileParseError) as e:
                logger.error("profile_load_failed", profile=name, error=str(e))
                return ProfileResult(
                    success=False,
                    message=f'Failed to load profile "{name}": {e}',
                    profile=self._current_profile,
                    reason="load_failed",
                )

            previous = self._current_profile
            self._cookies = cookies
            self._current_profile = name
            self._confirmed = False
            logger.info(
                "profile_switched",
                previous_profile=previous,
                profile=name,
                cookie_count=len(cookies),
            )
            return ProfileResult(
                success=True,
                message=(
                    f'Switched to profile "{name}" ({len(cookies)} cookies loaded). '
                    "Session confirmation required for account-specific operations."
                ),
                profile=name,
            )

    def confirm_session(self, name: Optional[str] = None) -> ProfileResult:
        with self._lock:
            if name and name != self._current_profile:
                switch_result = self.switch_profile(name)
                if not switch_result.success:
                    return switch_result

            self._confirmed = True
            logger.info("session_confirmed", profile=self._current_profile)
            return ProfileResult(
                success=True,
                message=(
                    f'Session confirmed for profile "{self._current_profile}". '
                    "You can now perform account-specific operations."
                ),
                profile=self._current_profile,
            )

    def save_profile(self, name: str, payload: str) -> ProfileResult:
        """Save cookies under `name`. Never changes the active profile."""
        current = self.current_profile
        if not is_valid_profile_name(name):
            return ProfileResult(
                success=False,
                message=invalid_name_message(name),
                profile=current,
                reason="invalid_name",
            )
        try:
            count = self.store.save(name, payload)
        except ProfileValidationError as e:
            return ProfileResult(
                success=False, message=e.message, profile=current, reason="invalid_payload"
            )
        except ProfileWriteError as e:
            return ProfileResult(
                success=False, message=e.message, profile=current, reason="write_failed"
            )
        return ProfileResult(
            success=True,
            message=(
                f'Profile "{name}" saved successfully with {count} cookies. '
                f'Switch to "{name}" to activate it.'
            ),
            profile=current,
        )

    # --- gate ---

    def confirmation_prompt(self, current: Optional[str] = None) -> ConfirmationPrompt:
        if current is None:
            with self._lock:
                current = self._current_profile
        names = self.store.names()
        options = [
            PromptOption(
                label=f"{name} (current)" if name == current else name,
                value=name,
                description=(
                    "Continue with the currently active profile"
                    if name == current
                    else f"Switch to the {name} profile"
                ),
            )
            for name in names
        ]
        return ConfirmationPrompt(
            current_profile=current,
            available_profiles=names,
            question="Which account should be used for this operation?",
            options=options,
        )

    def require_confirmation(self, snapshot: Optional[SessionSnapshot] = None) -> GateDecision:
        """
        Gate for identity-scoped operations.

        When a snapshot is given the decision and the prompt are built from it,
        so a caller that already holds an identity never re-reads live state.
        """
        if snapshot is None:
            snapshot = self.snapshot()
        if snapshot.confirmed:
            return GateDecision(proceed=True)
        return GateDecision(proceed=False, prompt=self.confirmation_prompt(snapshot.profile))
