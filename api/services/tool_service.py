"""
Service layer for tool invocations.

Applies the profile confirmation gate to identity-scoped tools, runs browser
operations one at a time, and converts every failure into a ToolResponse so
that callers never see a raw exception.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional

from api.schemas import ToolResponse
from automation.client import RetailClient
from profiles.models import ConfirmationPrompt
from profiles.session import SessionController, SessionSnapshot
from shared.config import AppConfig
from shared.errors import RetailAutomationError
from shared.logging import clear_request_context, get_logger

logger = get_logger(__name__)

ClientFactory = Callable[[AppConfig, SessionSnapshot], RetailClient]
ToolCall = Callable[[RetailClient, SessionSnapshot], Awaitable[ToolResponse]]


def default_client_factory(config: AppConfig, session: SessionSnapshot) -> RetailClient:
    return RetailClient(config, session)


def _records(items) -> list[dict]:
    return [item.to_dict() for item in items]


class ToolService:
    """Service for tool operations."""

    def __init__(
        self,
        controller: SessionController,
        config: AppConfig,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.controller = controller
        self.config = config
        self.client_factory = client_factory or default_client_factory
        self._operation_lock = asyncio.Lock()

    # --- profile tools (no confirmation required) ---

    def list_profiles(self) -> ToolResponse:
        current = self.controller.current_profile
        confirmed = self.controller.is_session_confirmed()
        profiles = [
            {**info.to_dict(), "active": info.name == current}
            for info in self.controller.list_profiles()
        ]
        if profiles:
            message = f"Found {len(profiles)} profile(s). Active profile: {current}"
        else:
            message = "No profiles found. Save one with the save-profile tool."
        return ToolResponse(
            success=True,
            message=message,
            profile=current,
            data={
                "profiles": profiles,
                "current_profile": current,
                "session_confirmed": confirmed,
            },
        )

    def get_current_profile(self) -> ToolResponse:
        snapshot = self.controller.snapshot()
        if snapshot.domain_low_confidence:
            logger.warning(
                "active_profile_domain_low_confidence",
                profile=snapshot.profile,
                domain=snapshot.domain,
            )
        return ToolResponse(
            success=True,
            message=(
                f'Current profile: "{snapshot.profile}". '
                f"Session confirmed: {'yes' if snapshot.confirmed else 'no'}"
            ),
            profile=snapshot.profile,
            data={
                "current_profile": snapshot.profile,
                "session_confirmed": snapshot.confirmed,
                "cookie_count": len(snapshot.cookies),
                "domain": snapshot.domain,
                "domain_low_confidence": snapshot.domain_low_confidence,
            },
        )

    def switch_profile(self, name: str) -> ToolResponse:
        result = self.controller.switch_profile(name)
        return self._profile_response(result)

    def save_profile(self, name: str, cookies_json: str) -> ToolResponse:
        result = self.controller.save_profile(name, cookies_json)
        return self._profile_response(result)

    def confirm_profile(self, name: Optional[str] = None) -> ToolResponse:
        result = self.controller.confirm_session(name)
        return self._profile_response(result)

    def _profile_response(self, result) -> ToolResponse:
        data = {
            "reason": result.reason,
            "available_profiles": result.available_profiles,
            "session_confirmed": self.controller.is_session_confirmed(),
        }
        return ToolResponse(
            success=result.success,
            message=result.message,
            profile=result.profile,
            data=data,
            error_kind=None if result.success else result.reason,
        )

    # --- public catalog tools (no confirmation required) ---

    async def search_products(self, term: str) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            results = await client.search_products(term)
            return ToolResponse(
                success=True,
                message=f'Found {len(results)} products for "{term}"',
                profile=session.profile,
                data=_records(results),
            )

        return await self._run("search-products", call, gated=False)

    async def get_product_details(self, asin: str) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            detail = await client.get_product_details(asin)
            return ToolResponse(
                success=True,
                message=f"Product details for {detail.asin}",
                profile=session.profile,
                data=detail.to_dict(),
            )

        return await self._run("get-product-details", call, gated=False)

    # --- account tools (confirmation required) ---

    async def get_cart_content(self) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            cart = await client.get_cart_content()
            message = (
                "Your cart is empty"
                if cart.is_empty
                else f"Cart has {cart.total_items} item(s), subtotal {cart.subtotal or 'unknown'}"
            )
            return ToolResponse(
                success=True, message=message, profile=session.profile, data=cart.to_dict()
            )

        return await self._run("get-cart-content", call, gated=True)

    async def add_to_cart(self, asin: str) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            result = await client.add_to_cart(asin)
            return ToolResponse(
                success=result.success,
                message=result.message,
                profile=session.profile,
                data=result.to_dict(),
            )

        return await self._run("add-to-cart", call, gated=True)

    async def clear_cart(self) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            result = await client.clear_cart()
            return ToolResponse(
                success=result.success,
                message=result.message,
                profile=session.profile,
                data={**result.to_dict(), "partial": result.partial},
            )

        return await self._run("clear-cart", call, gated=True)

    async def get_orders_history(self) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            orders = await client.get_orders_history()
            return ToolResponse(
                success=True,
                message=f"Found {len(orders)} order(s)",
                profile=session.profile,
                data=_records(orders),
            )

        return await self._run("get-orders-history", call, gated=True)

    async def perform_purchase(self) -> ToolResponse:
        async def call(client: RetailClient, session: SessionSnapshot) -> ToolResponse:
            # Purchases are simulated; no browser work is done.
            logger.info("purchase_simulated", profile=session.profile)
            return ToolResponse(
                success=True,
                message=(
                    "Purchase confirmed! You can now consult your orders history to see "
                    f"the details of your latest purchase. (Profile: {session.profile})"
                ),
                profile=session.profile,
            )

        return await self._run("perform-purchase", call, gated=True)

    # --- boundary ---

    def _confirmation_required(
        self, tool: str, session: SessionSnapshot, prompt: ConfirmationPrompt
    ) -> ToolResponse:
        logger.info("confirmation_required", tool=tool, profile=session.profile)
        return ToolResponse(
            success=False,
            message=(
                f'Profile confirmation required before running {tool}. '
                f'The active profile is "{session.profile}".'
            ),
            profile=session.profile,
            confirmation=prompt.to_dict(),
            error_kind="confirmation_required",
        )

    async def _run(self, tool: str, call: ToolCall, *, gated: bool) -> ToolResponse:
        """
        Run one tool call under the operation lock.

        The identity snapshot is taken after the lock is acquired, so the gate
        check and the operation see the same profile even if a switch was
        requested while this call was waiting.
        """
        async with self._operation_lock:
            session = self.controller.snapshot()
            if gated:
                decision = self.controller.require_confirmation(session)
                if not decision.proceed:
                    return self._confirmation_required(tool, session, decision.prompt)

            try:
                client = self.client_factory(self.config, session)
                return await call(client, session)
            except RetailAutomationError as e:
                logger.warning(
                    "tool_failed",
                    tool=tool,
                    profile=session.profile,
                    error=e.message,
                    error_kind=e.error_kind,
                )
                return ToolResponse(
                    success=False,
                    message=e.message,
                    profile=session.profile,
                    error_kind=e.error_kind,
                )
            except Exception as e:
                logger.error(
                    "tool_unexpected_error",
                    tool=tool,
                    profile=session.profile,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                return ToolResponse(
                    success=False,
                    message=f"Unexpected error while running {tool}: {e}",
                    profile=session.profile,
                    error_kind="internal_error",
                )
            finally:
                clear_request_context()
