"""
Route handlers for tool endpoints.

Every tool is POST /tools/<tool-name> and answers 200 with a ToolResponse;
only malformed request bodies are rejected by validation (422).
"""

from __future__ import annotations

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Request

from api.schemas import (
    AsinRequest,
    ConfirmProfileRequest,
    SaveProfileRequest,
    SearchProductsRequest,
    SwitchProfileRequest,
    ToolResponse,
)
from api.services.tool_service import ToolService
from shared.logging import bind_request_context, get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/tools", tags=["tools"])


def get_tool_service(request: Request) -> ToolService:
    """Dependency to get the process-wide ToolService."""
    return request.app.state.tool_service


Service = Annotated[ToolService, Depends(get_tool_service)]


# Profile management (no confirmation required)


@router.post("/list-profiles", response_model=ToolResponse, summary="List saved profiles")
def list_profiles(service: Service) -> ToolResponse:
    return service.list_profiles()


@router.post(
    "/get-current-profile",
    response_model=ToolResponse,
    summary="Show the active profile and whether it is confirmed",
)
def get_current_profile(service: Service) -> ToolResponse:
    return service.get_current_profile()


@router.post("/switch-profile", response_model=ToolResponse, summary="Activate another profile")
def switch_profile(request: SwitchProfileRequest, service: Service) -> ToolResponse:
    bind_request_context(operation="switch-profile")
    logger.info("switch_profile_requested", target_profile=request.profile)
    return service.switch_profile(request.profile)


@router.post("/save-profile", response_model=ToolResponse, summary="Create or overwrite a profile")
def save_profile(request: SaveProfileRequest, service: Service) -> ToolResponse:
    bind_request_context(operation="save-profile")
    logger.info("save_profile_requested", target_profile=request.profile)
    return service.save_profile(request.profile, request.cookies_json)


@router.post(
    "/confirm-profile",
    response_model=ToolResponse,
    summary="Confirm the active profile (optionally switching first)",
)
def confirm_profile(
    service: Service, request: Optional[ConfirmProfileRequest] = None
) -> ToolResponse:
    profile = request.profile if request is not None else None
    return service.confirm_profile(profile)


# Catalog (no confirmation required)


@router.post("/search-products", response_model=ToolResponse, summary="Search the catalog")
async def search_products(request: SearchProductsRequest, service: Service) -> ToolResponse:
    return await service.search_products(request.search_term)


@router.post(
    "/get-product-details", response_model=ToolResponse, summary="Product detail by ASIN"
)
async def get_product_details(request: AsinRequest, service: Service) -> ToolResponse:
    return await service.get_product_details(request.asin)


# Account (confirmation required)


@router.post("/get-cart-content", response_model=ToolResponse, summary="Read the cart")
async def get_cart_content(service: Service) -> ToolResponse:
    return await service.get_cart_content()


@router.post("/add-to-cart", response_model=ToolResponse, summary="Add a product to the cart")
async def add_to_cart(request: AsinRequest, service: Service) -> ToolResponse:
    return await service.add_to_cart(request.asin)


@router.post("/clear-cart", response_model=ToolResponse, summary="Remove every cart line")
async def clear_cart(service: Service) -> ToolResponse:
    return await service.clear_cart()


@router.post(
    "/get-orders-history", response_model=ToolResponse, summary="Read the order history"
)
async def get_orders_history(service: Service) -> ToolResponse:
    return await service.get_orders_history()


@router.post(
    "/perform-purchase", response_model=ToolResponse, summary="Place the order (simulated)"
)
async def perform_purchase(service: Service) -> ToolResponse:
    return await service.perform_purchase()
