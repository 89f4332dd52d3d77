#!/usr/bin/env python3
"""
CLI script for running a single tool from a shell.

Usage: python run_tool.py <tool-name> [--profile NAME] [--asin ASIN] [--term TEXT]
                          [--cookies-file PATH] [--confirm] [--mock] [--no-headless]

Each run is a fresh process, so the confirmation gate starts closed: pass
--confirm to confirm the active profile (or --profile) before the tool runs.
"""

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

from api.main import build_session_controller
from api.services.tool_service import ToolService
from shared.config import get_config
from shared.logging import configure_logging

TOOLS = (
    "list-profiles",
    "get-current-profile",
    "switch-profile",
    "save-profile",
    "confirm-profile",
    "search-products",
    "get-product-details",
    "get-cart-content",
    "add-to-cart",
    "clear-cart",
    "get-orders-history",
    "perform-purchase",
)


async def run(service: ToolService, args: argparse.Namespace):
    tool = args.tool
    if tool == "list-profiles":
        return service.list_profiles()
    if tool == "get-current-profile":
        return service.get_current_profile()
    if tool == "switch-profile":
        return service.switch_profile(args.profile or "")
    if tool == "save-profile":
        if not args.cookies_file:
            sys.exit("save-profile needs --cookies-file")
        payload = Path(args.cookies_file).read_text(encoding="utf-8")
        return service.save_profile(args.profile or "", payload)
    if tool == "confirm-profile":
        return service.confirm_profile(args.profile)
    if tool == "search-products":
        return await service.search_products(args.term or "")
    if tool == "get-product-details":
        return await service.get_product_details(args.asin or "")
    if tool == "get-cart-content":
        return await service.get_cart_content()
    if tool == "add-to-cart":
        return await service.add_to_cart(args.asin or "")
    if tool == "clear-cart":
        return await service.clear_cart()
    if tool == "get-orders-history":
        return await service.get_orders_history()
    return await service.perform_purchase()


async def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Run one retail automation tool")
    parser.add_argument("tool", choices=TOOLS)
    parser.add_argument("--profile", help="Profile name (switch/save/confirm)")
    parser.add_argument("--asin", help="Product ASIN (get-product-details, add-to-cart)")
    parser.add_argument("--term", help="Search term (search-products)")
    parser.add_argument("--cookies-file", help="Cookie JSON export (save-profile)")
    parser.add_argument(
        "--confirm",
        action="store_true",
        help="Confirm the active profile (or --profile) before running the tool.",
    )
    parser.add_argument("--mock", action="store_true", help="Read markup from snapshot files.")
    parser.add_argument(
        "--no-headless",
        action="store_true",
        help="Show browser window (Chrome). Use for local debugging.",
    )
    args = parser.parse_args()

    config = get_config()
    if args.mock or args.no_headless:
        config = dataclasses.replace(
            config,
            use_mocks=config.use_mocks or args.mock,
            browser_visible=config.browser_visible or args.no_headless,
        )
    configure_logging(
        level=logging.getLevelName(config.log_level.upper()),
        log_file=config.log_file,
        log_stdout=config.log_stdout,
    )

    controller = build_session_controller(config)
    service = ToolService(controller, config)

    if args.confirm and args.tool != "confirm-profile":
        confirmation = service.confirm_profile(args.profile)
        if not confirmation.success:
            print(json.dumps(confirmation.model_dump(), indent=2))
            sys.exit(1)

    response = await run(service, args)

    print(json.dumps(response.model_dump(), indent=2))
    if not response.success:
        sys.exit(1)


if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
