"""
FastAPI application entrypoint for the retail automation tool API.

This module builds the process-wide credential store, session controller and
tool service, configures logging, and registers route handlers. Run with:

    uvicorn api.main:create_app --factory
"""

from __future__ import annotations

import logging
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

from api.routes import tools
from api.services.tool_service import ClientFactory, ToolService
from profiles.session import SessionController
from profiles.store import CredentialStore
from shared.config import AppConfig, get_config
from shared.logging import configure_logging, get_logger

logger = get_logger(__name__)


def build_session_controller(config: AppConfig) -> SessionController:
    store = CredentialStore(
        config.profiles_dir,
        legacy_cookies_path=config.legacy_cookies_path,
        default_profile=config.default_profile,
        brand_token=config.brand_token,
    )
    return SessionController(
        store,
        default_domain=config.default_domain,
        brand_token=config.brand_token,
    )


def create_app(
    config: Optional[AppConfig] = None,
    controller: Optional[SessionController] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    if config is None:
        load_dotenv()
        config = get_config()

    # Configure structured logging
    log_level = logging.getLevelName(config.log_level.upper())
    configure_logging(level=log_level, log_file=config.log_file, log_stdout=config.log_stdout)

    if controller is None:
        controller = build_session_controller(config)

    app = FastAPI(
        title="Retail Automation Tool API",
        description="Multi-profile retail account automation exposed as tools",
        version="0.1.0",
    )
    app.state.config = config
    app.state.tool_service = ToolService(controller, config, client_factory=client_factory)

    # Register route handlers
    app.include_router(tools.router)

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok", "profile": controller.current_profile}

    logger.info(
        "app_created",
        environment=config.environment,
        profile=controller.current_profile,
        use_mocks=config.use_mocks,
    )
    return app
