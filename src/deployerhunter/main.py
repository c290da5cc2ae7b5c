"""Deployer Hunter - Main application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import gradio as gr
import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deployerhunter.api.routes import health, tokens
from deployerhunter.config import get_settings
from deployerhunter.config.logging import configure_logging
from deployerhunter.services.ranking.board import get_token_board, reset_token_board
from deployerhunter.ui.app import create_dashboard

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle.

    On startup: Configure logging and wire the token board.
    On shutdown: Close upstream HTTP clients.
    """
    configure_logging()
    settings = get_settings()
    get_token_board()
    log.info(
        "application_started",
        token_source=settings.token_source,
        reputation_mode=settings.reputation_mode,
        backend_configured=settings.backend_base_url is not None,
        rpc_key_configured=settings.has_helius_key,
    )

    yield

    await reset_token_board()
    log.info("shutdown_complete")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Ranked dashboard of fresh Solana launch-platform tokens",
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.debug else [],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    # Register API routes
    application.include_router(health.router, prefix="/api")
    application.include_router(tokens.router, prefix="/api")

    # Must be mounted AFTER registering API routes
    dashboard = create_dashboard()
    application = gr.mount_gradio_app(
        app=application,
        blocks=dashboard,
        path="/dashboard",
    )
    log.info("dashboard_mounted", path="/dashboard")

    return application


# Create the app instance
app = create_app()


def main() -> None:
    """Run the application with uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "deployerhunter.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
