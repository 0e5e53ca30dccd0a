"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It wires the conch collaborators, routes and exception handlers.

Design Decisions:
- Build the bot config, chooser and sender once per app and keep them on app.state
- Use lifespan events for startup/shutdown
- Unparseable callbacks become a 500, matching a servlet that simply throws
- Expose health and readiness endpoints
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from magic_conch import __version__
from magic_conch.config import MissingConfigurationError, Settings, get_settings
from magic_conch.logging_config import get_logger, setup_logging
from magic_conch.services.conch import RandomReplyChooser, ReplyChooser
from magic_conch.services.groupme_client import GroupMeClient, MessageSender
from magic_conch.webhook import MalformedPayloadError
from magic_conch.webhook import router as webhook_router

# Initialize logging first
setup_logging()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    A missing bot ID only warns unless strict_startup is set: the bot can
    still receive callbacks, it just cannot post.
    """
    settings: Settings = app.state.settings

    logger.info(
        "Starting Magic Conch",
        host=settings.host,
        port=settings.port
    )

    try:
        settings.require_bot_id()
    except MissingConfigurationError as e:
        if settings.strict_startup:
            logger.error("Configuration validation failed", error=str(e))
            raise
        logger.warning(
            "Bot ID not configured; replies will be rejected by GroupMe",
            error=str(e)
        )

    yield

    logger.info("Shutting down Magic Conch")


def create_app(
    settings: Optional[Settings] = None,
    chooser: Optional[ReplyChooser] = None,
    sender: Optional[MessageSender] = None
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        chooser: Reply chooser (defaults to uniform random over the conch phrases)
        sender: Message sender (defaults to the GroupMe client)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Magic Conch",
        description="GroupMe bot that consults the Magic Conch",
        version=__version__,
        lifespan=lifespan
    )

    app.state.settings = settings
    app.state.bot_config = settings.bot_config()
    app.state.reply_chooser = chooser or RandomReplyChooser()
    app.state.message_sender = sender or GroupMeClient(settings)

    app.include_router(webhook_router)

    @app.exception_handler(MalformedPayloadError)
    async def malformed_payload_handler(
        request: Request,
        exc: MalformedPayloadError
    ) -> JSONResponse:
        """Reject a callback body we cannot understand."""
        logger.error(
            "Malformed webhook payload",
            path=request.url.path,
            error=str(exc)
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Malformed webhook payload",
                "type": type(exc).__name__
            }
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__
            }
        )

    @app.get("/health")
    async def health_check():
        """Health check endpoint for load balancers and monitors."""
        return {
            "status": "healthy",
            "service": "magic-conch",
            "version": __version__
        }

    @app.get("/ready")
    async def readiness_check(request: Request):
        """
        Readiness check endpoint.

        Ready once a bot ID is configured, since without it nothing can be posted.
        """
        if not request.app.state.bot_config.has_bot_id:
            logger.error("Readiness check failed", error="bot ID not configured")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Not ready: GroupMe bot ID not configured"
            )

        return {
            "status": "ready",
            "service": "magic-conch"
        }

    return app


# Create the application instance
app = create_app()
