"""
WhatsApp commerce bot - main entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from src.bot.webhook import router as webhook_router
from src.config import settings
from src.core.conversation.engine import ConversationEngine
from src.db.sqlite import db
from src.db.store import SqlStore
from src.integrations.nlp import get_intent_classifier
from src.integrations.whatsapp import WhatsAppMessenger


# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


async def build_engine() -> ConversationEngine:
    """Initialize storage and clients and wire them into the engine."""
    await db.init()
    logger.info("Database initialized")

    return ConversationEngine(
        store=SqlStore(db),
        messenger=WhatsAppMessenger(),
        classifier=get_intent_classifier(),
    )


def create_app(
    engine: Optional[ConversationEngine] = None,
    verify_token: Optional[str] = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        engine: Pre-built engine (tests); built on startup when omitted
        verify_token: Handshake secret; defaults to settings.verify_token
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting WhatsApp commerce bot...")
        owns_engine = app.state.engine is None
        if owns_engine:
            app.state.engine = await build_engine()
        try:
            yield
        finally:
            logger.info("Shutting down WhatsApp commerce bot...")
            if owns_engine:
                await app.state.engine.messenger.close()
                await app.state.engine.classifier.close()
                await db.close()
            logger.info("Cleanup complete")

    app = FastAPI(title="WhatsApp Commerce Bot", lifespan=lifespan)
    app.state.engine = engine
    app.state.verify_token = verify_token or settings.verify_token
    app.state.admin_command = settings.admin_resume_command

    @app.get("/", response_class=PlainTextResponse)
    async def index() -> str:
        return "WhatsApp Bot Server is running!"

    app.include_router(webhook_router)
    return app


def main() -> None:
    """Run the HTTP server."""
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
