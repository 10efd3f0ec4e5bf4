"""
WhatsApp webhook routes.

GET performs the subscription handshake; POST acknowledges every delivery
immediately and processes its messages in the background.
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Query, Request, Response
from fastapi.responses import JSONResponse, PlainTextResponse

from src.bot.parser import parse_webhook
from src.core.conversation.engine import ConversationEngine
from src.core.conversation.messages import InboundEvent

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhook", tags=["WhatsApp"])


@router.get("")
async def verify_webhook(
    request: Request,
    mode: Optional[str] = Query(default=None, alias="hub.mode"),
    token: Optional[str] = Query(default=None, alias="hub.verify_token"),
    challenge: Optional[str] = Query(default=None, alias="hub.challenge"),
) -> Response:
    """Answer the platform's verification challenge."""
    expected = request.app.state.verify_token

    if mode == "subscribe" and expected and token == expected:
        logger.info("Webhook verified")
        return PlainTextResponse(challenge or "", status_code=200)

    logger.warning(f"Webhook verification rejected (mode={mode!r})")
    return Response(status_code=403)


@router.post("")
async def receive_webhook(request: Request, background_tasks: BackgroundTasks) -> Response:
    """Acknowledge a delivery and schedule its messages for processing."""
    try:
        body = await request.json()
    except ValueError:
        logger.warning("Webhook body is not valid JSON")
        return Response(status_code=400)

    if not isinstance(body, dict) or not body.get("object"):
        return Response(status_code=404)

    try:
        events = parse_webhook(body, request.app.state.admin_command)
    except Exception as e:
        logger.error(f"Failed to parse webhook delivery: {e}", exc_info=True)
        events = []

    if events:
        background_tasks.add_task(dispatch_events, request.app.state.engine, events)

    # Must answer quickly or the platform retries the delivery
    return JSONResponse({"status": "received"}, status_code=200)


async def dispatch_events(engine: ConversationEngine, events: list[InboundEvent]) -> None:
    """
    Run all events of one delivery.

    Different senders proceed concurrently; the engine's per-sender lock
    keeps same-sender events in envelope order.
    """
    results = await asyncio.gather(
        *(engine.handle(event) for event in events),
        return_exceptions=True,
    )
    for event, result in zip(events, results):
        if isinstance(result, BaseException):
            logger.error(
                f"Unhandled error processing message {event.message_id} from {event.sender}",
                exc_info=result,
            )
