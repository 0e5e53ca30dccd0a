"""
Webhook Handler Module

This module defines the FastAPI endpoints GroupMe calls back into.

Design Decisions:
- The whole bot lives at "/": GET greets, POST handles a chat message
- Collaborators come from app.state through dependencies so tests can override them
- The reply is posted before responding; failures to post still return 200
- A body we cannot parse is a server error, not a 4xx
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from magic_conch.config import BotConfig
from magic_conch.logging_config import get_logger
from magic_conch.models import InboundMessage
from magic_conch.services.conch import ReplyChooser
from magic_conch.services.groupme_client import MessageSender
from magic_conch.webhook.processor import ConchProcessor

logger = get_logger(__name__)

GREETING = "All hail the Magic Conch!"

router = APIRouter(tags=["webhook"])


class MalformedPayloadError(Exception):
    """Raised when the callback body is not a valid GroupMe message."""
    pass


# =============================================================================
# Dependencies
# =============================================================================

def get_bot_config(request: Request) -> BotConfig:
    return request.app.state.bot_config


def get_reply_chooser(request: Request) -> ReplyChooser:
    return request.app.state.reply_chooser


def get_message_sender(request: Request) -> MessageSender:
    return request.app.state.message_sender


def get_processor(
    bot_config: BotConfig = Depends(get_bot_config),
    chooser: ReplyChooser = Depends(get_reply_chooser),
    sender: MessageSender = Depends(get_message_sender)
) -> ConchProcessor:
    return ConchProcessor(bot_config, chooser, sender)


def parse_inbound_message(raw_body: bytes) -> InboundMessage:
    """
    Parse a GroupMe callback body.

    Args:
        raw_body: Raw UTF-8 JSON request body

    Returns:
        InboundMessage

    Raises:
        MalformedPayloadError: If the body is not JSON, or text, sender_id or
            id is missing or not a string
    """
    try:
        return InboundMessage.model_validate_json(raw_body)
    except ValidationError as e:
        raise MalformedPayloadError(f"Invalid GroupMe message: {e}") from e


# =============================================================================
# Routes
# =============================================================================

@router.get("/", response_class=PlainTextResponse)
async def hail_the_conch() -> str:
    return GREETING


@router.post("/", status_code=status.HTTP_200_OK)
async def groupme_webhook(
    request: Request,
    processor: ConchProcessor = Depends(get_processor)
) -> Dict[str, Any]:
    """
    GroupMe bot callback endpoint.

    GroupMe posts every message in the group here, including the bot's own.
    Messages starting with the trigger prefix get a random conch answer,
    threaded to the question.

    Returns:
        Trivial JSON body with the processing status

    Raises:
        MalformedPayloadError: If the body cannot be parsed
    """
    raw_body = await request.body()
    message = parse_inbound_message(raw_body)

    logger.debug(
        "Received GroupMe message",
        message_id=message.message_id,
        sender_type=message.sender_type,
        group_id=message.group_id
    )

    result = await processor.process(message)

    return {"status": result.status.value}
