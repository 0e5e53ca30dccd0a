"""
Data Models Module

This module defines the Pydantic models used for the GroupMe wire formats
and for the outcome of handling one webhook call.

Design Decisions:
- Strict string typing on inbound fields so a malformed callback fails fast
- Outbound payload serializes straight into the GroupMe bots/post body
"""

from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictStr,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)


# =============================================================================
# Enums
# =============================================================================

class ConchStatus(str, Enum):
    """What happened to an inbound message."""
    IGNORED_SELF = "ignored_self"
    NOT_TRIGGERED = "not_triggered"
    REPLIED = "replied"
    DISPATCH_FAILED = "dispatch_failed"


# =============================================================================
# GroupMe Callback Models
# =============================================================================

class InboundMessage(BaseModel):
    """
    A message delivered by the GroupMe bot callback.

    GroupMe sends many more fields (avatar_url, attachments, created_at, ...);
    only the ones we use are modelled and the rest are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: StrictStr
    sender_id: StrictStr
    message_id: StrictStr = Field(alias="id")
    name: Optional[str] = None
    group_id: Optional[str] = None
    sender_type: Optional[str] = None

    @field_validator("name", "group_id", "sender_type", mode="wrap")
    @classmethod
    def drop_unreadable(cls, v: Any, handler: ValidatorFunctionWrapHandler) -> Optional[str]:
        """Logging-only fields: a value of the wrong type is dropped, not fatal."""
        try:
            return handler(v)
        except ValidationError:
            return None


# =============================================================================
# GroupMe Bot Post Models
# =============================================================================

class ReplyAttachment(BaseModel):
    """Attachment that threads a bot post as a reply to an earlier message."""
    type: Literal["reply"] = "reply"
    base_reply_id: str


class OutboundPayload(BaseModel):
    """
    Body of a POST to /v3/bots/post.

    attachments is empty for a plain post.
    """
    bot_id: str
    text: str
    attachments: List[ReplyAttachment] = Field(default_factory=list)

    @classmethod
    def reply(cls, bot_id: str, text: str, base_message_id: str) -> "OutboundPayload":
        """Build a payload threaded to base_message_id."""
        return cls(
            bot_id=bot_id,
            text=text,
            attachments=[ReplyAttachment(base_reply_id=base_message_id)]
        )


# =============================================================================
# Internal Processing Models
# =============================================================================

class ConchResult(BaseModel):
    """Outcome of processing a single inbound message."""
    status: ConchStatus
    reply_text: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[str] = None
