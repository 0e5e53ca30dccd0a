"""
GroupMe API Client Module

This module posts bot messages to the GroupMe v3 API.

Design Decisions:
- Use httpx for async HTTP requests
- One short-lived client per post so the connection is always released
- Bounded timeout; no retries (a lost conch answer is acceptable)
- Network errors and non-2xx responses surface as GroupMeAPIError
"""

from typing import List, Optional, Protocol, runtime_checkable

import httpx

from magic_conch.config import Settings, get_settings
from magic_conch.logging_config import get_logger
from magic_conch.models import OutboundPayload, ReplyAttachment

logger = get_logger(__name__)


class GroupMeAPIError(Exception):
    """Custom exception for failed bot posts."""
    def __init__(self, message: str, status_code: int = None, response_body: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_body = response_body


@runtime_checkable
class MessageSender(Protocol):
    """Delivers an outbound bot post."""

    async def send(self, payload: OutboundPayload) -> httpx.Response: ...


class GroupMeClient:
    """
    Async client for the GroupMe bot post endpoint.

    Usage:
        client = GroupMeClient()
        await client.send_reply(bot_id, "Yes.", message_id)
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the GroupMe client.

        Args:
            settings: Settings to read the endpoint and timeout from
            transport: Optional httpx transport (used by tests)
        """
        self.settings = settings or get_settings()
        self._transport = transport

    @property
    def post_url(self) -> str:
        return self.settings.groupme_post_url

    async def send(self, payload: OutboundPayload) -> httpx.Response:
        """
        POST a bot message to GroupMe.

        Args:
            payload: Complete bot post body

        Returns:
            httpx.Response from GroupMe (2xx)

        Raises:
            GroupMeAPIError: On network failure or a non-2xx response
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.settings.groupme_timeout,
                transport=self._transport
            ) as client:
                response = await client.post(
                    self.post_url,
                    json=payload.model_dump(),
                    headers={"Content-Type": "application/json"}
                )
        except httpx.HTTPError as e:
            logger.error(
                "GroupMe request failed",
                error=str(e),
                error_type=type(e).__name__
            )
            raise GroupMeAPIError(f"GroupMe request failed: {e}") from e

        if not response.is_success:
            error_body = response.text
            logger.error(
                "GroupMe API error",
                status_code=response.status_code,
                error=error_body[:500]
            )
            raise GroupMeAPIError(
                f"GroupMe API error: {response.status_code}",
                status_code=response.status_code,
                response_body=error_body
            )

        logger.debug("GroupMe bot post accepted", status_code=response.status_code)
        return response

    async def send_message(
        self,
        bot_id: str,
        text: str,
        attachments: Optional[List[ReplyAttachment]] = None
    ) -> httpx.Response:
        """Send a message with optional custom attachments."""
        payload = OutboundPayload(
            bot_id=bot_id,
            text=text,
            attachments=attachments or []
        )
        return await self.send(payload)

    async def send_basic(self, bot_id: str, text: str) -> httpx.Response:
        """Send a plain message with no attachments."""
        return await self.send_message(bot_id, text)

    async def send_reply(
        self,
        bot_id: str,
        text: str,
        base_message_id: str
    ) -> httpx.Response:
        """
        Send a message threaded as a reply to base_message_id.

        GroupMe answers 400 if base_message_id does not exist.
        """
        return await self.send(OutboundPayload.reply(bot_id, text, base_message_id))
