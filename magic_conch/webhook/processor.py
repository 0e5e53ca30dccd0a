"""
Conch Processor Module

This module decides whether an inbound message gets an answer and, if so,
sends it.

Design Decisions:
- Single responsibility: guard, match, choose, dispatch
- Collaborators (config, chooser, sender) are injected, never looked up
- A failed bot post is logged and reported, never raised to the webhook
"""

from magic_conch.config import BotConfig
from magic_conch.logging_config import get_logger
from magic_conch.models import ConchResult, ConchStatus, InboundMessage, OutboundPayload
from magic_conch.services.conch import ReplyChooser, wants_magic_conch
from magic_conch.services.groupme_client import GroupMeAPIError, MessageSender

logger = get_logger(__name__)


class ConchProcessor:
    """
    Answers /magicconch questions.

    Usage:
        processor = ConchProcessor(bot_config, chooser, sender)
        result = await processor.process(message)
    """

    def __init__(
        self,
        bot_config: BotConfig,
        chooser: ReplyChooser,
        sender: MessageSender
    ):
        self.bot_config = bot_config
        self.chooser = chooser
        self.sender = sender

    async def process(self, message: InboundMessage) -> ConchResult:
        """
        Handle one inbound message.

        Args:
            message: Parsed GroupMe callback

        Returns:
            ConchResult describing what was done
        """
        # Skip the bot's own posts
        if message.sender_id == self.bot_config.bot_id:
            logger.debug("Ignoring message from the bot itself", message_id=message.message_id)
            return ConchResult(status=ConchStatus.IGNORED_SELF)

        if not wants_magic_conch(message.text, self.bot_config.trigger_prefix):
            return ConchResult(status=ConchStatus.NOT_TRIGGERED)

        reply_text = self.chooser.choose()

        logger.info(
            "Magic Conch summoned",
            message_id=message.message_id,
            sender=message.name,
            group_id=message.group_id,
            reply=reply_text
        )

        payload = self._build_payload(reply_text, message.message_id)

        try:
            response = await self.sender.send(payload)
        except GroupMeAPIError as e:
            logger.warning(
                "Failed to post conch reply",
                message_id=message.message_id,
                status_code=e.status_code,
                error=str(e)
            )
            return ConchResult(
                status=ConchStatus.DISPATCH_FAILED,
                reply_text=reply_text,
                status_code=e.status_code,
                error=str(e)
            )

        logger.info(
            "Conch reply posted",
            message_id=message.message_id,
            status_code=response.status_code
        )
        return ConchResult(
            status=ConchStatus.REPLIED,
            reply_text=reply_text,
            status_code=response.status_code
        )

    def _build_payload(self, reply_text: str, message_id: str) -> OutboundPayload:
        if self.bot_config.reply_threaded:
            return OutboundPayload.reply(self.bot_config.bot_id, reply_text, message_id)
        return OutboundPayload(bot_id=self.bot_config.bot_id, text=reply_text)
