"""
Tests for Conch Processor

Tests the decision logic without going through HTTP.
"""

import pytest

from magic_conch.config import BotConfig
from magic_conch.models import ConchStatus, InboundMessage
from magic_conch.services.conch import CONCH_RESPONSES, RandomReplyChooser
from magic_conch.webhook.processor import ConchProcessor


def make_message(text: str, sender_id: str = "u1", message_id: str = "m1") -> InboundMessage:
    return InboundMessage(text=text, sender_id=sender_id, id=message_id)


class TestConchProcessor:
    """Test suite for ConchProcessor."""

    @pytest.fixture
    def processor(self, bot_id, sender, make_chooser) -> ConchProcessor:
        return ConchProcessor(
            BotConfig(bot_id=bot_id),
            make_chooser("I don't think so."),
            sender
        )

    @pytest.mark.asyncio
    async def test_replies_with_chosen_phrase(self, processor, sender, bot_id):
        result = await processor.process(make_message("/magicconch can I have something to eat?"))

        assert result.status == ConchStatus.REPLIED
        assert result.reply_text == "I don't think so."
        assert result.status_code == 202

        payload = sender.sent[0]
        assert payload.bot_id == bot_id
        assert payload.text == "I don't think so."
        assert len(payload.attachments) == 1
        assert payload.attachments[0].type == "reply"
        assert payload.attachments[0].base_reply_id == "m1"

    @pytest.mark.asyncio
    async def test_self_message_never_dispatched(self, processor, sender, bot_id):
        result = await processor.process(make_message("/magicconch", sender_id=bot_id))

        assert result.status == ConchStatus.IGNORED_SELF
        assert result.reply_text is None
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_untriggered_message(self, processor, sender):
        result = await processor.process(make_message("neither"))

        assert result.status == ConchStatus.NOT_TRIGGERED
        assert result.reply_text is None
        assert sender.sent == []

    @pytest.mark.asyncio
    async def test_dispatch_failure_is_reported_not_raised(self, bot_id, failing_sender, make_chooser):
        processor = ConchProcessor(BotConfig(bot_id=bot_id), make_chooser(), failing_sender)

        result = await processor.process(make_message("/magicconch"))

        assert result.status == ConchStatus.DISPATCH_FAILED
        assert result.status_code == 400
        assert result.error
        assert len(failing_sender.sent) == 1

    @pytest.mark.asyncio
    async def test_custom_trigger_prefix(self, bot_id, sender, make_chooser):
        processor = ConchProcessor(
            BotConfig(bot_id=bot_id, trigger_prefix="!conch"),
            make_chooser(),
            sender
        )

        assert (await processor.process(make_message("/magicconch"))).status == ConchStatus.NOT_TRIGGERED
        assert (await processor.process(make_message("!conch hi"))).status == ConchStatus.REPLIED

    @pytest.mark.asyncio
    async def test_random_replies_come_from_phrase_set(self, bot_id, sender):
        processor = ConchProcessor(BotConfig(bot_id=bot_id), RandomReplyChooser(), sender)

        for i in range(50):
            await processor.process(make_message("/magicconch", message_id=f"m{i}"))

        assert len(sender.sent) == 50
        assert all(p.text in CONCH_RESPONSES for p in sender.sent)
        assert [p.attachments[0].base_reply_id for p in sender.sent] == [f"m{i}" for i in range(50)]
