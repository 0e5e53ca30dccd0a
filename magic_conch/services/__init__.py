"""
Services Package

This package contains the service modules for the Magic Conch bot:
- conch: phrase set, trigger check and reply choosers
- groupme_client: GroupMe bot post client
"""

from magic_conch.services.conch import (
    CONCH_RESPONSES,
    RandomReplyChooser,
    ReplyChooser,
    wants_magic_conch,
)
from magic_conch.services.groupme_client import GroupMeAPIError, GroupMeClient, MessageSender

__all__ = [
    "CONCH_RESPONSES",
    "RandomReplyChooser",
    "ReplyChooser",
    "wants_magic_conch",
    "GroupMeAPIError",
    "GroupMeClient",
    "MessageSender",
]
