"""
Magic Conch Module

The conch's vocabulary and the rules for when it speaks.

Design Decisions:
- The phrase set is an immutable tuple shared by all requests
- Reply selection sits behind a one-method protocol so tests can pin it
- Randomness is not security sensitive; random.Random is enough
"""

import random
from typing import Optional, Protocol, Sequence, runtime_checkable

from magic_conch.config import DEFAULT_TRIGGER_PREFIX

CONCH_RESPONSES = (
    "Maybe someday.",
    "Nothing.",
    "Neither.",
    "I don't think so.",
    "Yes.",
    "No.",
    "Try asking again.",
)


@runtime_checkable
class ReplyChooser(Protocol):
    """Picks the conch's answer."""

    def choose(self) -> str: ...


class RandomReplyChooser:
    """
    Uniform random choice over a fixed phrase set.

    Usage:
        chooser = RandomReplyChooser()
        answer = chooser.choose()
    """

    def __init__(
        self,
        phrases: Sequence[str] = CONCH_RESPONSES,
        rng: Optional[random.Random] = None
    ):
        if not phrases:
            raise ValueError("The Magic Conch needs at least one phrase")
        self.phrases = tuple(phrases)
        self._rng = rng or random.Random()

    def choose(self) -> str:
        return self._rng.choice(self.phrases)


def wants_magic_conch(text: str, prefix: str = DEFAULT_TRIGGER_PREFIX) -> bool:
    """
    Check whether a message summons the conch.

    Case-sensitive prefix match, so "/magicconchfoo" counts too.
    """
    return text.startswith(prefix)
