"""
agent.memory - Conversation history → LangChain message conversion.

History is supplied by the caller on every request; nothing is stored here
between requests. The converted list is passed to the prompt via the
'chat_history' placeholder.
"""

from __future__ import annotations

import logging
from typing import Iterable

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from agent.state import Turn, TurnRole

logger = logging.getLogger(__name__)


class ConversationMemory:
    """Windowed view over caller-supplied history.

    Only the most recent max_messages turns are sent to the model.
    """

    def __init__(self, max_messages: int = 50):
        self._max_messages = max_messages

    @property
    def max_messages(self) -> int:
        return self._max_messages

    def to_messages(self, history: Iterable[Turn]) -> list[BaseMessage]:
        turns = list(history)
        if len(turns) > self._max_messages:
            logger.debug(
                "Trimming history from %d to %d messages",
                len(turns), self._max_messages,
            )
            turns = turns[-self._max_messages:]

        messages: list[BaseMessage] = []
        for turn in turns:
            if turn.role == TurnRole.USER:
                messages.append(HumanMessage(content=turn.content))
            else:
                messages.append(AIMessage(content=turn.content))
        return messages


def parse_history(pairs: Iterable[tuple[str, str]]) -> tuple[Turn, ...]:
    """Build turns from (role, content) pairs as chat front-ends send them.

    "human" and "user" map to user turns; "ai" and "assistant" to assistant
    turns; anything else is treated as user input.
    """
    turns = []
    for role, content in pairs:
        if role in ("ai", "assistant"):
            turns.append(Turn.assistant(content))
        else:
            turns.append(Turn.user(content))
    return tuple(turns)
