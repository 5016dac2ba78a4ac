"""
agent.completion - One call to the hosted chat model per decision.

The model sees the system instruction, the prior history, the current
input, and every registered tool. Its reply is decoded into either a
ToolCall (first structured tool call wins) or PlainText.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage
from langchain_core.prompts import ChatPromptTemplate, MessagesPlaceholder

from agent.memory import ConversationMemory
from agent.prompt import build_system_prompt
from agent.state import Decision, ExecutionState, PlainText, ToolCall
from agent.tools.registry import ToolRegistry
from domain.exceptions import CompletionDecodeError, CompletionTimeoutError

logger = logging.getLogger(__name__)


class CompletionInvoker:
    """Wraps the chat model with the registry's tools bound."""

    def __init__(
        self,
        llm: BaseChatModel,
        tools: ToolRegistry,
        memory: ConversationMemory,
        timeout: Optional[float] = 60.0,
    ):
        self._memory = memory
        self._timeout = timeout

        prompt = ChatPromptTemplate.from_messages([
            ("system", "{system_prompt}"),
            MessagesPlaceholder(variable_name="chat_history", optional=True),
            ("human", "{input}"),
        ])
        self._chain = prompt | llm.bind_tools(tools.function_specs())

    async def decide(self, state: ExecutionState) -> Decision:
        """Ask the model whether a tool should handle state.input.

        Raises:
            CompletionTimeoutError: the model did not answer within the timeout.
            CompletionDecodeError:  the reply had neither a tool call nor text.
        """
        inputs = {
            "system_prompt": build_system_prompt(state.caller_profile),
            "chat_history": self._memory.to_messages(state.history),
            "input": state.input,
        }
        try:
            result = await asyncio.wait_for(
                self._chain.ainvoke(inputs), timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            raise CompletionTimeoutError(
                f"Completion service did not answer within {self._timeout}s"
            ) from e

        return decode_completion(result)


def decode_completion(message: AIMessage) -> Decision:
    """Turn a model reply into a Decision."""
    tool_calls = getattr(message, "tool_calls", None) or []
    if tool_calls:
        if len(tool_calls) > 1:
            logger.warning(
                "Model requested %d tool calls; dispatching only '%s'",
                len(tool_calls), tool_calls[0]["name"],
            )
        first = tool_calls[0]
        return ToolCall(name=first["name"], parameters=dict(first.get("args") or {}))

    text = _content_text(message.content)
    if text.strip():
        return PlainText(text=text)
    raise CompletionDecodeError("Completion had neither a tool call nor text content")


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    parts = []
    for block in content or []:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
