"""
agent.state - Execution state and result shapes for the agent executor.

ExecutionState is created per request and discarded once a result is
emitted. After the decide step exactly one of pending_tool_call and
plain_result is set; anything else is a structural error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from domain.models import UserProfile


class TurnRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One prior message of the conversation."""
    role: TurnRole
    content: str

    @classmethod
    def user(cls, content: str) -> Turn:
        return cls(role=TurnRole.USER, content=content)

    @classmethod
    def assistant(cls, content: str) -> Turn:
        return cls(role=TurnRole.ASSISTANT, content=content)


@dataclass(frozen=True)
class ToolCall:
    """A tool selected by the completion service."""
    name: str
    parameters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class PlainText:
    """A free-text answer from the completion service."""
    text: str


Decision = Union[ToolCall, PlainText]


class ExecutorStep(str, Enum):
    DECIDING = "deciding"
    TOOL_DISPATCH = "tool_dispatch"
    FINALIZED = "finalized"


@dataclass
class ExecutionState:
    """Mutable record threaded through one executor run.

    history is a tuple and is never edited in place.
    """
    input: str
    history: tuple[Turn, ...] = ()
    caller_profile: Optional[UserProfile] = None
    pending_tool_call: Optional[ToolCall] = None
    plain_result: Optional[str] = None
    tool_result: Optional[dict[str, Any]] = None
    tool_name: Optional[str] = None
    step: ExecutorStep = ExecutorStep.DECIDING

    def apply_decision(self, decision: Decision) -> None:
        if isinstance(decision, ToolCall):
            self.pending_tool_call = decision
        elif isinstance(decision, PlainText):
            self.plain_result = decision.text


# ---------------------------------------------------------------------------
# Terminal results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlainTextResult:
    """The request finished without a tool; text is the answer."""
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "plain_text", "text": self.text}


@dataclass(frozen=True)
class ToolOutcome:
    """The request dispatched a tool; payload is its parsed JSON output."""
    tool_name: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "tool_result", "tool": self.tool_name, "payload": self.payload}


AgentResult = Union[PlainTextResult, ToolOutcome]
