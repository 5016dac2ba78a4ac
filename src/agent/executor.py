"""
agent.executor - Agent execution engine.

Runs one request through a small state machine:

    DECIDING ──tool call──▶ TOOL_DISPATCH ──▶ FINALIZED
        └────────plain text─────────────────▶ FINALIZED

DECIDING asks the completion service for a Decision. TOOL_DISPATCH resolves
the tool, hands it an InvocationContext carrying the caller's profile, and
parses the tool's JSON output. FINALIZED is the only terminal step.

No component construction, no global state, no retries: every error aborts
the request and propagates to the caller.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Iterable, Optional

from application.context import InvocationContext
from agent.completion import CompletionInvoker
from agent.state import (
    AgentResult,
    ExecutionState,
    ExecutorStep,
    PlainTextResult,
    ToolOutcome,
    Turn,
)
from agent.tools.registry import ToolRegistry
from domain.exceptions import ExecutorStateError, ToolExecutionError
from domain.models import UserProfile
from domain.ports import SynthesisObserver

logger = logging.getLogger(__name__)


class AgentExecutor:
    """Decide → (optionally) dispatch one tool → finalize.

    Constructed by factory.py with all dependencies injected. One request is
    processed to completion before the next is accepted.
    """

    def __init__(self, completion: CompletionInvoker, tools: ToolRegistry):
        self._completion = completion
        self._tools = tools
        self._lock = asyncio.Lock()

    @property
    def tools(self) -> ToolRegistry:
        return self._tools

    async def run(
        self,
        utterance: str,
        history: Iterable[Turn] = (),
        caller_profile: Optional[UserProfile] = None,
        observer: Optional[SynthesisObserver] = None,
    ) -> AgentResult:
        """Process a user message and return exactly one terminal result.

        Args:
            utterance:      The user's message text.
            history:        Prior turns, oldest first. Not modified.
            caller_profile: Role and permissions of the caller, if known.
            observer:       Receives progress events from tools that emit them.

        Returns:
            PlainTextResult when no tool was selected, otherwise ToolOutcome.
        """
        async with self._lock:
            state = ExecutionState(
                input=utterance,
                history=tuple(history),
                caller_profile=caller_profile,
            )
            ctx = InvocationContext(caller_profile=caller_profile, observer=observer)
            logger.info(
                "Agent processing (request=%s, role=%s): %s",
                ctx.request_id, ctx.role_label, utterance[:80],
            )

            while state.step != ExecutorStep.FINALIZED:
                if state.step == ExecutorStep.DECIDING:
                    await self._decide(state)
                elif state.step == ExecutorStep.TOOL_DISPATCH:
                    await self._dispatch(state, ctx)
                else:
                    raise ExecutorStateError(f"Unknown executor step: {state.step}")

            return _finalize(state)

    async def _decide(self, state: ExecutionState) -> None:
        decision = await self._completion.decide(state)
        state.apply_decision(decision)
        state.step = _route(state)
        logger.debug("Decide step routed to %s", state.step.value)

    async def _dispatch(self, state: ExecutionState, ctx: InvocationContext) -> None:
        call = state.pending_tool_call
        if call is None:
            raise ExecutorStateError("No tool call found.")

        result = await self._tools.invoke(call.name, call.parameters, ctx)
        state.tool_result = _parse_payload(call.name, result.output)
        state.tool_name = call.name
        state.pending_tool_call = None
        state.step = ExecutorStep.FINALIZED
        logger.info("Tool '%s' finished (request=%s)", call.name, ctx.request_id)


def _route(state: ExecutionState) -> ExecutorStep:
    has_call = state.pending_tool_call is not None
    has_text = state.plain_result is not None
    if has_call and has_text:
        raise ExecutorStateError("Decide step produced both a tool call and text.")
    if has_call:
        return ExecutorStep.TOOL_DISPATCH
    if has_text:
        return ExecutorStep.FINALIZED
    raise ExecutorStateError("No tool call or result found.")


def _parse_payload(tool_name: str, output: str) -> dict:
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise ToolExecutionError(f"Tool '{tool_name}' returned invalid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise ToolExecutionError(
            f"Tool '{tool_name}' returned {type(payload).__name__}, expected an object"
        )
    return payload


def _finalize(state: ExecutionState) -> AgentResult:
    if state.tool_result is not None:
        return ToolOutcome(tool_name=state.tool_name, payload=state.tool_result)
    if state.plain_result is not None:
        return PlainTextResult(text=state.plain_result)
    raise ExecutorStateError("Finalized without a result.")
