"""
Shared fixtures for the settings menu agent tests.

The chat model is replaced by FakeToolChatModel, which replays scripted
AIMessages and records every prompt it receives. No network access is
needed by any test.
"""
import sys
import os
import asyncio
from typing import Any

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src')))

import pytest
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from langchain_core.outputs import ChatGeneration, ChatResult
from pydantic import Field

from application.context import InvocationContext
from application.services.role_resolver import create_user_profile
from domain.models import UserRole
from factory import ServiceFactory
from infrastructure.config import Settings


class FakeToolChatModel(BaseChatModel):
    """Chat model that answers with pre-scripted messages, in order."""

    responses: list[BaseMessage] = Field(default_factory=list)
    calls: list[list[BaseMessage]] = Field(default_factory=list)
    bound_tools: list[Any] = Field(default_factory=list)
    delay: float = 0.0
    log: list[str] = Field(default_factory=list)

    @property
    def _llm_type(self) -> str:
        return "fake-tool-chat"

    def bind_tools(self, tools, **kwargs):
        self.bound_tools = list(tools)
        return self

    def _generate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        self.calls.append(list(messages))
        message = self.responses.pop(0)
        return ChatResult(generations=[ChatGeneration(message=message)])

    async def _agenerate(self, messages, stop=None, run_manager=None, **kwargs) -> ChatResult:
        prompt = messages[-1].content
        self.log.append(f"start:{prompt}")
        if self.delay:
            await asyncio.sleep(self.delay)
        self.log.append(f"finish:{prompt}")
        return self._generate(messages, stop=stop, **kwargs)


def tool_call(name: str, **args) -> AIMessage:
    return AIMessage(content="", tool_calls=[{"name": name, "args": args, "id": "call_1"}])


def text(content: str) -> AIMessage:
    return AIMessage(content=content)


@pytest.fixture
def fake_llm():
    return FakeToolChatModel()


@pytest.fixture
def factory(fake_llm):
    return ServiceFactory(Settings(), llm=fake_llm)


@pytest.fixture
def child():
    return create_user_profile(UserRole.CHILD)


@pytest.fixture
def parent():
    return create_user_profile(UserRole.PARENT)


@pytest.fixture
def guest():
    return create_user_profile(UserRole.GUEST)


@pytest.fixture
def ctx_for():
    def _make(profile=None, observer=None):
        return InvocationContext(caller_profile=profile, observer=observer)
    return _make
