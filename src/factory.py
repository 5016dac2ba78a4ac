"""
factory - Composition root for the settings menu agent.

ALL dependency wiring happens here. No other module constructs its own
dependencies. Adapters (CLI, REST) call this factory to get fully
configured services and agents.

Usage:
    from factory import ServiceFactory
    from infrastructure.config import Settings

    factory = ServiceFactory(Settings.from_env())

    # Direct menu synthesis (REST /menus, CLI `menu`):
    engine = factory.create_menu_engine()
    tree = engine.synthesize("connect my headphones", profile)

    # Conversational agent (CLI `ask` / `chat`, REST /agent/run):
    agent = factory.create_agent()
    result = await agent.run("connect my headphones", history, profile)
"""

from __future__ import annotations

import logging
from typing import Optional

import requests
from langchain_core.language_models import BaseChatModel

from infrastructure.config import Settings
from infrastructure.llm.llm_builder import build_chat_model
from application.services.menu_synthesis import MenuSynthesisEngine
from agent.completion import CompletionInvoker
from agent.executor import AgentExecutor
from agent.memory import ConversationMemory
from agent.tools.github_repo import GithubRepoTool
from agent.tools.invoice import InvoiceTool
from agent.tools.registry import ToolRegistry
from agent.tools.settings_menu import SettingsMenuTool
from agent.tools.weather import WeatherTool
from agent.tools.website_data import WebsiteDataTool

logger = logging.getLogger(__name__)


class ServiceFactory:
    """Composition root. Wires all dependencies together.

    llm and session may be injected (tests, custom hosts); otherwise they
    are built lazily from the settings.
    """

    def __init__(
        self,
        config: Settings,
        llm: Optional[BaseChatModel] = None,
        session: Optional[requests.Session] = None,
    ):
        self._config = config
        self._llm = llm
        self._session = session
        self._registry: Optional[ToolRegistry] = None

    @property
    def config(self) -> Settings:
        return self._config

    # ------------------------------------------------------------------
    # Service creation
    # ------------------------------------------------------------------

    def create_menu_engine(self) -> MenuSynthesisEngine:
        return MenuSynthesisEngine()

    def create_tool_registry(self) -> ToolRegistry:
        """Return the process-wide registry, building it on first use.

        The registry is immutable, so one instance is shared by every agent.
        """
        if self._registry is None:
            session = self._http_session()
            self._registry = ToolRegistry([
                SettingsMenuTool(self.create_menu_engine()),
                WeatherTool(session=session, timeout=self._config.http_timeout),
                GithubRepoTool(
                    session=session,
                    token=self._config.github_token,
                    timeout=self._config.http_timeout,
                ),
                WebsiteDataTool(session=session, timeout=self._config.http_timeout),
                InvoiceTool(),
            ])
            logger.info("Tool registry ready: %s", ", ".join(self._registry.names()))
        return self._registry

    # ------------------------------------------------------------------
    # Agent creation
    # ------------------------------------------------------------------

    def create_agent(self) -> AgentExecutor:
        """Create a fully configured AgentExecutor.

        Each conversation should get its own executor; executors process one
        request at a time.
        """
        registry = self.create_tool_registry()
        completion = CompletionInvoker(
            llm=self._chat_model(),
            tools=registry,
            memory=ConversationMemory(max_messages=self._config.history_max_messages),
            timeout=self._config.completion_timeout,
        )
        return AgentExecutor(completion=completion, tools=registry)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _chat_model(self) -> BaseChatModel:
        if self._llm is None:
            self._llm = build_chat_model(
                provider=self._config.llm_provider,
                model=self._config.active_llm_model,
                ollama_base_url=self._config.ollama_base_url,
                openai_api_key=self._config.openai_api_key,
                groq_api_key=self._config.groq_api_key,
            )
        return self._llm

    def _http_session(self) -> requests.Session:
        if self._session is None:
            self._session = requests.Session()
        return self._session
