"""
infrastructure.config - Typed, injectable configuration.

A frozen dataclass that can be constructed from the environment (after
loading a .env file) or passed explicitly in tests.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Settings:
    """Centralized configuration for the settings menu agent.

    No module-level globals. Construct via from_env() or pass explicitly
    in tests.
    """

    # ── Centralized LLM Provider ────────────────────────────────
    # One setting controls the completion service.
    # Allowed: "openai", "groq", "ollama"
    llm_provider: str = "openai"

    # Model names; only the one matching llm_provider is used.
    llm_model_openai: str = "gpt-4o"
    llm_model_groq: str = "llama-3.3-70b-versatile"
    llm_model_ollama: str = "llama3.2"

    # Connection details
    ollama_base_url: str = "http://localhost:11434/"
    openai_api_key: str = ""
    groq_api_key: str = ""

    # Agent
    completion_timeout: Optional[float] = 60.0
    history_max_messages: int = 50

    # Tools
    http_timeout: float = 10.0
    github_token: str = ""

    # Logging
    log_level: str = "INFO"

    @property
    def active_llm_model(self) -> str:
        """Return the model name for the currently active LLM provider."""
        if self.llm_provider == "openai":
            return self.llm_model_openai
        elif self.llm_provider == "groq":
            return self.llm_model_groq
        return self.llm_model_ollama

    @classmethod
    def from_env(cls) -> Settings:
        """Build Settings from environment variables (and .env, if present)."""
        from dotenv import load_dotenv
        load_dotenv()

        timeout = os.getenv("COMPLETION_TIMEOUT", "60")
        return cls(
            llm_provider=os.getenv("LLM_PROVIDER", "openai"),
            llm_model_openai=os.getenv("LLM_MODEL_OPENAI", "gpt-4o"),
            llm_model_groq=os.getenv("LLM_MODEL_GROQ", "llama-3.3-70b-versatile"),
            llm_model_ollama=os.getenv("LLM_MODEL_OLLAMA", "llama3.2"),
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/"),
            openai_api_key=os.getenv("OPENAI_API_KEY", ""),
            groq_api_key=os.getenv("GROQ_API_KEY", ""),
            # COMPLETION_TIMEOUT=0 disables the timeout.
            completion_timeout=float(timeout) or None,
            history_max_messages=int(os.getenv("HISTORY_MAX_MESSAGES", "50")),
            http_timeout=float(os.getenv("HTTP_TIMEOUT", "10")),
            github_token=os.getenv("GITHUB_TOKEN", ""),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
