"""
Run the Settings Menu Agent CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    ask     One-shot request through the agent
    chat    Interactive chat session
    menu    Build a settings menu directly (no LLM)
    roles   Show the permission table for every role

Examples:
    python run_cli.py ask "connect my headphones" --role child
    python run_cli.py menu "parent settings for bluetooth" --json
    python run_cli.py chat --role guest

Environment variables (all optional):
    LLM_PROVIDER        "openai", "groq", or "ollama" (default: openai)
    LLM_MODEL_OPENAI    Model name when LLM_PROVIDER=openai (default: gpt-4o)
    LLM_MODEL_GROQ      Model name when LLM_PROVIDER=groq (default: llama-3.3-70b-versatile)
    LLM_MODEL_OLLAMA    Model name when LLM_PROVIDER=ollama (default: llama3.2)
    OPENAI_API_KEY      Required when LLM_PROVIDER=openai
    GROQ_API_KEY        Required when LLM_PROVIDER=groq
    OLLAMA_BASE_URL     Ollama server URL (default: http://localhost:11434/)
    COMPLETION_TIMEOUT  Seconds to wait for the model, 0 disables (default: 60)
    GITHUB_TOKEN        Optional token for the github_repo tool
    LOG_LEVEL           Logging level (default: INFO)
"""

import sys
from pathlib import Path

# Ensure src/ is importable when running from a checkout
sys.path.insert(0, str(Path(__file__).parent / "src"))

from adapters.cli.main import app

if __name__ == "__main__":
    app()
