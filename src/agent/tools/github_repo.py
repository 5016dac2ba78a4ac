"""
agent.tools.github_repo - Repository summary from the GitHub REST API.

Restricted to callers holding can_use_github (parents only).
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional

import requests
from pydantic import BaseModel, ConfigDict, Field

from application.context import InvocationContext
from agent.tools.base import BaseTool, ToolName, ToolResult
from domain.exceptions import ToolExecutionError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"

_NAME_PATTERN = r"^[A-Za-z0-9_.-]+$"


class GithubRepoInput(BaseModel):
    """Input schema for the github_repo tool."""

    model_config = ConfigDict(extra="forbid")

    owner: str = Field(pattern=_NAME_PATTERN, description="Repository owner (user or org)")
    repo: str = Field(pattern=_NAME_PATTERN, description="Repository name")


class GithubRepoTool(BaseTool):
    """Fetch stars, forks, language and description of a GitHub repository."""

    name = ToolName.GITHUB_REPO
    description = (
        "Look up a GitHub repository by owner and name and return its description, "
        "stars, forks, open issues and main language."
    )
    required_permission = "can_use_github"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        api_url: str = GITHUB_API_URL,
        token: str = "",
        timeout: float = 10.0,
    ):
        self._session = session or requests.Session()
        self._api_url = api_url.rstrip("/")
        self._token = token
        self._timeout = timeout

    def get_schema(self) -> type[BaseModel]:
        return GithubRepoInput

    async def execute(
        self,
        ctx: InvocationContext,
        owner: str = "",
        repo: str = "",
        **kwargs,
    ) -> ToolResult:
        loop = asyncio.get_running_loop()
        try:
            summary = await loop.run_in_executor(None, self._fetch, owner, repo)
        except (requests.RequestException, KeyError, ValueError) as e:
            raise ToolExecutionError(f"GitHub lookup for {owner}/{repo} failed: {e}") from e
        return ToolResult(output=json.dumps(summary), data=summary)

    def _fetch(self, owner: str, repo: str) -> dict[str, Any]:
        headers = {"Accept": "application/vnd.github+json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        response = self._session.get(
            f"{self._api_url}/repos/{owner}/{repo}",
            headers=headers,
            timeout=self._timeout,
        )
        response.raise_for_status()
        data = response.json()
        return {
            "full_name": data["full_name"],
            "description": data.get("description") or "",
            "stars": data.get("stargazers_count", 0),
            "forks": data.get("forks_count", 0),
            "open_issues": data.get("open_issues_count", 0),
            "language": data.get("language") or "",
            "url": data.get("html_url", ""),
        }
