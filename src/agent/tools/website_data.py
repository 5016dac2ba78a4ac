"""
agent.tools.website_data - Page title, description and status for a URL.

Uses requests via run_in_executor, like the other HTTP tools, and
BeautifulSoup to read the <title> and description meta tags. A caller whose
permissions list allowed_domains may only fetch hosts from that list.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, Field

from application.context import InvocationContext
from agent.tools.base import BaseTool, ToolName, ToolResult
from domain.exceptions import ToolExecutionError, ToolPermissionError

logger = logging.getLogger(__name__)

USER_AGENT = "SettingsMenuAgent/0.1 (website_data tool)"

_DESCRIPTION_META = ("description", "og:description", "twitter:description")


class WebsiteDataInput(BaseModel):
    """Input schema for the website_data tool."""

    model_config = ConfigDict(extra="forbid")

    url: str = Field(pattern=r"^https?://\S+$", description="Full http(s) URL of the page")


class WebsiteDataTool(BaseTool):
    """Fetch a web page and summarize its metadata."""

    name = ToolName.WEBSITE_DATA
    description = (
        "Fetch a web page and return its title, meta description and HTTP status. "
        "Use when the user gives a URL and asks what the page is about."
    )
    required_permission = "can_use_web_scraping"

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self._session = session or requests.Session()
        self._timeout = timeout

    def get_schema(self) -> type[BaseModel]:
        return WebsiteDataInput

    async def execute(self, ctx: InvocationContext, url: str = "", **kwargs) -> ToolResult:
        domain = urlparse(url).hostname or ""
        _check_domain(domain, ctx)

        loop = asyncio.get_running_loop()
        try:
            summary = await loop.run_in_executor(None, self._fetch, url)
        except requests.RequestException as e:
            raise ToolExecutionError(f"Fetching {url} failed: {e}") from e
        summary["domain"] = domain
        return ToolResult(output=json.dumps(summary), data=summary)

    def _fetch(self, url: str) -> dict[str, Any]:
        response = self._session.get(
            url,
            headers={"User-Agent": USER_AGENT, "Accept": "text/html,application/xhtml+xml"},
            timeout=self._timeout,
            allow_redirects=True,
        )
        response.raise_for_status()

        soup = BeautifulSoup(response.text, "html.parser")
        title = ""
        if soup.title and soup.title.string:
            title = soup.title.string.strip()
        logger.debug("Fetched %s (status=%s)", url, response.status_code)
        return {
            "url": url,
            "status": response.status_code,
            "title": title,
            "description": _extract_meta(soup, _DESCRIPTION_META) or "",
        }


def _check_domain(domain: str, ctx: InvocationContext) -> None:
    profile = ctx.caller_profile
    if profile is None or profile.permissions.allowed_domains is None:
        return
    allowed = profile.permissions.allowed_domains
    if not any(domain == d or domain.endswith("." + d) for d in allowed):
        raise ToolPermissionError(
            ToolName.WEBSITE_DATA.value, f"allowed_domains:{domain}", profile.role.value,
        )


def _extract_meta(soup: BeautifulSoup, names: tuple[str, ...]) -> Optional[str]:
    for meta in soup.find_all("meta"):
        prop = meta.get("property", "") or meta.get("name", "")
        if prop in names:
            content = (meta.get("content") or "").strip()
            if content:
                return content
    return None
