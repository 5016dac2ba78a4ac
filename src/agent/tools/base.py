"""
agent.tools.base - Base tool interface, tool identities, and result container.

All agent tools inherit from BaseTool and return ToolResult. Tool names are
members of the closed ToolName enumeration; the registry only ever holds
tools whose name is one of them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import BaseModel

from application.context import InvocationContext


class ToolName(str, Enum):
    """Every tool identity the registry can hold."""
    GENERATE_SETTINGS_MENU = "generate_settings_menu"
    GET_WEATHER = "get_weather"
    GITHUB_REPO = "github_repo"
    WEBSITE_DATA = "website_data"
    INVOICE = "invoice"


@dataclass
class ToolResult:
    """Result returned by a tool execution.

    output:  JSON text handed back to the executor, which parses it into
             the structured tool result.
    data:    Typed object behind the output (e.g. a MenuTree), for in-process
             callers that want it without re-parsing.
    """
    output: str
    data: Any = None


class BaseTool(ABC):
    """Abstract base for all agent tools.

    required_permission names the UserPermissions flag a caller must hold to
    dispatch this tool, or None when every role may use it.
    """

    name: ToolName
    description: str
    required_permission: Optional[str] = None

    @abstractmethod
    async def execute(self, ctx: InvocationContext, **kwargs) -> ToolResult:
        """Execute the tool with the given invocation context and arguments."""
        ...

    @abstractmethod
    def get_schema(self) -> type[BaseModel]:
        """Return the Pydantic schema for this tool's input arguments."""
        ...

    def function_spec(self) -> dict[str, Any]:
        """Describe this tool in the OpenAI function-calling format."""
        spec = convert_to_openai_tool(self.get_schema())
        spec["function"]["name"] = self.name.value
        spec["function"]["description"] = self.description
        return spec
