"""
agent.tools.registry - Tool registration, lookup, and invocation.

The registry is built once at process start from a fixed list of tools and
never changes afterwards, so it can be shared across concurrent requests
without locking. Lookup is an exact, case-sensitive match on the closed
ToolName enumeration.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from application.context import InvocationContext
from application.services.role_resolver import DEFAULT_ROLE, create_user_profile
from agent.tools.base import BaseTool, ToolName, ToolResult
from domain.exceptions import (
    SchemaViolationError,
    ToolNotFoundError,
    ToolPermissionError,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Immutable name → tool mapping."""

    def __init__(self, tools: Iterable[BaseTool]):
        registered: dict[ToolName, BaseTool] = {}
        for tool in tools:
            name = ToolName(tool.name)
            if name in registered:
                raise ValueError(f"Tool '{name.value}' registered twice")
            registered[name] = tool
            logger.debug("Registered tool: %s", name.value)
        self._tools: Mapping[ToolName, BaseTool] = MappingProxyType(registered)

    def resolve(self, name: str) -> Optional[BaseTool]:
        """Return the tool registered under name, or None."""
        try:
            key = ToolName(name)
        except ValueError:
            return None
        return self._tools.get(key)

    def get(self, name: str) -> BaseTool:
        """Get a tool by name. Raises ToolNotFoundError when unresolved."""
        tool = self.resolve(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def all(self) -> list[BaseTool]:
        """Return all registered tools, in registration order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Return all registered tool names."""
        return [name.value for name in self._tools]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.resolve(name) is not None

    def __len__(self) -> int:
        return len(self._tools)

    def function_specs(self) -> list[dict[str, Any]]:
        """Tool descriptors in the shape chat models accept in bind_tools()."""
        return [tool.function_spec() for tool in self._tools.values()]

    async def invoke(
        self,
        name: str,
        parameters: dict[str, Any],
        ctx: InvocationContext,
    ) -> ToolResult:
        """Resolve, authorize, validate, then execute a tool.

        Raises:
            ToolNotFoundError:    name is not registered.
            ToolPermissionError:  the caller lacks the tool's required permission.
            SchemaViolationError: parameters fail the tool's input schema.
        """
        tool = self.get(name)
        _check_permission(tool, ctx)

        schema = tool.get_schema()
        try:
            validated = schema.model_validate(parameters)
        except ValidationError as e:
            raise SchemaViolationError(name, str(e)) from e

        logger.info(
            "Invoking tool '%s' (request=%s, role=%s)",
            name, ctx.request_id, ctx.role_label,
        )
        return await tool.execute(ctx, **validated.model_dump())


def _check_permission(tool: BaseTool, ctx: InvocationContext) -> None:
    permission = tool.required_permission
    if permission is None:
        return
    # Anonymous callers get the most restrictive role.
    profile = ctx.caller_profile or create_user_profile(DEFAULT_ROLE)
    if not profile.permissions.allows(permission):
        raise ToolPermissionError(tool.name.value, permission, profile.role.value)
