"""
agent.tools.settings_menu - Role-aware settings menu generator.

Wraps MenuSynthesisEngine. The caller's role comes from the request text
first (e.g. "parent settings"), then from the profile carried in the
InvocationContext, then defaults to guest. Role and permissions are never
tool arguments, so the LLM cannot widen a caller's access.
"""

from __future__ import annotations

import json
import logging

from pydantic import BaseModel, ConfigDict, Field

from application.context import InvocationContext
from application.services.menu_synthesis import MenuSynthesisEngine
from application.services.role_resolver import resolve_profile
from agent.tools.base import BaseTool, ToolName, ToolResult

logger = logging.getLogger(__name__)


class SettingsMenuInput(BaseModel):
    """Input schema for the generate_settings_menu tool."""

    model_config = ConfigDict(extra="forbid")

    user_query: str = Field(
        min_length=1,
        description="User's request for settings menu or configuration",
    )
    device_type: str = Field(
        default="generic",
        description="Type of smart home device",
    )


class SettingsMenuTool(BaseTool):
    """Generate a hierarchical settings menu adapted to the caller's role."""

    name = ToolName.GENERATE_SETTINGS_MENU
    description = (
        "Generate a hierarchical settings menu structure based on user role. "
        "ALWAYS use this tool when users ask for: 'settings', 'Bluetooth settings', "
        "'connect headphones', 'Bluetooth menu', 'configure', 'setup', or any "
        "request related to device configuration or settings menus. The menu "
        "structure automatically adapts to the user's role (Parent: full control "
        "with Network/Connections/Bluetooth hierarchy, Child: simplified "
        "Connectivity/Bluetooth with On/Off and My Devices, Guest: Quick "
        "Connectivity/Bluetooth with temporary connection options)."
    )

    def __init__(self, engine: MenuSynthesisEngine):
        self._engine = engine

    def get_schema(self) -> type[BaseModel]:
        return SettingsMenuInput

    async def execute(
        self,
        ctx: InvocationContext,
        user_query: str = "",
        device_type: str = "generic",
        **kwargs,
    ) -> ToolResult:
        profile = resolve_profile(user_query, ctx.caller_profile)
        logger.debug(
            "Settings menu for device_type=%s resolved role=%s",
            device_type, profile.role.value,
        )
        tree = self._engine.synthesize(user_query, profile, observer=ctx.observer)
        return ToolResult(
            output=json.dumps(tree.to_dict(), indent=2),
            data=tree,
        )
