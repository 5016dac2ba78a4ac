"""
agent.prompt - System instruction for the tool-dispatch agent.
"""

from __future__ import annotations

from typing import Optional

from domain.models import UserProfile, UserRole

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant. You're provided a list of tools, and an input "
    "from the user.\n"
    "Your job is to determine whether or not you have a tool which can handle the "
    "users input, or respond with plain text. Call at most one tool."
)


def build_system_prompt(caller_profile: Optional[UserProfile] = None) -> str:
    """Return the system instruction, plus caller constraints when known.

    The caller section only shapes plain-text answers (length, audience); it
    never lists role or permissions as something to pass to a tool.
    """
    section = _build_caller_context(caller_profile)
    if not section:
        return SYSTEM_INSTRUCTION
    return SYSTEM_INSTRUCTION + "\n\n" + section


def _build_caller_context(profile: Optional[UserProfile]) -> str:
    if profile is None:
        return ""

    lines = [f"CALLER: role={profile.role.value}"]
    limit = profile.permissions.max_response_length
    if limit is not None:
        lines.append(f"- Keep plain-text answers under {limit} characters.")
    if profile.permissions.blocked_keywords:
        lines.append(
            "- Never mention: " + ", ".join(profile.permissions.blocked_keywords)
        )
    if profile.role == UserRole.CHILD:
        lines.append("- Use simple, friendly language suitable for a child.")
    return "\n".join(lines)
