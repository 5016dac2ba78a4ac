"""
application.context - Request-scoped invocation context for tools.

Every tool receives its context explicitly. The caller's profile travels
here, typed, rather than as a hidden entry in a generic metadata map: a
role-aware tool reads ctx.caller_profile without the completion service
ever having to pass role or permissions as tool arguments.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional
from uuid import uuid4

from domain.models import UserProfile
from domain.ports import SynthesisObserver


@dataclass(frozen=True)
class InvocationContext:
    """Per-request context handed to every tool invocation.

    Attributes:
        caller_profile: Role and permissions of the caller, if known.
        observer:       Receives progress events from tools that emit them.
        request_id:     Unique per request, for tracing/logging.
    """
    caller_profile: Optional[UserProfile] = None
    observer: Optional[SynthesisObserver] = None
    request_id: str = field(default_factory=lambda: uuid4().hex)

    @property
    def role_label(self) -> str:
        return self.caller_profile.role.value if self.caller_profile else "anonymous"
