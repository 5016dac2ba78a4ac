"""
Shared FastAPI dependencies.

- get_factory(): returns the ServiceFactory stored on app.state at startup.
- caller_profile(): builds the caller's UserProfile from an optional role.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from application.services.role_resolver import create_user_profile
from domain.models import UserProfile, UserRole
from factory import ServiceFactory


def get_factory(request: Request) -> ServiceFactory:
    factory = getattr(request.app.state, "factory", None)
    if factory is None:
        raise RuntimeError("ServiceFactory not initialized.")
    return factory


def caller_profile(role: Optional[UserRole], name: Optional[str] = None) -> Optional[UserProfile]:
    """Profile for the caller, or None when the request names no role."""
    if role is None:
        return None
    return create_user_profile(role, name=name)
