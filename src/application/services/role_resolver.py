"""
application.services.role_resolver - Caller role detection and permission lookup.

Every function here is pure: the same input always yields the same result.

Role detection is a case-insensitive substring scan over three keyword
sets, checked in a fixed priority order (parent, then child, then guest),
returning on the first match. "admin mode but simplified" therefore
resolves to parent. Some parent keywords ("complete") are common words and
can fire on unrelated requests; the ordering and lists are kept as-is so
results stay reproducible.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping, Optional

from domain.exceptions import RoleContractError
from domain.models import UserPermissions, UserProfile, UserRole

logger = logging.getLogger(__name__)


PARENT_INDICATORS: tuple[str, ...] = (
    "parent",
    "parent mode",
    "parent settings",
    "full control",
    "full access",
    "advanced",
    "advanced settings",
    "all features",
    "complete",
    "admin",
    "administrator",
)

CHILD_INDICATORS: tuple[str, ...] = (
    "child",
    "child mode",
    "child settings",
    "simple",
    "simplified",
    "safe",
    "safe mode",
    "limited",
    "basic",
    "kid",
    "kids",
)

GUEST_INDICATORS: tuple[str, ...] = (
    "guest",
    "guest mode",
    "guest settings",
    "temporary",
    "quick",
    "quick access",
    "temporary access",
)

# Priority order matters: first match wins.
_ROLE_INDICATORS: tuple[tuple[UserRole, tuple[str, ...]], ...] = (
    (UserRole.PARENT, PARENT_INDICATORS),
    (UserRole.CHILD, CHILD_INDICATORS),
    (UserRole.GUEST, GUEST_INDICATORS),
)

DEFAULT_ROLE = UserRole.GUEST


ROLE_PERMISSIONS: Mapping[UserRole, UserPermissions] = MappingProxyType({
    UserRole.CHILD: UserPermissions(
        can_use_weather=True,
        max_response_length=500,
    ),
    UserRole.PARENT: UserPermissions(
        can_use_weather=True,
        can_use_github=True,
        can_use_web_scraping=True,
        can_use_invoice=True,
        can_upload_files=True,
        can_see_advanced_options=True,
        can_modify_settings=True,
    ),
    UserRole.GUEST: UserPermissions(
        can_use_weather=True,
        max_response_length=300,
    ),
})


def detect_role(utterance: str) -> Optional[UserRole]:
    """Return the role whose keywords appear in the utterance, or None."""
    lowered = utterance.lower()
    for role, indicators in _ROLE_INDICATORS:
        if any(indicator in lowered for indicator in indicators):
            return role
    return None


def resolve_role(
    utterance: str,
    fallback_profile: Optional[UserProfile] = None,
) -> UserRole:
    """Resolve the caller role for a request.

    Keyword detection wins over the fallback profile; with neither, the
    most restrictive role (guest) is used.
    """
    detected = detect_role(utterance)
    if detected is not None:
        logger.debug("Role detected from utterance: %s", detected.value)
        return detected
    if fallback_profile is not None:
        return fallback_profile.role
    return DEFAULT_ROLE


def permissions_for_role(role: UserRole) -> UserPermissions:
    """Look up the fixed permission record for a role."""
    try:
        return ROLE_PERMISSIONS[UserRole(role)]
    except (KeyError, ValueError) as e:
        raise RoleContractError(f"Unknown role: {role!r}") from e


def create_user_profile(role: UserRole, name: Optional[str] = None) -> UserProfile:
    """Build a profile whose permissions are derived from the role."""
    permissions = permissions_for_role(role)
    return UserProfile(role=UserRole(role), permissions=permissions, name=name)


def resolve_profile(
    utterance: str,
    fallback_profile: Optional[UserProfile] = None,
) -> UserProfile:
    """Resolve a full profile for the request.

    Keeps the fallback profile (including its name) when keyword detection
    agrees with it or finds nothing.
    """
    role = resolve_role(utterance, fallback_profile)
    if fallback_profile is not None and fallback_profile.role == role:
        return fallback_profile
    return create_user_profile(role)

