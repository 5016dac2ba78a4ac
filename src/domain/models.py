"""
domain.models - Value objects for roles, permissions, and settings menus.

These are immutable data containers with no dependencies on infrastructure
(no LangChain, no HTTP clients). Menu types serialize to the JSON shape the
external menu renderer consumes:

    {"root": {"id", "label", "icon", "children"},
     "breadcrumb": [...],
     "role_context": {"role", "design_intent", "restrictions"}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional


# ---------------------------------------------------------------------------
# Roles & permissions
# ---------------------------------------------------------------------------

class UserRole(str, Enum):
    """Closed set of caller roles."""
    CHILD = "child"
    PARENT = "parent"
    GUEST = "guest"


@dataclass(frozen=True)
class UserPermissions:
    """Capability flags derived from a role.

    max_response_length is None when the role has no length cap.
    """
    can_use_weather: bool = False
    can_use_github: bool = False
    can_use_web_scraping: bool = False
    can_use_invoice: bool = False
    can_upload_files: bool = False
    can_see_advanced_options: bool = False
    can_modify_settings: bool = False
    max_response_length: Optional[int] = None
    allowed_domains: Optional[tuple[str, ...]] = None
    blocked_keywords: Optional[tuple[str, ...]] = None

    def allows(self, permission: str) -> bool:
        """Return True if the named boolean flag is set."""
        return bool(getattr(self, permission, False))

    def to_dict(self, include_unset: bool = False) -> dict[str, Any]:
        """Flags as a plain dict. Optional limits are omitted when unset
        unless include_unset is True."""
        data: dict[str, Any] = {
            "can_use_weather": self.can_use_weather,
            "can_use_github": self.can_use_github,
            "can_use_web_scraping": self.can_use_web_scraping,
            "can_use_invoice": self.can_use_invoice,
            "can_upload_files": self.can_upload_files,
            "can_see_advanced_options": self.can_see_advanced_options,
            "can_modify_settings": self.can_modify_settings,
        }
        if include_unset or self.max_response_length is not None:
            data["max_response_length"] = self.max_response_length
        if include_unset or self.allowed_domains is not None:
            data["allowed_domains"] = _as_list(self.allowed_domains)
        if include_unset or self.blocked_keywords is not None:
            data["blocked_keywords"] = _as_list(self.blocked_keywords)
        return data


def _as_list(values: Optional[tuple[str, ...]]) -> Optional[list[str]]:
    return list(values) if values is not None else None


@dataclass(frozen=True)
class UserProfile:
    """Role plus the permission record derived from it."""
    role: UserRole
    permissions: UserPermissions
    name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "role": self.role.value,
            "permissions": self.permissions.to_dict(),
        }
        if self.name:
            data["name"] = self.name
        return data


# ---------------------------------------------------------------------------
# Menu tree
# ---------------------------------------------------------------------------

class MenuItemType(str, Enum):
    MENU = "menu"
    SUBMENU = "submenu"
    TOGGLE = "toggle"
    ACTION = "action"
    SEPARATOR = "separator"
    INFO = "info"


class MenuIcon(str, Enum):
    BLUETOOTH = "bluetooth"
    WIFI = "wifi"
    NETWORK = "network"
    SECURITY = "security"
    SETTINGS = "settings"
    DEVICE = "device"
    LOCK = "lock"


_GROUP_TYPES = (MenuItemType.MENU, MenuItemType.SUBMENU)


@dataclass(frozen=True)
class MenuNode:
    """One entry of a settings menu.

    children is display-ordered. Toggles are leaves; constructing a toggle
    with children raises ValueError.
    """
    id: str
    label: str
    type: MenuItemType
    icon: Optional[MenuIcon] = None
    description: Optional[str] = None
    action: Optional[str] = None
    value: Any = None
    badge: Optional[str] = None
    requires_confirmation: bool = False
    warning: Optional[str] = None
    children: tuple[MenuNode, ...] = ()

    def __post_init__(self) -> None:
        if self.type == MenuItemType.TOGGLE and self.children:
            raise ValueError(f"Toggle node '{self.id}' cannot have children")
        if self.warning and not self.requires_confirmation:
            raise ValueError(
                f"Node '{self.id}' has warning text but does not require confirmation"
            )

    def walk(self) -> Iterator[MenuNode]:
        """Yield this node and all descendants, depth-first, in display order."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "type": self.type.value,
        }
        if self.icon is not None:
            data["icon"] = self.icon.value
        if self.description is not None:
            data["description"] = self.description
        if self.action is not None:
            data["action"] = self.action
        if self.value is not None:
            data["value"] = self.value
        if self.badge is not None:
            data["badge"] = self.badge
        if self.requires_confirmation:
            data["requires_confirmation"] = True
            if self.warning:
                data["warning"] = self.warning
        if self.children or self.type in _GROUP_TYPES:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MenuNode:
        icon = data.get("icon")
        return cls(
            id=data["id"],
            label=data["label"],
            type=MenuItemType(data["type"]),
            icon=MenuIcon(icon) if icon else None,
            description=data.get("description"),
            action=data.get("action"),
            value=data.get("value"),
            badge=data.get("badge"),
            requires_confirmation=bool(data.get("requires_confirmation", False)),
            warning=data.get("warning"),
            children=tuple(cls.from_dict(c) for c in data.get("children", [])),
        )


@dataclass(frozen=True)
class RoleContext:
    """Why a tree looks the way it does for its role."""
    role: UserRole
    design_intent: tuple[str, ...] = ()
    restrictions: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role.value,
            "design_intent": list(self.design_intent),
            "restrictions": list(self.restrictions),
        }


@dataclass(frozen=True)
class MenuTree:
    """A role-scoped settings hierarchy.

    Node ids are unique within one tree; construction fails otherwise.
    """
    root_id: str
    root_label: str
    children: tuple[MenuNode, ...]
    role_context: RoleContext
    breadcrumb: tuple[str, ...] = ()
    root_icon: Optional[MenuIcon] = None

    def __post_init__(self) -> None:
        seen = {self.root_id}
        for node in self.nodes():
            if node.id in seen:
                raise ValueError(f"Duplicate menu node id '{node.id}'")
            seen.add(node.id)

    @property
    def role(self) -> UserRole:
        return self.role_context.role

    def nodes(self) -> Iterator[MenuNode]:
        """Yield every non-root node, depth-first, in display order."""
        for child in self.children:
            yield from child.walk()

    def find(self, node_id: str) -> Optional[MenuNode]:
        for node in self.nodes():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> dict[str, Any]:
        root: dict[str, Any] = {"id": self.root_id, "label": self.root_label}
        if self.root_icon is not None:
            root["icon"] = self.root_icon.value
        root["children"] = [child.to_dict() for child in self.children]
        return {
            "root": root,
            "breadcrumb": list(self.breadcrumb),
            "role_context": self.role_context.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> MenuTree:
        root = data["root"]
        ctx = data["role_context"]
        icon = root.get("icon")
        return cls(
            root_id=root["id"],
            root_label=root["label"],
            root_icon=MenuIcon(icon) if icon else None,
            children=tuple(MenuNode.from_dict(c) for c in root.get("children", [])),
            breadcrumb=tuple(data.get("breadcrumb", [])),
            role_context=RoleContext(
                role=UserRole(ctx["role"]),
                design_intent=tuple(ctx.get("design_intent", [])),
                restrictions=tuple(ctx.get("restrictions", [])),
            ),
        )
