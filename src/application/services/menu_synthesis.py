"""
application.services.menu_synthesis - Role-aware settings menu builder.

Given a free-text request and a caller profile, deterministically builds a
hierarchical settings menu. Two inputs select one of six fixed shapes:

    role      : parent / child / guest (from the profile)
    detailed  : True when the request is about Bluetooth pairing
                (bluetooth, headphone, connect, pair)

The shapes encode product policy:
    parent  deepest hierarchy, security and child-permission sub-menus,
            no restrictions.
    child   shallow, no pairing or security actions, restrictions spell
            out what was left out.
    guest   shallow, session-bound actions only, restrictions say nothing
            persists.

The engine has no side effects. Observers, when supplied, receive
SynthesisStarted before construction and SynthesisCompleted afterwards.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from domain.events import SynthesisCompleted, SynthesisStarted
from domain.exceptions import RoleContractError
from domain.models import (
    MenuIcon,
    MenuItemType,
    MenuNode,
    MenuTree,
    RoleContext,
    UserProfile,
    UserRole,
)
from domain.ports import SynthesisObserver

logger = logging.getLogger(__name__)


BLUETOOTH_KEYWORDS: tuple[str, ...] = ("bluetooth", "headphone", "connect", "pair")

ROOT_ID = "settings"
ROOT_LABEL = "Settings"


def is_detailed_request(utterance: str) -> bool:
    """Return True when the request targets the Bluetooth pairing sub-domain."""
    lowered = utterance.lower()
    return any(keyword in lowered for keyword in BLUETOOTH_KEYWORDS)


def _tree(
    children: tuple[MenuNode, ...],
    breadcrumb: tuple[str, ...],
    role: UserRole,
    design_intent: tuple[str, ...],
    restrictions: tuple[str, ...] = (),
) -> MenuTree:
    return MenuTree(
        root_id=ROOT_ID,
        root_label=ROOT_LABEL,
        root_icon=MenuIcon.SETTINGS,
        children=children,
        breadcrumb=breadcrumb,
        role_context=RoleContext(
            role=role,
            design_intent=design_intent,
            restrictions=restrictions,
        ),
    )


# ---------------------------------------------------------------------------
# Parent: full control, advanced options
# ---------------------------------------------------------------------------

def _parent_bluetooth() -> MenuNode:
    return MenuNode(
        id="bluetooth",
        label="Bluetooth",
        type=MenuItemType.SUBMENU,
        icon=MenuIcon.BLUETOOTH,
        description="Manage Bluetooth connections and devices",
        children=(
            MenuNode(
                id="bluetooth_enable",
                label="Enable / Disable",
                type=MenuItemType.TOGGLE,
                action="toggle_bluetooth",
                value=True,
                description="Turn Bluetooth on or off",
            ),
            MenuNode(
                id="bluetooth_pair",
                label="Pair New Device",
                type=MenuItemType.ACTION,
                action="pair_device",
                description="Search and pair a new Bluetooth device",
                icon=MenuIcon.DEVICE,
            ),
            MenuNode(
                id="bluetooth_paired",
                label="Paired Devices",
                type=MenuItemType.SUBMENU,
                action="view_paired_devices",
                description="View and manage paired devices",
                children=(
                    MenuNode(
                        id="device_1",
                        label="My Headphones",
                        type=MenuItemType.ACTION,
                        action="connect_device",
                        description="Connect to this device",
                    ),
                    MenuNode(
                        id="device_2",
                        label="Car Audio",
                        type=MenuItemType.ACTION,
                        action="connect_device",
                        description="Connect to this device",
                    ),
                ),
            ),
            MenuNode(
                id="bluetooth_permissions",
                label="Permissions (Child Access)",
                type=MenuItemType.SUBMENU,
                action="manage_permissions",
                description="Control which devices children can connect to",
                icon=MenuIcon.LOCK,
                children=(
                    MenuNode(
                        id="allow_all",
                        label="Allow All Devices",
                        type=MenuItemType.TOGGLE,
                        action="toggle_child_permission",
                        description="Allow children to connect to any device",
                    ),
                    MenuNode(
                        id="allowed_devices",
                        label="Allowed Devices List",
                        type=MenuItemType.SUBMENU,
                        description="Devices children can connect to",
                        children=(
                            MenuNode(
                                id="allowed_1",
                                label="Study Room Speaker",
                                type=MenuItemType.TOGGLE,
                                action="toggle_allowed_device",
                                description="Allow children to use this device",
                            ),
                        ),
                    ),
                ),
            ),
            MenuNode(
                id="bluetooth_security",
                label="Security",
                type=MenuItemType.SUBMENU,
                action="security_settings",
                icon=MenuIcon.SECURITY,
                description="Bluetooth security and pairing settings",
                children=(
                    MenuNode(
                        id="pairing_mode",
                        label="Pairing Mode",
                        type=MenuItemType.ACTION,
                        action="set_pairing_mode",
                        description="Open/Close pairing mode",
                    ),
                    MenuNode(
                        id="auto_pair",
                        label="Auto-Pair Trusted Devices",
                        type=MenuItemType.TOGGLE,
                        action="toggle_auto_pair",
                        description="Automatically pair previously trusted devices",
                    ),
                ),
            ),
            MenuNode(
                id="bluetooth_advanced",
                label="Advanced",
                type=MenuItemType.SUBMENU,
                action="advanced_settings",
                description="Advanced Bluetooth configuration",
                children=(
                    MenuNode(
                        id="codec",
                        label="Audio Codec",
                        type=MenuItemType.ACTION,
                        action="select_codec",
                        description="Select audio codec (AAC, SBC, aptX)",
                    ),
                    MenuNode(
                        id="range",
                        label="Transmission Range",
                        type=MenuItemType.ACTION,
                        action="set_range",
                        description="Adjust Bluetooth range",
                    ),
                ),
            ),
        ),
    )


def parent_menu(detailed: bool) -> MenuTree:
    if detailed:
        network = MenuNode(
            id="network",
            label="Network",
            type=MenuItemType.MENU,
            icon=MenuIcon.NETWORK,
            children=(
                MenuNode(
                    id="connections",
                    label="Connections",
                    type=MenuItemType.MENU,
                    icon=MenuIcon.WIFI,
                    children=(_parent_bluetooth(),),
                ),
            ),
        )
        return _tree(
            children=(network,),
            breadcrumb=("Settings", "Network", "Connections", "Bluetooth"),
            role=UserRole.PARENT,
            design_intent=(
                "Full control",
                "Configuration & security",
                "Advanced visibility",
            ),
        )

    return _tree(
        children=(
            MenuNode(
                id="network",
                label="Network",
                type=MenuItemType.MENU,
                icon=MenuIcon.NETWORK,
            ),
        ),
        breadcrumb=("Settings", "Network"),
        role=UserRole.PARENT,
        design_intent=("Full control", "Configuration & security"),
    )


# ---------------------------------------------------------------------------
# Child: safety-first, minimal options
# ---------------------------------------------------------------------------

def child_menu(detailed: bool) -> MenuTree:
    if detailed:
        bluetooth = MenuNode(
            id="bluetooth",
            label="Bluetooth",
            type=MenuItemType.SUBMENU,
            icon=MenuIcon.BLUETOOTH,
            description="Connect to your devices",
            children=(
                MenuNode(
                    id="bluetooth_on_off",
                    label="On / Off",
                    type=MenuItemType.TOGGLE,
                    action="toggle_bluetooth",
                    value=True,
                    description="Turn Bluetooth on or off",
                ),
                MenuNode(
                    id="my_devices",
                    label="My Devices",
                    type=MenuItemType.SUBMENU,
                    action="view_my_devices",
                    description="Devices you can connect to",
                    icon=MenuIcon.DEVICE,
                    children=(
                        MenuNode(
                            id="device_allowed_1",
                            label="Study Room Speaker",
                            type=MenuItemType.ACTION,
                            action="connect_allowed_device",
                            description="Tap to connect",
                            badge="Allowed",
                        ),
                    ),
                ),
            ),
        )
        return _tree(
            children=(
                MenuNode(
                    id="connectivity",
                    label="Connectivity",
                    type=MenuItemType.MENU,
                    icon=MenuIcon.WIFI,
                    children=(bluetooth,),
                ),
            ),
            breadcrumb=("Settings", "Connectivity", "Bluetooth"),
            role=UserRole.CHILD,
            design_intent=(
                "Safety-first",
                "No system-level changes",
                "Minimal cognitive load",
            ),
            restrictions=(
                "Cannot pair new devices",
                "Can only connect to pre-approved devices",
                "No access to security settings",
            ),
        )

    return _tree(
        children=(
            MenuNode(
                id="connectivity",
                label="Connectivity",
                type=MenuItemType.MENU,
                icon=MenuIcon.WIFI,
            ),
        ),
        breadcrumb=("Settings", "Connectivity"),
        role=UserRole.CHILD,
        design_intent=("Safety-first", "No system-level changes"),
        restrictions=("Limited device access",),
    )


# ---------------------------------------------------------------------------
# Guest: temporary access, nothing persists
# ---------------------------------------------------------------------------

def guest_menu(detailed: bool) -> MenuTree:
    if detailed:
        bluetooth = MenuNode(
            id="bluetooth",
            label="Bluetooth",
            type=MenuItemType.SUBMENU,
            icon=MenuIcon.BLUETOOTH,
            description="Temporary Bluetooth connections",
            children=(
                MenuNode(
                    id="connect_temp",
                    label="Connect Temporary Device",
                    type=MenuItemType.ACTION,
                    action="connect_temporary",
                    description="Connect a device (will disconnect when you leave)",
                    icon=MenuIcon.DEVICE,
                    badge="Temporary",
                ),
                MenuNode(
                    id="disconnect",
                    label="Disconnect",
                    type=MenuItemType.ACTION,
                    action="disconnect_all",
                    description="Disconnect all temporary connections",
                ),
            ),
        )
        return _tree(
            children=(
                MenuNode(
                    id="quick_connectivity",
                    label="Quick Connectivity",
                    type=MenuItemType.MENU,
                    icon=MenuIcon.WIFI,
                    description="Temporary connections only",
                    children=(bluetooth,),
                ),
            ),
            breadcrumb=("Settings", "Quick Connectivity", "Bluetooth"),
            role=UserRole.GUEST,
            design_intent=(
                "Temporary access",
                "No persistent changes",
                "Frictionless experience",
            ),
            restrictions=(
                "Connections reset on session end",
                "Cannot pair new devices",
                "No permanent changes",
            ),
        )

    return _tree(
        children=(
            MenuNode(
                id="quick_connectivity",
                label="Quick Connectivity",
                type=MenuItemType.MENU,
                icon=MenuIcon.WIFI,
            ),
        ),
        breadcrumb=("Settings", "Quick Connectivity"),
        role=UserRole.GUEST,
        design_intent=("Temporary access", "No persistent changes"),
        restrictions=("All changes are temporary",),
    )


_BUILDERS: dict[UserRole, Callable[[bool], MenuTree]] = {
    UserRole.PARENT: parent_menu,
    UserRole.CHILD: child_menu,
    UserRole.GUEST: guest_menu,
}


class MenuSynthesisEngine:
    """Builds role-scoped settings menus."""

    def synthesize(
        self,
        utterance: str,
        profile: UserProfile,
        observer: Optional[SynthesisObserver] = None,
    ) -> MenuTree:
        """Build the menu for this request and caller.

        Raises:
            RoleContractError: profile.role is not a UserRole member.
        """
        builder = _BUILDERS.get(profile.role) if isinstance(profile.role, UserRole) else None
        if builder is None:
            raise RoleContractError(f"Unknown role: {profile.role!r}")

        if observer is not None:
            observer.notify(SynthesisStarted(role=profile.role, utterance=utterance))

        detailed = is_detailed_request(utterance)
        tree = builder(detailed)
        logger.info(
            "Synthesized %s menu for role=%s (breadcrumb=%s)",
            "detailed" if detailed else "default",
            profile.role.value,
            " > ".join(tree.breadcrumb),
        )

        if observer is not None:
            observer.notify(SynthesisCompleted(tree=tree))
        return tree
