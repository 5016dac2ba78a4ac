import pytest

from application.services.role_resolver import (
    ROLE_PERMISSIONS,
    create_user_profile,
    detect_role,
    permissions_for_role,
    resolve_profile,
    resolve_role,
)
from domain.exceptions import RoleContractError
from domain.models import UserRole

# ---------------------------------------------------------------------------
# Keyword detection
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("utterance, expected", [
    ("Show me PARENT settings for Bluetooth", UserRole.PARENT),
    ("I need full access to the network", UserRole.PARENT),
    ("simple settings please", UserRole.CHILD),
    ("my kid wants to connect headphones", UserRole.CHILD),
    ("quick access to bluetooth", UserRole.GUEST),
    ("temporary connection", UserRole.GUEST),
])
def test_detect_role_keywords(utterance, expected):
    assert detect_role(utterance) == expected


def test_detect_role_priority_parent_over_child():
    assert detect_role("admin mode but simplified") == UserRole.PARENT


def test_detect_role_priority_child_over_guest():
    assert detect_role("safe guest mode") == UserRole.CHILD


def test_detect_role_common_word_fires_parent():
    # "complete" is a parent keyword even in unrelated text.
    assert detect_role("complete the pairing") == UserRole.PARENT


def test_detect_role_none_without_keywords():
    assert detect_role("connect my headphones") is None
    assert detect_role("") is None


# ---------------------------------------------------------------------------
# Resolution with fallback
# ---------------------------------------------------------------------------

def test_resolve_role_defaults_to_guest():
    assert resolve_role("connect my headphones") == UserRole.GUEST


def test_resolve_role_uses_fallback_profile(parent):
    assert resolve_role("connect my headphones", parent) == UserRole.PARENT


def test_resolve_role_keywords_win_over_fallback(parent):
    assert resolve_role("kid settings", parent) == UserRole.CHILD


def test_resolve_profile_keeps_matching_fallback():
    named = create_user_profile(UserRole.CHILD, name="Mia")
    assert resolve_profile("simple bluetooth", named) is named


def test_resolve_profile_builds_new_profile_on_override():
    named = create_user_profile(UserRole.CHILD, name="Mia")
    profile = resolve_profile("full control please", named)
    assert profile.role == UserRole.PARENT
    assert profile.name is None


# ---------------------------------------------------------------------------
# Permission table
# ---------------------------------------------------------------------------

def test_child_permissions():
    perms = permissions_for_role(UserRole.CHILD)
    assert perms.can_use_weather
    assert not perms.can_use_github
    assert not perms.can_modify_settings
    assert perms.max_response_length == 500


def test_parent_permissions_have_everything():
    perms = permissions_for_role(UserRole.PARENT)
    assert all(
        value for key, value in perms.to_dict().items() if key.startswith("can_")
    )
    assert perms.max_response_length is None


def test_guest_permissions():
    perms = permissions_for_role(UserRole.GUEST)
    assert perms.can_use_weather
    assert not perms.can_upload_files
    assert perms.max_response_length == 300


def test_permissions_accept_role_value():
    assert permissions_for_role("parent") is ROLE_PERMISSIONS[UserRole.PARENT]


def test_permissions_unknown_role():
    with pytest.raises(RoleContractError):
        permissions_for_role("admin")


def test_profile_permissions_derived_from_role():
    profile = create_user_profile(UserRole.GUEST, name="Visitor")
    assert profile.permissions == ROLE_PERMISSIONS[UserRole.GUEST]
    assert profile.to_dict()["name"] == "Visitor"


def test_permission_table_is_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS[UserRole.GUEST] = ROLE_PERMISSIONS[UserRole.PARENT]


@pytest.mark.parametrize("utterance, expected", [
    ("simple mode for my kid", UserRole.CHILD),
    ("quick temporary access", UserRole.GUEST),
    ("turn on bluetooth", UserRole.GUEST),
    ("parent settings for bluetooth", UserRole.PARENT),
])
def test_resolve_role_without_fallback(utterance, expected):
    assert resolve_role(utterance) == expected
