import itertools

import pytest

from application.observers import RecordingObserver
from application.services.menu_synthesis import MenuSynthesisEngine, is_detailed_request
from application.services.role_resolver import create_user_profile
from domain.events import SynthesisCompleted, SynthesisStarted
from domain.exceptions import RoleContractError
from domain.models import MenuItemType, UserPermissions, UserProfile, UserRole

DETAILED = "connect my headphones"
DEFAULT = "show me the settings"

ALL_COMBOS = list(itertools.product(UserRole, (DETAILED, DEFAULT)))


@pytest.fixture
def engine():
    return MenuSynthesisEngine()


@pytest.mark.parametrize("utterance, expected", [
    ("Bluetooth settings", True),
    ("HEADPHONES won't work", True),
    ("pair a speaker", True),
    ("wifi settings", False),
])
def test_is_detailed_request(utterance, expected):
    assert is_detailed_request(utterance) is expected


@pytest.mark.parametrize("role, utterance", ALL_COMBOS)
def test_synthesis_is_deterministic(engine, role, utterance):
    profile = create_user_profile(role)
    first = engine.synthesize(utterance, profile)
    second = engine.synthesize(utterance, profile)
    assert first == second
    assert first.to_dict() == second.to_dict()


@pytest.mark.parametrize("role, utterance", ALL_COMBOS)
def test_restrictions_empty_only_for_parent(engine, role, utterance):
    tree = engine.synthesize(utterance, create_user_profile(role))
    assert tree.role == role
    assert (tree.role_context.restrictions == ()) == (role == UserRole.PARENT)


@pytest.mark.parametrize("role, utterance", ALL_COMBOS)
def test_toggles_are_leaves_and_ids_unique(engine, role, utterance):
    tree = engine.synthesize(utterance, create_user_profile(role))
    ids = [node.id for node in tree.nodes()]
    assert len(ids) == len(set(ids))
    for node in tree.nodes():
        if node.type == MenuItemType.TOGGLE:
            assert node.children == ()


@pytest.mark.parametrize("role, utterance", ALL_COMBOS)
def test_tree_root_and_breadcrumb(engine, role, utterance):
    tree = engine.synthesize(utterance, create_user_profile(role))
    data = tree.to_dict()
    assert data["root"]["id"] == "settings"
    assert data["root"]["label"] == "Settings"
    assert data["breadcrumb"][0] == "Settings"
    assert (data["breadcrumb"][-1] == "Bluetooth") == (utterance == DETAILED)


def test_parent_detailed_shape(engine, parent):
    tree = engine.synthesize("bluetooth settings", parent)
    assert tree.breadcrumb == ("Settings", "Network", "Connections", "Bluetooth")
    bluetooth = tree.find("bluetooth")
    assert [c.id for c in bluetooth.children] == [
        "bluetooth_enable",
        "bluetooth_pair",
        "bluetooth_paired",
        "bluetooth_permissions",
        "bluetooth_security",
        "bluetooth_advanced",
    ]
    assert tree.find("allowed_1").type == MenuItemType.TOGGLE
    assert "Advanced visibility" in tree.role_context.design_intent


def test_child_detailed_shape(engine, child):
    tree = engine.synthesize(DETAILED, child)
    assert tree.breadcrumb == ("Settings", "Connectivity", "Bluetooth")
    assert tree.find("bluetooth_pair") is None
    assert tree.find("bluetooth_security") is None
    assert tree.find("device_allowed_1").badge == "Allowed"
    assert "Cannot pair new devices" in tree.role_context.restrictions


def test_guest_detailed_shape(engine, guest):
    tree = engine.synthesize(DETAILED, guest)
    assert tree.breadcrumb == ("Settings", "Quick Connectivity", "Bluetooth")
    bluetooth = tree.find("bluetooth")
    assert [c.id for c in bluetooth.children] == ["connect_temp", "disconnect"]
    assert tree.find("connect_temp").badge == "Temporary"
    assert "Connections reset on session end" in tree.role_context.restrictions


def test_default_menus_are_single_group(engine):
    expected = {
        UserRole.PARENT: "network",
        UserRole.CHILD: "connectivity",
        UserRole.GUEST: "quick_connectivity",
    }
    for role, group_id in expected.items():
        tree = engine.synthesize(DEFAULT, create_user_profile(role))
        assert [c.id for c in tree.children] == [group_id]
        assert tree.children[0].children == ()
        assert tree.to_dict()["root"]["children"][0]["children"] == []


def test_engine_ignores_role_keywords(engine, guest):
    # Role resolution happens upstream; the engine trusts the profile.
    tree = engine.synthesize("parent settings for bluetooth", guest)
    assert tree.role == UserRole.GUEST


def test_observer_receives_events_in_order(engine, child):
    observer = RecordingObserver()
    tree = engine.synthesize(DETAILED, child, observer=observer)
    assert len(observer.events) == 2
    started, completed = observer.events
    assert isinstance(started, SynthesisStarted)
    assert started.role == UserRole.CHILD
    assert started.utterance == DETAILED
    assert isinstance(completed, SynthesisCompleted)
    assert observer.completed_tree is tree


def test_unknown_role_rejected_before_events(engine):
    observer = RecordingObserver()
    bogus = UserProfile(role="admin", permissions=UserPermissions())
    with pytest.raises(RoleContractError):
        engine.synthesize(DETAILED, bogus, observer=observer)
    assert observer.events == []
