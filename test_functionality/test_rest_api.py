import pytest
from fastapi.testclient import TestClient

from adapters.rest.app import create_app

from conftest import text, tool_call


@pytest.fixture
def client(factory):
    with TestClient(create_app(factory)) as c:
        yield c


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_run_plain_text(client, fake_llm):
    fake_llm.responses.append(text("4"))
    response = client.post("/agent/run", json={"input": "what's 2+2"})
    assert response.status_code == 200
    assert response.json()["type"] == "plain_text"
    assert response.json()["text"] == "4"


def test_run_settings_menu_with_role(client, fake_llm):
    fake_llm.responses.append(
        tool_call("generate_settings_menu", user_query="connect my headphones")
    )
    response = client.post("/agent/run", json={
        "input": "connect my headphones",
        "role": "child",
        "chat_history": [{"role": "human", "content": "hi"}, {"role": "ai", "content": "hello"}],
    })
    body = response.json()
    assert response.status_code == 200
    assert body["type"] == "tool_result"
    assert body["tool"] == "generate_settings_menu"
    assert body["payload"]["breadcrumb"] == ["Settings", "Connectivity", "Bluetooth"]


@pytest.mark.parametrize("message, status, error", [
    (tool_call("unknown_tool"), 400, "ToolNotFoundError"),
    (tool_call("github_repo", owner="python", repo="cpython"), 403, "ToolPermissionError"),
    (tool_call("generate_settings_menu"), 422, "SchemaViolationError"),
    (text(""), 502, "CompletionDecodeError"),
])
def test_run_errors_map_to_status(client, fake_llm, message, status, error):
    fake_llm.responses.append(message)
    response = client.post("/agent/run", json={"input": "do it", "role": "guest"})
    assert response.status_code == status
    assert response.json()["error"] == error


def test_run_rejects_empty_input(client):
    assert client.post("/agent/run", json={"input": ""}).status_code == 422


def test_menus_endpoint(client, fake_llm):
    response = client.post("/menus", json={"user_query": "bluetooth", "role": "parent"})
    assert response.status_code == 200
    assert response.json()["role_context"]["role"] == "parent"
    assert fake_llm.calls == []


def test_menus_keywords_override_role(client):
    response = client.post("/menus", json={"user_query": "kid bluetooth", "role": "parent"})
    assert response.json()["role_context"]["role"] == "child"


def test_menus_default_role_is_guest(client):
    response = client.post("/menus", json={"user_query": "show settings"})
    assert response.json()["breadcrumb"] == ["Settings", "Quick Connectivity"]


def test_get_role(client):
    response = client.get("/roles/child")
    assert response.status_code == 200
    body = response.json()
    assert body["role"] == "child"
    assert body["permissions"]["max_response_length"] == 500
    assert body["permissions"]["can_use_github"] is False


def test_get_unknown_role(client):
    assert client.get("/roles/admin").status_code == 422
