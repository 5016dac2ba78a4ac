import asyncio
import json
from unittest.mock import MagicMock

import pytest
import requests
from pydantic import ValidationError

from agent.tools.github_repo import GITHUB_API_URL, GithubRepoTool
from agent.tools.invoice import InvoiceInput, InvoiceTool, build_invoice
from agent.tools.settings_menu import SettingsMenuTool
from agent.tools.weather import FORECAST_URL, GEOCODING_URL, WeatherTool
from agent.tools.website_data import WebsiteDataTool
from application.observers import RecordingObserver
from application.services.menu_synthesis import MenuSynthesisEngine
from domain.exceptions import ToolExecutionError, ToolPermissionError
from domain.models import UserPermissions, UserProfile, UserRole


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


# ---------------------------------------------------------------------------
# generate_settings_menu
# ---------------------------------------------------------------------------

def test_settings_menu_output_is_tree_json(ctx_for, parent):
    tool = SettingsMenuTool(MenuSynthesisEngine())
    observer = RecordingObserver()
    result = asyncio.run(tool.execute(ctx_for(parent, observer), user_query="pair my speaker"))

    payload = json.loads(result.output)
    assert payload == result.data.to_dict()
    assert payload["role_context"]["restrictions"] == []
    assert len(observer.events) == 2


# ---------------------------------------------------------------------------
# get_weather
# ---------------------------------------------------------------------------

def test_weather_success(ctx_for):
    session = MagicMock()
    session.get.side_effect = [
        _response({"results": [
            {"name": "Oslo", "country": "Norway", "latitude": 59.91, "longitude": 10.75},
        ]}),
        _response({"current": {
            "temperature_2m": 3.5, "wind_speed_10m": 12.0, "weather_code": 61,
        }}),
    ]
    tool = WeatherTool(session=session, timeout=2.0)
    result = asyncio.run(tool.execute(ctx_for(), city="Oslo"))

    report = json.loads(result.output)
    assert report["city"] == "Oslo"
    assert report["temperature_c"] == 3.5
    assert report["weather_code"] == 61

    geo_call, forecast_call = session.get.call_args_list
    assert geo_call.args[0] == GEOCODING_URL
    assert geo_call.kwargs["params"]["name"] == "Oslo"
    assert forecast_call.args[0] == FORECAST_URL
    assert forecast_call.kwargs["params"]["latitude"] == 59.91
    assert forecast_call.kwargs["timeout"] == 2.0


def test_weather_unknown_city(ctx_for):
    session = MagicMock()
    session.get.return_value = _response({})
    tool = WeatherTool(session=session)
    with pytest.raises(ToolExecutionError, match="Unknown city"):
        asyncio.run(tool.execute(ctx_for(), city="Atlantis"))


def test_weather_http_error(ctx_for):
    session = MagicMock()
    session.get.side_effect = requests.ConnectionError("Network down")
    tool = WeatherTool(session=session)
    with pytest.raises(ToolExecutionError, match="Network down"):
        asyncio.run(tool.execute(ctx_for(), city="Oslo"))


# ---------------------------------------------------------------------------
# github_repo
# ---------------------------------------------------------------------------

def test_github_repo_success(ctx_for, parent):
    session = MagicMock()
    session.get.return_value = _response({
        "full_name": "python/cpython",
        "description": "The Python programming language",
        "stargazers_count": 60000,
        "forks_count": 30000,
        "open_issues_count": 9000,
        "language": "Python",
        "html_url": "https://github.com/python/cpython",
    })
    tool = GithubRepoTool(session=session, token="secret")
    result = asyncio.run(tool.execute(ctx_for(parent), owner="python", repo="cpython"))

    summary = json.loads(result.output)
    assert summary["full_name"] == "python/cpython"
    assert summary["stars"] == 60000
    url = session.get.call_args.args[0]
    assert url == f"{GITHUB_API_URL}/repos/python/cpython"
    assert session.get.call_args.kwargs["headers"]["Authorization"] == "Bearer secret"


def test_github_repo_without_token(ctx_for, parent):
    session = MagicMock()
    session.get.return_value = _response({"full_name": "a/b"})
    tool = GithubRepoTool(session=session)
    result = asyncio.run(tool.execute(ctx_for(parent), owner="a", repo="b"))

    assert "Authorization" not in session.get.call_args.kwargs["headers"]
    assert json.loads(result.output)["description"] == ""


def test_github_repo_not_found(ctx_for, parent):
    response = _response({})
    response.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
    session = MagicMock()
    session.get.return_value = response
    tool = GithubRepoTool(session=session)
    with pytest.raises(ToolExecutionError, match="404"):
        asyncio.run(tool.execute(ctx_for(parent), owner="nobody", repo="nothing"))


# ---------------------------------------------------------------------------
# website_data
# ---------------------------------------------------------------------------

PAGE = """
<html><head>
<title> Example Domain </title>
<meta name="description" content="An illustrative page.">
</head><body><p>Hello</p></body></html>
"""


def _page_response(html, status=200):
    response = MagicMock()
    response.text = html
    response.status_code = status
    response.raise_for_status.return_value = None
    return response


def test_website_data_success(ctx_for, parent):
    session = MagicMock()
    session.get.return_value = _page_response(PAGE)
    tool = WebsiteDataTool(session=session, timeout=3.0)
    result = asyncio.run(tool.execute(ctx_for(parent), url="https://example.com/about"))

    summary = json.loads(result.output)
    assert summary == {
        "url": "https://example.com/about",
        "status": 200,
        "title": "Example Domain",
        "description": "An illustrative page.",
        "domain": "example.com",
    }
    assert session.get.call_args.kwargs["timeout"] == 3.0


def test_website_data_og_description_fallback(ctx_for, parent):
    html = '<html><head><meta property="og:description" content="From OG"></head></html>'
    session = MagicMock()
    session.get.return_value = _page_response(html)
    tool = WebsiteDataTool(session=session)
    summary = json.loads(asyncio.run(
        tool.execute(ctx_for(parent), url="https://example.com")
    ).output)
    assert summary["title"] == ""
    assert summary["description"] == "From OG"


def test_website_data_http_error(ctx_for, parent):
    response = _page_response("", status=500)
    response.raise_for_status.side_effect = requests.HTTPError("500 Server Error")
    session = MagicMock()
    session.get.return_value = response
    tool = WebsiteDataTool(session=session)
    with pytest.raises(ToolExecutionError, match="500"):
        asyncio.run(tool.execute(ctx_for(parent), url="https://example.com"))


def test_website_data_respects_allowed_domains(ctx_for):
    profile = UserProfile(
        role=UserRole.PARENT,
        permissions=UserPermissions(
            can_use_web_scraping=True, allowed_domains=("example.com",),
        ),
    )
    session = MagicMock()
    session.get.return_value = _page_response(PAGE)
    tool = WebsiteDataTool(session=session)

    asyncio.run(tool.execute(ctx_for(profile), url="https://docs.example.com/x"))
    with pytest.raises(ToolPermissionError):
        asyncio.run(tool.execute(ctx_for(profile), url="https://evil.test/"))
    assert session.get.call_count == 1


# ---------------------------------------------------------------------------
# invoice
# ---------------------------------------------------------------------------

def test_invoice_totals(ctx_for, parent):
    tool = InvoiceTool()
    ctx = ctx_for(parent)
    result = asyncio.run(tool.execute(
        ctx,
        customer_name="ACME",
        line_items=[
            {"description": "Speaker", "quantity": 3, "unit_price": 19.99},
            {"description": "Install", "quantity": 1, "unit_price": 50},
        ],
        currency="EUR",
        tax_rate=0.2,
    ))

    invoice = json.loads(result.output)
    assert invoice["invoice_number"] == f"INV-{ctx.request_id[:8].upper()}"
    assert [line["line_total"] for line in invoice["line_items"]] == [59.97, 50.0]
    assert invoice["subtotal"] == 109.97
    assert invoice["tax"] == 21.99
    assert invoice["total"] == 131.96
    assert invoice["currency"] == "EUR"


def test_build_invoice_rounds_half_up():
    invoice = build_invoice(
        "INV-1", "ACME", [{"description": "x", "quantity": 1, "unit_price": 0.125}],
    )
    assert invoice["subtotal"] == 0.13
    assert invoice["tax"] == 0.0
    assert invoice["total"] == 0.13


@pytest.mark.parametrize("parameters", [
    {"customer_name": "ACME", "line_items": []},
    {"customer_name": "ACME", "line_items": [{"description": "x", "quantity": 0, "unit_price": 1}]},
    {"customer_name": "ACME", "line_items": [{"description": "x", "quantity": 1, "unit_price": 1}],
     "tax_rate": 1.5},
    {"customer_name": "ACME", "line_items": [{"description": "x", "quantity": 1, "unit_price": 1}],
     "currency": "euro"},
])
def test_invoice_schema_rejects_bad_input(parameters):
    with pytest.raises(ValidationError):
        InvoiceInput.model_validate(parameters)
