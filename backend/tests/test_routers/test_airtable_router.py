"""Router tests: Airtable proxy endpoint wire format."""

import httpx
import pytest
from httpx import AsyncClient

from app.config import settings
from app.services import airtable_proxy


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setattr(settings, "airtable_base_id", "appTest")
    monkeypatch.setattr(settings, "airtable_pat", "patSecret")


@pytest.fixture
def upstream(credentials):
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"records": [{"id": "r1", "fields": {"Full Name": "Ann"}}]})

    airtable_proxy.set_transport(httpx.MockTransport(handler))
    return seen


@pytest.mark.asyncio
async def test_proxy_without_formula(client: AsyncClient, upstream):
    """POST {tableName: People} reaches Airtable with no filter parameter."""
    resp = await client.post("/api/airtable", json={"tableName": "People"})
    assert resp.status_code == 200
    assert resp.json()["records"][0]["id"] == "r1"
    assert len(upstream) == 1
    assert "filterByFormula" not in upstream[0].url.params


@pytest.mark.asyncio
async def test_proxy_with_formula(client: AsyncClient, upstream):
    resp = await client.post(
        "/.netlify/functions/airtable",
        json={"tableName": "People", "filterFormula": '{Full Name} = "Ann"'},
    )
    assert resp.status_code == 200
    assert upstream[0].url.params["filterByFormula"] == '{Full Name} = "Ann"'


@pytest.mark.asyncio
async def test_proxy_requires_table_name(client: AsyncClient, upstream):
    resp = await client.post("/api/airtable", json={"filterFormula": "x"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "tableName is required"}
    assert upstream == []


@pytest.mark.asyncio
async def test_proxy_empty_body_requires_table_name(client: AsyncClient):
    resp = await client.post("/api/airtable")
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_proxy_missing_credentials(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "airtable_base_id", "")
    monkeypatch.setattr(settings, "airtable_pat", "")
    resp = await client.post("/api/airtable", json={"tableName": "People"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "Airtable config missing on server"}


@pytest.mark.asyncio
async def test_proxy_relays_upstream_status(client: AsyncClient, credentials):
    airtable_proxy.set_transport(
        httpx.MockTransport(lambda request: httpx.Response(404, text="NOT_FOUND"))
    )
    resp = await client.post("/api/airtable", json={"tableName": "Nope"})
    assert resp.status_code == 404
    assert resp.json() == {"error": "Airtable API error", "status": 404, "body": "NOT_FOUND"}


@pytest.mark.asyncio
async def test_proxy_rejects_other_methods(client: AsyncClient):
    resp = await client.get("/api/airtable")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method Not Allowed"}


@pytest.mark.asyncio
async def test_proxy_unreadable_body(client: AsyncClient):
    resp = await client.post(
        "/api/airtable", content=b"{not json", headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 500
    assert resp.json()["error"] == "Server error"


@pytest.mark.asyncio
async def test_token_never_in_response(client: AsyncClient, upstream):
    resp = await client.post("/api/airtable", json={"tableName": "People"})
    assert "patSecret" not in resp.text
    assert upstream[0].headers["Authorization"] == "Bearer patSecret"


@pytest.mark.parametrize("body", [b"[]", b'"People"', b"42"])
@pytest.mark.asyncio
async def test_proxy_non_object_body_requires_table_name(client: AsyncClient, upstream, body):
    resp = await client.post(
        "/api/airtable", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "tableName is required"}
    assert upstream == []
