"""Record client tests: fail-soft fetches, timeouts and backends."""

import json
import logging

import httpx
import pytest

from app.config import settings
from app.services import airtable_proxy
from app.services.record_client import (
    InMemoryRecordClient,
    ProxyRecordClient,
    UpstreamRecordClient,
    person_formula,
)


def test_person_formula_escapes_quotes():
    assert person_formula("Person", "Ann") == '{Person} = "Ann"'
    assert person_formula("Person", 'A "B" C') == '{Person} = "A \\"B\\" C"'


@pytest.mark.asyncio
async def test_in_memory_fetch_and_filter():
    client = InMemoryRecordClient({
        "People": [
            {"id": "r1", "fields": {"Full Name": "Ann"}},
            {"id": "r2", "fields": {"Full Name": "Bob"}},
        ],
    })
    records = await client.fetch("People", person_formula("Full Name", "Ann"))
    assert [r.id for r in records] == ["r1"]
    assert len(await client.fetch("People")) == 2
    assert client.calls["People"] == 2


@pytest.mark.asyncio
async def test_in_memory_formula_on_linked_field():
    client = InMemoryRecordClient({
        "Experiences": [{"id": "e1", "fields": {"Person": ["Ann"]}}],
    })
    records = await client.fetch("Experiences", '{Person} = "Ann"')
    assert [r.id for r in records] == ["e1"]


@pytest.mark.asyncio
async def test_failure_returns_empty_list(caplog):
    """A failing table is logged and degrades to no records."""
    client = InMemoryRecordClient({"People": []}, failing={"People"})
    with caplog.at_level(logging.ERROR, logger="passport.records"):
        assert await client.fetch("People") == []
    assert "Error fetching from People" in caplog.text


@pytest.mark.asyncio
async def test_unknown_table_returns_empty_list():
    client = InMemoryRecordClient({})
    assert await client.fetch("Nope") == []


@pytest.mark.asyncio
async def test_unsupported_formula_returns_empty_list():
    client = InMemoryRecordClient({"People": [{"id": "r1", "fields": {}}]})
    assert await client.fetch("People", "AND(1, 2)") == []


@pytest.mark.asyncio
async def test_timeout_returns_empty_list(caplog):
    client = InMemoryRecordClient({"People": []}, delay=0.5, timeout=0.01)
    with caplog.at_level(logging.ERROR, logger="passport.records"):
        assert await client.fetch("People") == []
    assert "Timed out" in caplog.text


@pytest.mark.asyncio
async def test_proxy_client_posts_table_and_formula():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"records": [{"id": "r1", "fields": {"Name": "x"}}]})

    client = ProxyRecordClient(
        "http://proxy.test/api/airtable", transport=httpx.MockTransport(handler)
    )
    records = await client.fetch("Skills")
    assert records[0].id == "r1"
    assert records[0].fields == {"Name": "x"}

    await client.fetch("People", '{Full Name} = "Ann"')
    assert seen == [
        {"tableName": "Skills"},
        {"tableName": "People", "filterFormula": '{Full Name} = "Ann"'},
    ]


@pytest.mark.asyncio
async def test_proxy_client_error_status_returns_empty():
    transport = httpx.MockTransport(
        lambda request: httpx.Response(500, json={"error": "Airtable config missing on server"})
    )
    client = ProxyRecordClient("http://proxy.test/api/airtable", transport=transport)
    assert await client.fetch("Skills") == []


@pytest.mark.asyncio
async def test_proxy_client_transport_error_returns_empty():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = ProxyRecordClient(
        "http://proxy.test/api/airtable", transport=httpx.MockTransport(handler)
    )
    assert await client.fetch("Skills") == []


@pytest.mark.asyncio
async def test_proxy_client_malformed_payload_returns_empty():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=["not", "records"]))
    client = ProxyRecordClient("http://proxy.test/api/airtable", transport=transport)
    assert await client.fetch("Skills") == []


@pytest.mark.asyncio
async def test_upstream_client_goes_through_proxy_service(monkeypatch):
    monkeypatch.setattr(settings, "airtable_base_id", "appTest")
    monkeypatch.setattr(settings, "airtable_pat", "patTest")
    airtable_proxy.set_transport(httpx.MockTransport(
        lambda request: httpx.Response(200, json={"records": [{"id": "r9", "fields": {}}]})
    ))
    records = await UpstreamRecordClient().fetch("People")
    assert [r.id for r in records] == ["r9"]


@pytest.mark.asyncio
async def test_upstream_client_without_credentials_returns_empty(monkeypatch):
    monkeypatch.setattr(settings, "airtable_base_id", "")
    monkeypatch.setattr(settings, "airtable_pat", "")
    assert await UpstreamRecordClient().fetch("People") == []
