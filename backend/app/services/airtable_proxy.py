"""Airtable proxy: pass-through list-records call using the server-held token.

The personal access token is read from settings here and nowhere else, so it
never reaches a browser. Every outcome comes back as a ProxyResult carrying
the HTTP status and JSON body the proxy endpoint should answer with.
"""

import logging
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

import httpx

from app.config import settings

logger = logging.getLogger("passport.proxy")

TABLE_NAME_REQUIRED = "tableName is required"
CONFIG_MISSING = "Airtable config missing on server"


@dataclass
class ProxyResult:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_table_url(base_id: str, table_name: str) -> str:
    """List-records URL for a table. The table name is fully percent-encoded."""
    api_url = settings.airtable_api_url.rstrip("/")
    return f"{api_url}/{base_id}/{quote(table_name, safe='')}"


def build_query_params(filter_formula: str | None) -> dict[str, str]:
    """filterByFormula is only sent when a formula was given."""
    params: dict[str, str] = {}
    if filter_formula:
        params["filterByFormula"] = filter_formula
    return params


# Module-level transport override, replaced in tests with httpx.MockTransport
_transport: httpx.AsyncBaseTransport | None = None


def set_transport(transport: httpx.AsyncBaseTransport | None) -> None:
    """Set the transport used for upstream calls (None restores the default)."""
    global _transport
    _transport = transport


async def query_table(
    table_name: str | None,
    filter_formula: str | None = None,
    *,
    timeout: float | None = None,
) -> ProxyResult:
    """Forward one list-records query to Airtable.

    400 when table_name is missing, 500 when credentials are not configured,
    the upstream status on an Airtable error, 500 on transport failure.
    """
    if not table_name:
        return ProxyResult(400, {"error": TABLE_NAME_REQUIRED})

    base_id = settings.airtable_base_id
    api_key = settings.airtable_pat
    if not base_id or not api_key:
        logger.error("Airtable credentials are not configured")
        return ProxyResult(500, {"error": CONFIG_MISSING})

    url = build_table_url(base_id, table_name)
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }
    if timeout is None:
        timeout = settings.request_timeout_seconds

    try:
        async with httpx.AsyncClient(transport=_transport, timeout=timeout) as client:
            response = await client.get(
                url, params=build_query_params(filter_formula), headers=headers
            )
    except httpx.HTTPError as e:
        logger.error("Airtable request for %s failed: %s", table_name, e)
        return ProxyResult(500, {"error": "Server error", "details": str(e)})

    if not response.is_success:
        text = response.text
        logger.error("Airtable error: %s %s", response.status_code, text)
        return ProxyResult(
            response.status_code,
            {"error": "Airtable API error", "status": response.status_code, "body": text},
        )

    try:
        data = response.json()
    except ValueError as e:
        logger.error("Airtable returned non-JSON body for %s", table_name)
        return ProxyResult(500, {"error": "Server error", "details": str(e)})

    return ProxyResult(200, data)
