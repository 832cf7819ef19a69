"""Record client: read queries against the record store.

fetch() never raises. Any non-success response, transport failure, malformed
payload or timeout is logged and degrades to an empty list, so an unreachable
store empties a section instead of aborting the page.

Backends are pluggable. Default is chosen by settings.record_source.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from collections import Counter
from typing import Any

import httpx

from app.config import settings
from app.schemas.records import Record, RecordList
from app.services import airtable_proxy

logger = logging.getLogger("passport.records")


class RecordStoreError(Exception):
    """A backend could not produce a record list. Never escapes fetch()."""


def person_formula(field: str, value: str) -> str:
    """Airtable formula matching `{field} = "value"`, with the value escaped."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'{{{field}}} = "{escaped}"'


class RecordClient(ABC):
    """Abstract read-only client for the record store."""

    def __init__(self, *, timeout: float | None = None):
        if timeout is None:
            timeout = settings.request_timeout_seconds
        self.timeout = timeout

    @abstractmethod
    async def _query(self, table_name: str, filter_formula: str | None) -> Any:
        """Return the raw list-records payload. Raises RecordStoreError on failure."""
        ...

    async def fetch(
        self, table_name: str, filter_formula: str | None = None
    ) -> list[Record]:
        """Fetch records from a table. Returns [] on any failure."""
        try:
            payload = await asyncio.wait_for(
                self._query(table_name, filter_formula or None), timeout=self.timeout
            )
            return RecordList.model_validate(payload).records
        except asyncio.TimeoutError:
            logger.error("Timed out fetching from %s after %.1fs", table_name, self.timeout)
        except (RecordStoreError, httpx.HTTPError, ValueError) as e:
            logger.error("Error fetching from %s: %s", table_name, e)
        except Exception:
            logger.exception("Unexpected error fetching from %s", table_name)
        return []


class ProxyRecordClient(RecordClient):
    """POSTs {tableName, filterFormula} to the proxy endpoint over HTTP."""

    def __init__(
        self,
        proxy_url: str | None = None,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(timeout=timeout)
        self.proxy_url = proxy_url or settings.proxy_url
        self._transport = transport

    async def _query(self, table_name: str, filter_formula: str | None) -> Any:
        body = {"tableName": table_name}
        if filter_formula:
            body["filterFormula"] = filter_formula
        async with httpx.AsyncClient(transport=self._transport, timeout=self.timeout) as client:
            response = await client.post(self.proxy_url, json=body)
        if not response.is_success:
            raise RecordStoreError(f"proxy returned {response.status_code}: {response.text}")
        return response.json()


class UpstreamRecordClient(RecordClient):
    """Calls the proxy service in-process. The token stays in this server."""

    async def _query(self, table_name: str, filter_formula: str | None) -> Any:
        result = await airtable_proxy.query_table(
            table_name, filter_formula, timeout=self.timeout
        )
        if not result.ok:
            raise RecordStoreError(f"proxy returned {result.status_code}: {result.body}")
        return result.body


_FORMULA_RE = re.compile(r'^\{(?P<field>[^}]+)\}\s*=\s*"(?P<value>(?:[^"\\]|\\.)*)"$')


def _unescape(value: str) -> str:
    return re.sub(r"\\(.)", r"\1", value)


def _formula_text(value: Any) -> str:
    # Airtable renders linked/multi-value fields as comma-joined text in formulas
    if value is None:
        return ""
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value)


class InMemoryRecordClient(RecordClient):
    """Fixture tables for tests and local development. No network I/O.

    Understands only `{Field} = "value"` formulas. `calls` counts fetches
    per table, `failing` tables raise, `delay` sleeps before answering.
    """

    def __init__(
        self,
        tables: dict[str, list[dict]] | None = None,
        *,
        timeout: float | None = None,
        delay: float = 0.0,
        failing: set[str] | None = None,
    ):
        super().__init__(timeout=timeout)
        self._tables: dict[str, list[dict]] = {
            name: list(records) for name, records in (tables or {}).items()
        }
        self.calls: Counter[str] = Counter()
        self.delay = delay
        self.failing: set[str] = set(failing or ())

    def set_table(self, table_name: str, records: list[dict]) -> None:
        self._tables[table_name] = list(records)

    async def _query(self, table_name: str, filter_formula: str | None) -> Any:
        self.calls[table_name] += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if table_name in self.failing:
            raise RecordStoreError(f"table {table_name} is unavailable")
        if table_name not in self._tables:
            raise RecordStoreError(f"unknown table {table_name}")

        records = self._tables[table_name]
        if filter_formula:
            match = _FORMULA_RE.match(filter_formula.strip())
            if match is None:
                raise RecordStoreError(f"unsupported formula: {filter_formula}")
            field = match.group("field")
            value = _unescape(match.group("value"))
            records = [
                r for r in records
                if _formula_text(r.get("fields", {}).get(field)) == value
            ]
        return {"records": records}


# Module-level singleton, can be replaced for testing
_client: RecordClient | None = None


def get_record_client() -> RecordClient:
    """Get the current record client."""
    global _client
    if _client is None:
        if settings.record_source == "proxy":
            _client = ProxyRecordClient()
        else:
            _client = UpstreamRecordClient()
    return _client


def set_record_client(client: RecordClient | None) -> None:
    """Set the record client (used for testing). None restores the default."""
    global _client
    _client = client
