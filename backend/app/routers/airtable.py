"""Airtable proxy routes: pass-through read queries with the server-held token.

Answers in the proxy's own wire format ({"error": ...}) rather than the
structured passport error format. Served under /api/airtable and under the
serverless path existing front ends already call.
"""

import json
import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.schemas.records import ProxyQuery
from app.services import airtable_proxy

logger = logging.getLogger("passport.proxy")

router = APIRouter(tags=["airtable"])

PROXY_PATHS = ("/api/airtable", "/.netlify/functions/airtable")


async def proxy_query(request: Request):
    """Forward {tableName, filterFormula} to Airtable and relay its answer."""
    try:
        raw = await request.body()
        payload = json.loads(raw) if raw else {}
        # Arrays and scalars carry no tableName, same as an empty object
        if not isinstance(payload, dict):
            payload = {}
        query = ProxyQuery.model_validate(payload)
    except ValueError as e:
        logger.error("Airtable proxy received an unreadable body: %s", e)
        return JSONResponse(
            status_code=500, content={"error": "Server error", "details": str(e)}
        )

    result = await airtable_proxy.query_table(query.table_name, query.filter_formula)
    return JSONResponse(status_code=result.status_code, content=result.body)


async def method_not_allowed():
    return JSONResponse(status_code=405, content={"error": "Method Not Allowed"})


for _path in PROXY_PATHS:
    router.add_api_route(_path, proxy_query, methods=["POST"])
    router.add_api_route(
        _path, method_not_allowed, methods=["GET", "PUT", "PATCH", "DELETE"],
        include_in_schema=False,
    )
