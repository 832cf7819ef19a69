"""Skill name resolver: linked skill ids to display names.

The lookup table is built once per passport session by fetching the whole
Skills table, then only read. Concurrent first callers wait on the single
in-flight build instead of fetching again. A failed fetch still completes
the build (with an empty table); ids then resolve to themselves.
"""

import asyncio
import logging
from typing import Any

from app.services.field_normalizer import resolve_aliased_text
from app.services.record_client import RecordClient

logger = logging.getLogger("passport.skills")

SKILL_FIELD = "Skill"
SKILL_NAME_ALIASES = ("Skill Name", "Name")
UNNAMED_SKILL = "Unnamed Skill"


class SkillNameResolver:
    def __init__(self, client: RecordClient, table_name: str):
        self._client = client
        self._table_name = table_name
        self._names: dict[str, str] | None = None
        self._lock = asyncio.Lock()

    @property
    def is_built(self) -> bool:
        return self._names is not None

    async def _lookup_table(self) -> dict[str, str]:
        if self._names is not None:
            return self._names
        async with self._lock:
            if self._names is None:
                records = await self._client.fetch(self._table_name)
                self._names = {
                    r.id: resolve_aliased_text(r.fields, SKILL_NAME_ALIASES, r.id)
                    for r in records
                }
                logger.info("Skill name table built with %d entries", len(self._names))
        return self._names

    async def resolve(self, person_skill_fields: dict[str, Any]) -> str:
        """Display name for a PersonSkill record's Skill field."""
        raw = person_skill_fields.get(SKILL_FIELD)
        if isinstance(raw, list):
            if not raw or not isinstance(raw[0], str) or not raw[0]:
                return UNNAMED_SKILL
            skill_id = raw[0]
            names = await self._lookup_table()
            return names.get(skill_id, skill_id)
        if isinstance(raw, str) and raw:
            return raw
        return UNNAMED_SKILL
