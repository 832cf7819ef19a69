"""View controller: tier switching and the per-tier data loads.

A view load fetches five independent categories concurrently: person,
skills, experiences, projects and training. Each category is isolated: a
failed fetch or a failing renderer is logged and the others still render.
Every load is tagged with the tier and session generation it was issued
for; results that arrive after a newer switch are discarded.

Tier access codes are a cosmetic deterrent for casual visitors, NOT a
security boundary. Anything that must stay private should not be in the base.
"""

import asyncio
import logging
import secrets
from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from app.config import settings
from app.derived_views.passport import PassportViewBuilder
from app.models.passport import AbsentDefault, Tier
from app.schemas.passport import PassportView
from app.schemas.records import Record
from app.services.field_normalizer import (
    FULL_NAME_ALIASES,
    matches_person,
    resolve_aliased_text,
)
from app.services.passport_session import PassportSession
from app.services.record_client import RecordClient, person_formula
from app.services.visibility import filter_records

logger = logging.getLogger("passport.view")


def _for_tier(
    records: list[Record], tier: Tier, default_when_absent: AbsentDefault
) -> list[Record]:
    # The private view shows every owned record, tagged or not
    if tier is Tier.private:
        return records
    return filter_records(records, tier, default_when_absent)


class TierAccessDenied(Exception):
    """Wrong access code for a tier. The active tier is left unchanged."""

    def __init__(self, tier: Tier):
        self.tier = tier
        super().__init__(f"Incorrect access code for {tier.value} view")


class PassportRenderer(Protocol):
    def render_about(self, person_fields: dict[str, Any] | None) -> None: ...

    def render_skills(self, skills: list[tuple[str, Record]]) -> None: ...

    def render_experiences(self, records: list[Record]) -> None: ...

    def render_projects(self, records: list[Record]) -> None: ...

    def render_training(self, records: list[Record]) -> None: ...


class AccessCodeGate:
    """Shared-code check per tier. Public never needs a code."""

    def __init__(self, codes: dict[Tier, str] | None = None):
        if codes is None:
            codes = {
                Tier.employer: settings.employer_access_code,
                Tier.private: settings.private_access_code,
            }
        self._codes = codes

    def allows(self, tier: Tier, access_code: str | None) -> bool:
        if tier is Tier.public:
            return True
        expected = self._codes.get(tier)
        if not expected or access_code is None:
            return False
        return secrets.compare_digest(access_code.encode("utf-8"), expected.encode("utf-8"))


class ViewController:
    def __init__(
        self,
        session: PassportSession,
        client: RecordClient,
        *,
        gate: AccessCodeGate | None = None,
        person_name: str | None = None,
    ):
        self.session = session
        self.client = client
        self.gate = gate or AccessCodeGate()
        self.person_name = person_name or settings.person_name

    @property
    def active_tier(self) -> Tier:
        return self.session.active_tier

    async def select_tier(
        self,
        tier: Tier | str,
        access_code: str | None,
        renderer: PassportRenderer,
    ) -> bool:
        """Switch to tier if the access code matches, then load it.

        Raises TierAccessDenied on mismatch, before any state changes.
        """
        tier = Tier(tier)
        if not self.gate.allows(tier, access_code):
            logger.info("Refused switch to %s view: incorrect access code", tier.value)
            raise TierAccessDenied(tier)
        return await self.load_view(tier, renderer)

    async def load_view(self, tier: Tier | str, renderer: PassportRenderer) -> bool:
        """Load every category for tier. Returns False if a newer switch superseded it."""
        tier = Tier(tier)
        generation = self.session.begin_load(tier)
        logger.info("Loading %s view (generation %d)", tier.value, generation)

        await asyncio.gather(
            self._section("about", tier, generation, self.load_person, renderer.render_about),
            self._section("skills", tier, generation, self.load_skills, renderer.render_skills),
            self._section(
                "experiences", tier, generation, self.load_experiences,
                renderer.render_experiences,
            ),
            self._section(
                "projects", tier, generation, self.load_projects, renderer.render_projects
            ),
            self._section(
                "training", tier, generation, self.load_training, renderer.render_training
            ),
        )
        return self.session.is_current(tier, generation)

    async def build_view(self, tier: Tier | str | None = None) -> PassportView | None:
        """Load tier (default: the active tier) into a fresh PassportView.

        Runs under the session's view lock, so the active tier is read only
        after any in-flight switch has finished.
        """
        async with self.session.view_lock:
            tier = Tier(tier) if tier is not None else self.session.active_tier
            builder = PassportViewBuilder(tier, self.person_name)
            if await self.load_view(tier, builder):
                self.session.last_view = builder.view
            return self.session.last_view

    async def switch_view(self, tier: Tier | str, access_code: str | None) -> PassportView | None:
        """Gated build_view. The last view stays as it was on a wrong code."""
        tier = Tier(tier)
        async with self.session.view_lock:
            builder = PassportViewBuilder(tier, self.person_name)
            if await self.select_tier(tier, access_code, builder):
                self.session.last_view = builder.view
            return self.session.last_view

    async def _section(
        self,
        name: str,
        tier: Tier,
        generation: int,
        load: Callable[[Tier], Awaitable[Any]],
        render: Callable[[Any], None],
    ) -> None:
        try:
            data = await load(tier)
        except Exception:
            logger.exception("Loading %s for %s view failed", name, tier.value)
            return

        if not self.session.is_current(tier, generation):
            logger.debug("Discarding stale %s load for %s view", name, tier.value)
            return

        try:
            render(data)
        except Exception:
            logger.exception("Rendering %s for %s view failed", name, tier.value)

    def _person_filter(self) -> str:
        return person_formula(settings.person_link_field, self.person_name)

    async def _owned_records(self, table_name: str) -> list[Record]:
        records = await self.client.fetch(table_name, self._person_filter())
        return [r for r in records if matches_person(r.fields, self.person_name)]

    async def load_person(self, tier: Tier) -> dict[str, Any] | None:
        records = await self.client.fetch(
            settings.people_table, person_formula(FULL_NAME_ALIASES[0], self.person_name)
        )
        for record in records:
            if resolve_aliased_text(record.fields, FULL_NAME_ALIASES) == self.person_name:
                return record.fields
        return None

    async def load_skills(self, tier: Tier) -> list[tuple[str, Record]]:
        records = await self._owned_records(settings.person_skills_table)
        visible = _for_tier(records, tier, AbsentDefault.public)
        resolver = self.session.skill_resolver
        names = await asyncio.gather(*(resolver.resolve(r.fields) for r in visible))
        return list(zip(names, visible))

    async def load_experiences(self, tier: Tier) -> list[Record]:
        records = await self._owned_records(settings.experiences_table)
        return _for_tier(records, tier, AbsentDefault.all)

    async def load_projects(self, tier: Tier) -> list[Record]:
        records = await self._owned_records(settings.achievements_table)
        return _for_tier(records, tier, AbsentDefault.all)

    async def load_training(self, tier: Tier) -> list[Record]:
        # Training is never filtered by visibility
        return await self._owned_records(settings.training_table)
