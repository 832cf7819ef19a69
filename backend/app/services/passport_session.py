"""Passport sessions: explicit per-visitor view state.

A session stands in for one page load: it holds the active tier, the load
generation used to discard stale results, the skill-name cache and the
last rendered view. Opening a new session is the equivalent of a reload.

In-memory, single instance. Least recently used sessions are evicted past
max_sessions.
"""

import asyncio
import secrets
from collections import OrderedDict
from dataclasses import dataclass, field

from app.config import settings
from app.models.passport import Tier
from app.schemas.passport import PassportView
from app.services.record_client import RecordClient
from app.services.skill_resolver import SkillNameResolver


@dataclass
class PassportSession:
    session_id: str
    skill_resolver: SkillNameResolver
    active_tier: Tier = Tier.public
    generation: int = 0
    last_view: PassportView | None = None
    # One build_view/switch_view at a time per session
    view_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    def begin_load(self, tier: Tier) -> int:
        """Make tier active and return the generation tag for its loads."""
        self.active_tier = tier
        self.generation += 1
        return self.generation

    def is_current(self, tier: Tier, generation: int) -> bool:
        return self.active_tier is tier and self.generation == generation


def new_session(client: RecordClient, session_id: str | None = None) -> PassportSession:
    return PassportSession(
        session_id=session_id or secrets.token_urlsafe(16),
        skill_resolver=SkillNameResolver(client, settings.skills_table),
    )


class SessionStore:
    def __init__(self, max_sessions: int | None = None):
        self._sessions: OrderedDict[str, PassportSession] = OrderedDict()
        self._max_sessions = max_sessions or settings.max_sessions

    def add(self, session: PassportSession) -> PassportSession:
        self._sessions[session.session_id] = session
        self._sessions.move_to_end(session.session_id)
        while len(self._sessions) > self._max_sessions:
            self._sessions.popitem(last=False)
        return session

    def get(self, session_id: str) -> PassportSession | None:
        session = self._sessions.get(session_id)
        if session is not None:
            self._sessions.move_to_end(session_id)
        return session

    def clear(self) -> None:
        self._sessions.clear()

    def __len__(self) -> int:
        return len(self._sessions)


# Module-level singleton, can be replaced for testing
_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    global _store
    if _store is None:
        _store = SessionStore()
    return _store


def set_session_store(store: SessionStore | None) -> None:
    global _store
    _store = store
