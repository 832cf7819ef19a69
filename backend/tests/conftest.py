"""Shared test fixtures: in-memory record store, session store, test client."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.config import settings
from app.main import app
from app.services import airtable_proxy
from app.services.passport_session import SessionStore, get_session_store, new_session
from app.services.record_client import InMemoryRecordClient, get_record_client

PERSON = settings.person_name
OTHER_PERSON = "Someone Else"


def passport_tables() -> dict[str, list[dict]]:
    """A small base covering every visibility tag and field shape."""
    return {
        settings.people_table: [
            {
                "id": "recPerson",
                "fields": {
                    "Full Name": PERSON,
                    "About (Public)": "Public bio",
                    "About Employer": "Employer bio",
                    "Private Notes": "Private notes",
                },
            },
        ],
        settings.skills_table: [
            {"id": "sk1", "fields": {"Name": "Rust"}},
            {"id": "sk2", "fields": {"Skill Name": "Python", "Name": "py"}},
            {"id": "sk3", "fields": {}},
        ],
        settings.person_skills_table: [
            {"id": "ps1", "fields": {"Person": [PERSON], "Skill": ["sk1"],
                                     "Visibility": "Public", "Proficiency": "Expert"}},
            {"id": "ps2", "fields": {"Person": PERSON, "Skill": ["sk2"],
                                     "Visibility": "Employer", "Status": "Learning"}},
            {"id": "ps3", "fields": {"Person": [PERSON], "Skill": "Negotiation",
                                     "Visibility": "Private"}},
            {"id": "ps4", "fields": {"Person": [PERSON], "Skill": ["sk3"]}},
            {"id": "ps5", "fields": {"Person": [OTHER_PERSON], "Skill": ["sk1"],
                                     "Visibility": "Public"}},
        ],
        settings.experiences_table: [
            {"id": "ex1", "fields": {"Person": [PERSON], "Role": "Engineer",
                                     "Organization": "Acme", "Visibility": "Public"}},
            {"id": "ex2", "fields": {"Person": [PERSON], "Title": "Lead",
                                     "Company": "Globex", "Visibility": "Employer"}},
            {"id": "ex3", "fields": {"Person": [PERSON], "Role": "Founder",
                                     "Visibility": "Private"}},
            {"id": "ex4", "fields": {"Person": [PERSON], "Role": "Volunteer",
                                     "Start Date": "2020", "End Date": "2021"}},
        ],
        settings.achievements_table: [
            {"id": "pr1", "fields": {"Person": [PERSON], "Name": "Launch",
                                     "Visibility": "Public"}},
            {"id": "pr2", "fields": {"Person": [PERSON], "Name": "Migration",
                                     "Visibility": "Employer"}},
            {"id": "pr3", "fields": {"Person": [PERSON], "Name": "Side project",
                                     "Visibility": "Private"}},
            {"id": "pr4", "fields": {"Person": [PERSON], "Name": "Talk"}},
        ],
        settings.training_table: [
            {"id": "tr1", "fields": {"Person": [PERSON], "Course/Training Name": "First Aid",
                                     "Provider": "Red Cross", "Visibility": "Private"}},
            {"id": "tr2", "fields": {"Person": PERSON, "Course Name": "AWS"}},
            {"id": "tr3", "fields": {"Person": [OTHER_PERSON], "Course Name": "Other"}},
        ],
    }


@pytest.fixture
def record_client() -> InMemoryRecordClient:
    return InMemoryRecordClient(passport_tables())


@pytest.fixture
def passport_session(record_client: InMemoryRecordClient):
    return new_session(record_client, session_id="test-session")


@pytest.fixture(autouse=True)
def reset_proxy_transport():
    yield
    airtable_proxy.set_transport(None)


@pytest_asyncio.fixture
async def client(record_client: InMemoryRecordClient) -> AsyncClient:
    """Yield an httpx AsyncClient wired to the in-memory record store."""
    store = SessionStore(max_sessions=10)

    app.dependency_overrides[get_record_client] = lambda: record_client
    app.dependency_overrides[get_session_store] = lambda: store
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()
