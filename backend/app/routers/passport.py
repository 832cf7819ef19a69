"""Passport routes: open a session, read its view, switch tier.

Tier access codes only deter casual visitors. See app.services.view_controller.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status

from app.models.passport import Tier
from app.schemas.passport import SelectTierRequest, SessionRead
from app.services.passport_session import (
    PassportSession,
    SessionStore,
    get_session_store,
    new_session,
)
from app.services.record_client import RecordClient, get_record_client
from app.services.view_controller import ViewController

router = APIRouter(prefix="/passport", tags=["passport"])


def get_passport_session(
    session_id: str,
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> PassportSession:
    session = store.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Passport session not found")
    request.state.session_id = session.session_id
    return session


def _session_read(request: Request, session: PassportSession) -> SessionRead:
    if session.last_view is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="View superseded by a newer tier switch",
        )
    request.state.tier = session.active_tier.value
    return SessionRead(session_id=session.session_id, view=session.last_view)


@router.post("/sessions", response_model=SessionRead, status_code=status.HTTP_201_CREATED)
async def open_session(
    request: Request,
    client: RecordClient = Depends(get_record_client),
    store: SessionStore = Depends(get_session_store),
):
    """Start a passport session at the public tier (a fresh page load)."""
    session = store.add(new_session(client))
    request.state.session_id = session.session_id
    await ViewController(session, client).build_view(Tier.public)
    return _session_read(request, session)


@router.get("/sessions/{session_id}", response_model=SessionRead)
async def read_session(
    request: Request,
    session: PassportSession = Depends(get_passport_session),
    client: RecordClient = Depends(get_record_client),
):
    """Re-fetch and return the session's active tier."""
    await ViewController(session, client).build_view()
    return _session_read(request, session)


@router.post("/sessions/{session_id}/tier", response_model=SessionRead)
async def select_tier(
    body: SelectTierRequest,
    request: Request,
    session: PassportSession = Depends(get_passport_session),
    client: RecordClient = Depends(get_record_client),
):
    """Switch tier. 403 on a wrong access code, leaving the current view as is."""
    await ViewController(session, client).switch_view(body.tier, body.access_code)
    return _session_read(request, session)
