"""
Session routes: inspect the current session or reset it to idle.

An unknown session id reads as idle and is not created.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from verisight.core.dependencies import find_session
from verisight.schemas.session import SessionSnapshot, SessionState
from verisight.services.session import AnalysisSession

router = APIRouter(prefix="/session", tags=["Session"])


@router.get("", response_model=SessionSnapshot)
async def get_current_session(session: Optional[AnalysisSession] = Depends(find_session)):
    if session is None:
        return SessionSnapshot(state=SessionState.IDLE)
    return session.snapshot()


@router.post("/reset", response_model=SessionSnapshot)
async def reset_session(session: Optional[AnalysisSession] = Depends(find_session)):
    if session is None:
        return SessionSnapshot(state=SessionState.IDLE)
    session.reset()
    return session.snapshot()
