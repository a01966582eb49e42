"""
Shared route dependencies.

The SessionRegistry is created in the FastAPI lifespan and kept on
`app.state.sessions`. Only /analyze creates sessions (`get_session`);
read-only routes look them up with `find_session`.
"""

from typing import Optional

from fastapi import Depends, Header, Request

from verisight.config import settings
from verisight.services.session import AnalysisSession, SessionRegistry


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.sessions


def _session_id(session_id: Optional[str] = Header(None, alias="X-Session-ID")) -> str:
    return session_id or settings.default_session_id


def get_session(
    registry: SessionRegistry = Depends(get_session_registry),
    session_id: str = Depends(_session_id),
) -> AnalysisSession:
    return registry.get(session_id)


def find_session(
    registry: SessionRegistry = Depends(get_session_registry),
    session_id: str = Depends(_session_id),
) -> Optional[AnalysisSession]:
    return registry.find(session_id)
