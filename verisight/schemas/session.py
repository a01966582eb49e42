from enum import Enum
from typing import Optional

from verisight.schemas.analysis import AnalysisResult, MediaKind, _CamelModel


class SessionState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"


class MediaSummary(_CamelModel):
    file_name: str
    mime_type: str
    size: int
    type: MediaKind
    preview: str


class SessionSnapshot(_CamelModel):
    state: SessionState
    media: Optional[MediaSummary] = None
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None
