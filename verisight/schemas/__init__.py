from verisight.schemas.analysis import (
    AnalysisArtifact,
    AnalysisReport,
    AnalysisResult,
    AnalyzeRequest,
    MediaFile,
    MediaKind,
    Severity,
    SourceFile,
    Verdict,
)
from verisight.schemas.session import MediaSummary, SessionSnapshot, SessionState

__all__ = [
    "AnalysisArtifact",
    "AnalysisReport",
    "AnalysisResult",
    "AnalyzeRequest",
    "MediaFile",
    "MediaKind",
    "Severity",
    "SourceFile",
    "Verdict",
    "MediaSummary",
    "SessionSnapshot",
    "SessionState",
]
