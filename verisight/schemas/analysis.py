from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Verdict(str, Enum):
    REAL = "REAL"
    AI_GENERATED = "AI_GENERATED"
    UNCERTAIN = "UNCERTAIN"


class _CamelModel(BaseModel):
    """Wire names are camelCase (isAiGenerated), attributes are snake_case."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class SourceFile(_CamelModel):
    name: str
    type: str       # declared MIME type, passed through to Gemini as-is
    size: int


class MediaFile(_CamelModel):
    file: SourceFile
    preview: str    # data:<mime>;base64,<payload>
    type: MediaKind


class AnalysisArtifact(_CamelModel):
    title: str
    description: str
    severity: Severity


class AnalysisResult(_CamelModel):
    """Gemini structured output — one per analyzed file, never merged."""
    is_ai_generated: bool
    # int stays int on the way out (87, not 87.0)
    confidence_score: Union[int, float] = Field(description="Confidence score from 0 to 100")
    summary: str
    verdict: Verdict
    artifacts: List[AnalysisArtifact]


class AnalyzeRequest(_CamelModel):
    """JSON body for /analyze when no multipart upload is sent."""
    data_url: Optional[str] = None
    url: Optional[str] = None


class AnalysisReport(_CamelModel):
    result: AnalysisResult
    preview: str
    media_type: MediaKind
    file_name: str
