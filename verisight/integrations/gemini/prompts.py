"""
Gemini prompt and response-schema factory.

Stateless: everything is a pure function of the MediaKind. The schema is the
binding contract the client validates responses against.
"""

from google.genai import types

from verisight.schemas.analysis import MediaKind, Severity, Verdict

AUDIO_INSTRUCTIONS = """
    Perform a forensic audio analysis. Look for:
    - Neural grain or metallic "ringing" in vocals.
    - Spectral gaps or unnatural frequency cutoffs.
    - Robotic phrasing or lack of natural breath/performance micro-variations.
    - Phase inconsistencies in stereo imaging characteristic of early AI audio models.
"""

IMAGE_INSTRUCTIONS = """
    Perform deep artistic forensics. Distinguish between human-made digital/traditional art and AI generation. Look for:
    - "Neural brush strokes" (procedural patterns that mimic art but lack intent).
    - Inconsistent light sources on complex jewelry or fabric.
    - Layering errors in digital art (background bleeding into foreground).
    - Procedural gradients that look too mathematically perfect.
"""

VIDEO_INSTRUCTIONS = """
    Standard video forensic analysis. Check for temporal flickering, frame-to-frame consistency, and motion blur artifacts.
"""

REQUIRED_FIELDS = ["isAiGenerated", "confidenceScore", "summary", "verdict", "artifacts"]
ARTIFACT_REQUIRED_FIELDS = ["title", "description", "severity"]


def get_media_instructions(media_kind: MediaKind) -> str:
    """Exactly one block per call; video shares the default branch."""
    if media_kind == MediaKind.AUDIO:
        return AUDIO_INSTRUCTIONS
    if media_kind == MediaKind.IMAGE:
        return IMAGE_INSTRUCTIONS
    return VIDEO_INSTRUCTIONS


def get_analysis_prompt(media_kind: MediaKind) -> str:
    kind = MediaKind(media_kind).value
    return f"""
    Perform a high-level forensic analysis of this {kind} to determine if it is AI-generated or authentic.
    {get_media_instructions(media_kind)}
    Provide a structured JSON response evaluating the likelihood of it being AI-generated.
"""


def get_response_schema() -> types.Schema:
    """Same shape for every media kind."""
    artifact = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "description": types.Schema(type=types.Type.STRING),
            "severity": types.Schema(
                type=types.Type.STRING,
                enum=[s.value for s in Severity],
            ),
        },
        required=list(ARTIFACT_REQUIRED_FIELDS),
    )

    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "isAiGenerated": types.Schema(type=types.Type.BOOLEAN),
            "confidenceScore": types.Schema(
                type=types.Type.NUMBER,
                description="Confidence score from 0 to 100",
            ),
            "summary": types.Schema(type=types.Type.STRING),
            "verdict": types.Schema(
                type=types.Type.STRING,
                enum=[v.value for v in Verdict],
            ),
            "artifacts": types.Schema(type=types.Type.ARRAY, items=artifact),
        },
        required=list(REQUIRED_FIELDS),
        property_ordering=list(REQUIRED_FIELDS),
    )


def build_request(media_kind: MediaKind) -> tuple[str, types.Schema]:
    return get_analysis_prompt(media_kind), get_response_schema()
