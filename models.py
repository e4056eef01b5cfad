# stdlib imports
from enum import Enum
from typing import Literal

# third-party imports
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# local imports
from utils import check_image_url, encode_data_url


"""
NOTE TO MYSELF:
Nothing here is persisted. A GenerationState lives in the in-memory
SessionStore until the user resets or submits again, and an ExportArtifact
only exists for the duration of one download request.
"""


class AspectRatio(str, Enum):
    """Aspect ratios offered by the UI, in display order."""
    SQUARE = "1:1"
    PORTRAIT = "3:4"
    STORY = "9:16"
    LANDSCAPE = "4:3"
    WIDE = "16:9"

    @property
    def label(self) -> str:
        return ASPECT_RATIO_LABELS[self]


ASPECT_RATIO_LABELS = {
    AspectRatio.SQUARE: "정사각형 (1:1)",
    AspectRatio.PORTRAIT: "세로 (3:4)",
    AspectRatio.STORY: "스토리 (9:16)",
    AspectRatio.LANDSCAPE: "가로 (4:3)",
    AspectRatio.WIDE: "와이드 (16:9)",
}


class PromoRequest(BaseModel):
    """User submission: caption text plus the chosen aspect ratio."""
    model_config = ConfigDict(frozen=True)

    text: str
    aspect_ratio: AspectRatio = AspectRatio.SQUARE

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Promo text is required and cannot be empty")
        return value


class KeywordSet(BaseModel):
    """
    Ordered English search terms derived from the caption text.

    source tells which stage produced the terms:
    - "dictionary": exact or substring matches against the keyword map
    - "heuristic": category markers found in the whole text
    - "fallback": nothing matched, generic terms
    """
    model_config = ConfigDict(frozen=True)

    terms: list[str] = Field(min_length=1, max_length=4)
    source: Literal["dictionary", "heuristic", "fallback"]

    @computed_field
    @property
    def query(self) -> str:
        return " ".join(self.terms)


class ImageResult(BaseModel):
    """Background image chosen for a request (real photo or placeholder)."""
    url: str
    source_description: str | None = None
    is_placeholder: bool = False


class GenerationState(BaseModel):
    """
    State of one generation run for a UI session.

    Transitions: pending -> done | error. Terminal states never change;
    a new submission creates a new state with a new run_id.
    """
    status: Literal["pending", "done", "error"]
    run_id: str
    request: PromoRequest
    keywords: KeywordSet | None = None
    result: ImageResult | None = None
    error: str | None = None


class ExportArtifact(BaseModel):
    """One rendered download. Rebuilt from scratch on every export."""
    filename: str
    content: bytes | None
    media_type: str
    source_url: str
    composited: bool
    notice: str | None = None

    @property
    def data_url(self) -> str | None:
        """PNG data URL of the content, or None when no bytes are available."""
        if self.content is None:
            return None
        return encode_data_url(self.content, self.media_type)


class ExportRequest(BaseModel):
    """Session-less export request body."""
    image_url: str
    caption: str

    @field_validator("image_url")
    @classmethod
    def image_url_allowed(cls, value: str) -> str:
        return check_image_url(value)

    @field_validator("caption")
    @classmethod
    def caption_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Caption is required and cannot be empty")
        return value


class AspectRatioOption(BaseModel):
    value: AspectRatio
    label: str
