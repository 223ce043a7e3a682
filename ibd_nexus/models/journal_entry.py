"""
Journal entry domain models.

Entries are persisted as a JSON array using the camelCase field names of the
original key-value format. Numeric fields are coerced here so that values
that round-tripped through storage as strings ("7", "85.0") arrive in the
analytics layer as plain ints.
"""

import enum
import math
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


NOT_MENTIONED = "Not mentioned"


class StoolType(str, enum.Enum):
    """Closed set of stool categories extracted from an entry."""
    DIARRHEA = "Diarrhea"
    SOFT = "Soft"
    NORMAL = "Normal"
    HARD = "Hard"
    NOT_MENTIONED = NOT_MENTIONED


def _coerce_int(value):
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return value
        value = float(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError("numeric field must be finite")
        return int(round(value))
    return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class BoundingBox(_CamelModel):
    """Normalized box, all coordinates in [0, 1]."""
    x: float = Field(ge=0, le=1)
    y: float = Field(ge=0, le=1)
    width: float = Field(ge=0, le=1)
    height: float = Field(ge=0, le=1)


class ImageAnalysisResult(_CamelModel):
    red_detections: tuple[BoundingBox, ...] = ()
    brown_detections: tuple[BoundingBox, ...] = ()

    @property
    def has_red_flags(self) -> bool:
        return len(self.red_detections) > 0

    @classmethod
    def empty(cls) -> "ImageAnalysisResult":
        return cls()


class JournalSummary(_CamelModel):
    """Structured wellness signals extracted from one transcription."""

    mental_wellness_score: int = Field(ge=1, le=10)
    physical_symptoms: tuple[str, ...] = ()
    moods: tuple[str, ...] = ()
    food_eaten: tuple[str, ...] = ()
    exercise: tuple[str, ...] = ()
    flare_up_risk: int = Field(ge=0, le=100)
    stool_type: StoolType = StoolType.NOT_MENTIONED
    stool_color: str = NOT_MENTIONED
    blood_in_stool: bool = False
    cramps_severity: int = Field(default=0, ge=0, le=10)

    @field_validator(
        "mental_wellness_score", "flare_up_risk", "cramps_severity", mode="before"
    )
    @classmethod
    def _numeric_strings(cls, value):
        return _coerce_int(value)

    @field_validator("physical_symptoms", "moods", "food_eaten", "exercise", mode="before")
    @classmethod
    def _missing_lists(cls, value):
        return () if value is None else value

    @field_validator("stool_color", mode="before")
    @classmethod
    def _blank_color(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return NOT_MENTIONED
        return value

    @field_validator("stool_type", mode="before")
    @classmethod
    def _normalize_stool_type(cls, value):
        if value is None or value == "":
            return StoolType.NOT_MENTIONED
        if isinstance(value, str):
            for member in StoolType:
                if member.value.lower() == value.strip().lower():
                    return member
        return value

    @classmethod
    def neutral(cls) -> "JournalSummary":
        """Fallback used when the AI extraction fails."""
        return cls(mental_wellness_score=5, flare_up_risk=0)


class JournalEntry(_CamelModel):
    """One user-authored record for a point in time."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    transcription: str = Field(min_length=1)
    summary: JournalSummary
    image_url: Optional[str] = None
    image_analysis: Optional[ImageAnalysisResult] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_string(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("date")
    @classmethod
    def _assume_local_timezone(cls, value: datetime) -> datetime:
        # Naive timestamps are treated as local wall-clock time
        if value.tzinfo is None:
            return value.astimezone()
        return value

    @field_validator("transcription")
    @classmethod
    def _non_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("transcription must not be blank")
        return value

    @model_validator(mode="after")
    def _analysis_requires_image(self) -> "JournalEntry":
        if self.image_analysis is not None and not self.image_url:
            raise ValueError("imageAnalysis is only valid alongside imageUrl")
        return self

    @property
    def has_analyzed_photo(self) -> bool:
        return bool(self.image_url) and self.image_analysis is not None

    def to_storage(self) -> dict:
        """Serialize with the camelCase keys used at rest."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
