"""Board API contract models.

All models speak camelCase on the wire (``ownerId``, ``visualFormat``) while
keeping snake_case attribute names in Python.
"""

from datetime import UTC, datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

from noise.board.models import AudioItem, FontName, TextItem, VisualFormat

# Coordinate bounds are "reasonable for a web page"
COORDINATE_MIN = 0.0
COORDINATE_MAX = 10000.0
SCALE_MIN = 25.0
SCALE_MAX = 300.0
OPACITY_MIN = 0.0
OPACITY_MAX = 100.0
TEXT_MAX_LENGTH = 200

BoardEventType = Literal[
    "audioItemCreated",
    "audioItemUpdated",
    "audioItemDeleted",
    "textItemCreated",
    "textItemUpdated",
    "textItemDeleted",
]


class CamelModel(BaseModel):
    """Base model serialising to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on round trip
    return value.replace(tzinfo=UTC) if value.tzinfo is None else value.astimezone(UTC)


# ==================== Request Models ====================


class AudioItemCreate(CamelModel):
    """Form fields accompanying an audio upload."""

    visual_format: VisualFormat = VisualFormat.WAVEFORM
    x: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    scale: float = Field(default=100.0, ge=SCALE_MIN, le=SCALE_MAX)


class AudioItemUpdate(CamelModel):
    """Partial update of an audio item; omitted fields are left untouched."""

    visual_format: VisualFormat | None = None
    x: float | None = Field(default=None, ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: float | None = Field(default=None, ge=COORDINATE_MIN, le=COORDINATE_MAX)
    scale: float | None = Field(default=None, ge=SCALE_MIN, le=SCALE_MAX)


class TextItemCreate(CamelModel):
    """Request body for creating a text item."""

    text: str = Field(..., min_length=1, max_length=TEXT_MAX_LENGTH)
    font: FontName = FontName.RUBIK_GLITCH
    opacity: float = Field(default=100.0, ge=OPACITY_MIN, le=OPACITY_MAX)
    x: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: float = Field(..., ge=COORDINATE_MIN, le=COORDINATE_MAX)
    scale: float = Field(default=100.0, ge=SCALE_MIN, le=SCALE_MAX)


class TextItemUpdate(CamelModel):
    """Partial update of a text item; omitted fields are left untouched."""

    text: str | None = Field(default=None, min_length=1, max_length=TEXT_MAX_LENGTH)
    font: FontName | None = None
    opacity: float | None = Field(default=None, ge=OPACITY_MIN, le=OPACITY_MAX)
    x: float | None = Field(default=None, ge=COORDINATE_MIN, le=COORDINATE_MAX)
    y: float | None = Field(default=None, ge=COORDINATE_MIN, le=COORDINATE_MAX)
    scale: float | None = Field(default=None, ge=SCALE_MIN, le=SCALE_MAX)


# ==================== Response Models ====================


class SessionResponse(CamelModel):
    """Anonymous session credentials."""

    token: str = Field(..., description="Bearer token for authenticated requests")
    owner_id: str = Field(..., description="Anonymous owner id bound to the token")


class AudioItemResponse(CamelModel):
    """An audio item as returned by the API and broadcast over WebSocket."""

    id: UUID
    owner_id: str
    audio_url: str
    duration_ms: int | None = None
    visual_format: VisualFormat
    x: float
    y: float
    scale: float
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return _as_utc(value).isoformat().replace("+00:00", "Z")

    @classmethod
    def from_model(cls, item: AudioItem) -> "AudioItemResponse":
        """Build the API representation of an audio item row."""
        return cls(
            id=item.id,
            owner_id=item.owner_id,
            audio_url=item.audio_url,
            duration_ms=item.duration_ms,
            visual_format=VisualFormat(item.visual_format),
            x=item.x,
            y=item.y,
            scale=item.scale,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class TextItemResponse(CamelModel):
    """A text item as returned by the API and broadcast over WebSocket."""

    id: UUID
    owner_id: str
    text: str
    font: FontName
    opacity: float = Field(..., description="Opacity on a 0..100 scale")
    x: float
    y: float
    scale: float
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamp(self, value: datetime) -> str:
        return _as_utc(value).isoformat().replace("+00:00", "Z")

    @classmethod
    def from_model(cls, item: TextItem) -> "TextItemResponse":
        """Build the API representation of a text item row."""
        return cls(
            id=item.id,
            owner_id=item.owner_id,
            text=item.text,
            font=FontName.from_storage(item.font),
            opacity=round(item.opacity * 100, 4),
            x=item.x,
            y=item.y,
            scale=item.scale,
            created_at=item.created_at,
            updated_at=item.updated_at,
        )


class PaginationInfo(CamelModel):
    """Pagination metadata for the board listing."""

    limit: int = Field(..., description="Maximum items returned per item type")
    offset: int = Field(..., description="Items skipped per item type")
    total: int = Field(..., description="Total audio and text items on the board")


class BoardResponse(CamelModel):
    """The whole board: both item lists, newest first."""

    audio_items: list[AudioItemResponse]
    text_items: list[TextItemResponse]
    pagination: PaginationInfo


class DeletedItem(CamelModel):
    """Payload of a deletion event."""

    id: UUID


class BoardEvent(CamelModel):
    """A mutation broadcast to every connected client."""

    type: BoardEventType
    data: dict[str, Any]


class ErrorResponse(BaseModel):
    """Uniform error body."""

    error: str
    message: str
    details: Any | None = None
