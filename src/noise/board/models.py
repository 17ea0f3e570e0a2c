"""Database models for the board domain."""

import uuid
from datetime import UTC, datetime
from enum import StrEnum

from sqlalchemy import Index
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class VisualFormat(StrEnum):
    """How an audio item is visualised on the board."""

    WAVEFORM = "waveform"
    BARS = "bars"
    SPECTRUM = "spectrum"


class FontName(StrEnum):
    """Text item fonts as spelled by the API."""

    RUBIK_GLITCH = "rubik-glitch"
    KAPAKANA = "kapakana"
    SHADOWS = "shadows"

    def to_storage(self) -> str:
        """Column spelling of the font (``rubik-glitch`` -> ``rubik_glitch``)."""
        return self.value.replace("-", "_")

    @classmethod
    def from_storage(cls, stored: str) -> "FontName":
        """Map a stored font back to its API spelling."""
        try:
            return cls(stored.replace("_", "-"))
        except ValueError:
            return cls.RUBIK_GLITCH


class BoardItemBase(SQLModel):
    """Fields shared by every item placed on the board."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, index=True)
    owner_id: str = Field(index=True, max_length=64)

    # Position on the board
    x: float
    y: float
    scale: float = 100.0

    created_at: datetime = Field(default_factory=utc_now, index=True)
    updated_at: datetime = Field(default_factory=utc_now)

    def touch(self) -> None:
        """Bump the modification timestamp."""
        self.updated_at = utc_now()


class AudioItem(BoardItemBase, table=True):
    """An uploaded audio recording on the board."""

    __tablename__: str = "audio_items"  # type: ignore[assignment]

    audio_url: str = Field(max_length=512)
    duration_ms: int | None = None
    visual_format: str = Field(default=VisualFormat.WAVEFORM.value, max_length=16)

    __table_args__ = (Index("idx_audio_items_owner_created", "owner_id", "created_at"),)


class TextItem(BoardItemBase, table=True):
    """A text caption on the board."""

    __tablename__: str = "text_items"  # type: ignore[assignment]

    text: str = Field(max_length=1000)
    font: str = Field(default=FontName.RUBIK_GLITCH.to_storage(), max_length=32)
    opacity: float = 1.0  # Stored 0..1; the API speaks 0..100

    __table_args__ = (Index("idx_text_items_owner_created", "owner_id", "created_at"),)
