"""Client-side board item and event models."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ItemType = Literal["audio", "text"]

AUDIO_EVENTS = {"audioItemCreated", "audioItemUpdated", "audioItemDeleted"}
TEXT_EVENTS = {"textItemCreated", "textItemUpdated", "textItemDeleted"}


class BoardItem(BaseModel):
    """An item as the board UI holds it.

    Audio items carry ``audio_url`` (absolute) and ``viz_type``; text items carry
    ``text``, ``font`` and ``opacity`` (0..100).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    type: ItemType
    owner_id: str | None = None
    x: float
    y: float
    scale: float = 100.0

    # Audio
    audio_url: str | None = None
    viz_type: str | None = None

    # Text
    text: str | None = None
    font: str | None = None
    opacity: float | None = None

    @classmethod
    def from_api(cls, item_type: ItemType, data: dict[str, Any], base_url: str = "") -> "BoardItem":
        """Convert an API/WebSocket payload into a board item."""
        if item_type == "audio":
            audio_url = data.get("audioUrl") or ""
            if audio_url.startswith("/"):
                audio_url = f"{base_url.rstrip('/')}{audio_url}"
            return cls(
                id=str(data["id"]),
                type="audio",
                owner_id=data.get("ownerId"),
                audio_url=audio_url,
                viz_type=data.get("visualFormat"),
                x=data["x"],
                y=data["y"],
                scale=data.get("scale", 100.0),
            )
        return cls(
            id=str(data["id"]),
            type="text",
            owner_id=data.get("ownerId"),
            text=data.get("text"),
            font=data.get("font"),
            opacity=data.get("opacity"),
            x=data["x"],
            y=data["y"],
            scale=data.get("scale", 100.0),
        )


class BoardEvent(BaseModel):
    """A decoded WebSocket frame."""

    type: str
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def item_type(self) -> ItemType:
        return "audio" if self.type in AUDIO_EVENTS else "text"

    @property
    def action(self) -> str:
        """``created``, ``updated`` or ``deleted``."""
        for action in ("Created", "Updated", "Deleted"):
            if self.type.endswith(action):
                return action.lower()
        raise ValueError(f"Unknown board event type: {self.type}")

    @property
    def is_known(self) -> bool:
        return self.type in AUDIO_EVENTS or self.type in TEXT_EVENTS
