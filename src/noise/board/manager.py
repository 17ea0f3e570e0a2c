"""Single source of truth for board data access.

The manager owns every read and write of audio and text items. It enforces
per-item ownership and, after each successful mutation, emits a Blinker
signal so the realtime layer can fan the change out to connected clients.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import SQLModel

from noise.board import signals
from noise.board.exceptions import ItemNotFoundError, ItemOwnershipError, ItemValidationError
from noise.board.models import AudioItem, TextItem
from noise.database.core import DatabaseService
from noise.storage.base import StorageBackend
from noise.web.models.board import (
    AudioItemCreate,
    AudioItemResponse,
    AudioItemUpdate,
    BoardResponse,
    DeletedItem,
    PaginationInfo,
    TextItemCreate,
    TextItemResponse,
    TextItemUpdate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SQLModel)

AUDIO_NOT_FOUND = "Audio item not found"
TEXT_NOT_FOUND = "Text item not found"


def emit_board_event(
    event_type: str, board_signal: Any
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Emit a board signal with the mutation's result once it has been committed.

    Args:
        event_type: Wire name of the event, e.g. ``audioItemCreated``
        board_signal: The Blinker signal to send
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        @functools.wraps(func)
        async def wrapper(self: "BoardManager", *args: Any, **kwargs: Any) -> Any:  # noqa: ANN401
            result = await func(self, *args, **kwargs)
            logger.debug("Emitting %s for %s", event_type, result.id)
            board_signal.send(self, event_type=event_type, payload=result)
            return result

        return wrapper

    return decorator


class BoardManager:
    """Coordinates the database and audio storage for board items."""

    def __init__(
        self,
        database_service: DatabaseService,
        storage: StorageBackend,
        max_text_length: int = 200,
    ) -> None:
        self.database_service = database_service
        self.storage = storage
        self.max_text_length = max_text_length

    # ==================== Reads ====================

    async def get_board(self, limit: int = 100, offset: int = 0) -> BoardResponse:
        """Get both item lists, newest first, with the same window applied to each."""
        async with self.database_service.get_async_db() as session:
            try:
                audio_result = await session.execute(
                    select(AudioItem)
                    .order_by(AudioItem.created_at.desc())  # type: ignore[attr-defined]
                    .offset(offset)
                    .limit(limit)
                )
                text_result = await session.execute(
                    select(TextItem)
                    .order_by(TextItem.created_at.desc())  # type: ignore[attr-defined]
                    .offset(offset)
                    .limit(limit)
                )
                audio_count = await session.scalar(select(func.count()).select_from(AudioItem))
                text_count = await session.scalar(select(func.count()).select_from(TextItem))
            except SQLAlchemyError:
                logger.exception("Error loading board")
                raise

        return BoardResponse(
            audio_items=[AudioItemResponse.from_model(i) for i in audio_result.scalars()],
            text_items=[TextItemResponse.from_model(i) for i in text_result.scalars()],
            pagination=PaginationInfo(
                limit=limit,
                offset=offset,
                total=(audio_count or 0) + (text_count or 0),
            ),
        )

    async def count_items(self) -> dict[str, int]:
        """Count items per type."""
        async with self.database_service.get_async_db() as session:
            audio_count = await session.scalar(select(func.count()).select_from(AudioItem))
            text_count = await session.scalar(select(func.count()).select_from(TextItem))
        return {"audio_items": audio_count or 0, "text_items": text_count or 0}

    async def referenced_audio_urls(self) -> set[str]:
        """Every audio URL still referenced by an item."""
        async with self.database_service.get_async_db() as session:
            result = await session.execute(select(AudioItem.audio_url))
            return set(result.scalars())

    # ==================== Audio items ====================

    @emit_board_event("audioItemCreated", signals.item_created)
    async def create_audio_item(
        self,
        owner_id: str,
        content: bytes,
        original_name: str,
        mime_type: str,
        fields: AudioItemCreate,
    ) -> AudioItemResponse:
        """Store the recording and create an audio item for it."""
        audio_url = await self.storage.save_file(content, original_name, mime_type)

        item = AudioItem(
            owner_id=owner_id,
            audio_url=audio_url,
            visual_format=fields.visual_format.value,
            x=fields.x,
            y=fields.y,
            scale=fields.scale,
        )
        try:
            await self._add(item)
        except SQLAlchemyError:
            # Don't leave an orphaned upload behind
            await self.storage.delete_file(audio_url)
            raise

        logger.info("Created audio item %s for owner %s", item.id, owner_id)
        return AudioItemResponse.from_model(item)

    @emit_board_event("audioItemUpdated", signals.item_updated)
    async def update_audio_item(
        self, owner_id: str, item_id: UUID, changes: AudioItemUpdate
    ) -> AudioItemResponse:
        """Apply the supplied fields of ``changes`` to an audio item the caller owns."""
        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "visual_format" in values:
            values["visual_format"] = changes.visual_format.value  # type: ignore[union-attr]

        item = await self._update_owned(
            AudioItem,
            item_id,
            owner_id,
            values,
            not_found=AUDIO_NOT_FOUND,
            forbidden="You can only update your own items",
        )
        return AudioItemResponse.from_model(item)

    @emit_board_event("audioItemUpdated", signals.item_updated)
    async def rerecord_audio_item(
        self,
        owner_id: str,
        item_id: UUID,
        content: bytes,
        original_name: str,
        mime_type: str,
    ) -> AudioItemResponse:
        """Replace the recording behind an audio item the caller owns."""
        existing = await self._get_owned(
            AudioItem,
            item_id,
            owner_id,
            not_found=AUDIO_NOT_FOUND,
            forbidden="You can only re-record your own items",
        )

        await self.storage.delete_file(existing.audio_url)
        audio_url = await self.storage.save_file(content, original_name, mime_type)

        item = await self._update_owned(
            AudioItem,
            item_id,
            owner_id,
            {"audio_url": audio_url, "duration_ms": None},
            not_found=AUDIO_NOT_FOUND,
            forbidden="You can only re-record your own items",
        )
        logger.info("Re-recorded audio item %s", item_id)
        return AudioItemResponse.from_model(item)

    @emit_board_event("audioItemDeleted", signals.item_deleted)
    async def delete_audio_item(self, owner_id: str, item_id: UUID) -> DeletedItem:
        """Delete an audio item the caller owns, together with its file."""
        existing = await self._get_owned(
            AudioItem,
            item_id,
            owner_id,
            not_found=AUDIO_NOT_FOUND,
            forbidden="You can only delete your own items",
        )
        await self.storage.delete_file(existing.audio_url)
        await self._delete(AudioItem, item_id)
        logger.info("Deleted audio item %s", item_id)
        return DeletedItem(id=item_id)

    # ==================== Text items ====================

    @emit_board_event("textItemCreated", signals.item_created)
    async def create_text_item(self, owner_id: str, fields: TextItemCreate) -> TextItemResponse:
        """Create a text item owned by ``owner_id``."""
        self._check_text(fields.text)
        item = TextItem(
            owner_id=owner_id,
            text=fields.text,
            font=fields.font.to_storage(),
            opacity=fields.opacity / 100,
            x=fields.x,
            y=fields.y,
            scale=fields.scale,
        )
        await self._add(item)
        logger.info("Created text item %s for owner %s", item.id, owner_id)
        return TextItemResponse.from_model(item)

    @emit_board_event("textItemUpdated", signals.item_updated)
    async def update_text_item(
        self, owner_id: str, item_id: UUID, changes: TextItemUpdate
    ) -> TextItemResponse:
        """Apply the supplied fields of ``changes`` to a text item the caller owns."""
        values = changes.model_dump(exclude_unset=True, exclude_none=True)
        if "text" in values:
            self._check_text(values["text"])
        if "font" in values:
            values["font"] = changes.font.to_storage()  # type: ignore[union-attr]
        if "opacity" in values:
            values["opacity"] = values["opacity"] / 100

        item = await self._update_owned(
            TextItem,
            item_id,
            owner_id,
            values,
            not_found=TEXT_NOT_FOUND,
            forbidden="You can only update your own items",
        )
        return TextItemResponse.from_model(item)

    @emit_board_event("textItemDeleted", signals.item_deleted)
    async def delete_text_item(self, owner_id: str, item_id: UUID) -> DeletedItem:
        """Delete a text item the caller owns."""
        await self._get_owned(
            TextItem,
            item_id,
            owner_id,
            not_found=TEXT_NOT_FOUND,
            forbidden="You can only delete your own items",
        )
        await self._delete(TextItem, item_id)
        logger.info("Deleted text item %s", item_id)
        return DeletedItem(id=item_id)

    # ==================== Helpers ====================

    def _check_text(self, text: str) -> None:
        if len(text) > self.max_text_length:
            raise ItemValidationError(
                f"Text must be at most {self.max_text_length} characters long"
            )

    async def _add(self, item: SQLModel) -> None:
        async with self.database_service.get_async_db() as session:
            try:
                session.add(item)
                await session.commit()
                await session.refresh(item)
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error creating %s", type(item).__name__)
                raise

    async def _get_owned(
        self, model: type[T], item_id: UUID, owner_id: str, not_found: str, forbidden: str
    ) -> T:
        async with self.database_service.get_async_db() as session:
            item = await session.get(model, item_id)
        return self._check_owner(item, item_id, owner_id, not_found, forbidden)

    async def _update_owned(
        self,
        model: type[T],
        item_id: UUID,
        owner_id: str,
        values: dict[str, Any],
        not_found: str,
        forbidden: str,
    ) -> T:
        async with self.database_service.get_async_db() as session:
            try:
                item = self._check_owner(
                    await session.get(model, item_id), item_id, owner_id, not_found, forbidden
                )
                for key, value in values.items():
                    setattr(item, key, value)
                item.touch()  # type: ignore[attr-defined]
                session.add(item)
                await session.commit()
                await session.refresh(item)
                return item
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error updating %s %s", model.__name__, item_id)
                raise

    async def _delete(self, model: type[SQLModel], item_id: UUID) -> None:
        async with self.database_service.get_async_db() as session:
            try:
                item = await session.get(model, item_id)
                if item is not None:
                    await session.delete(item)
                    await session.commit()
            except SQLAlchemyError:
                await session.rollback()
                logger.exception("Error deleting %s %s", model.__name__, item_id)
                raise

    @staticmethod
    def _check_owner(
        item: T | None, item_id: UUID, owner_id: str, not_found: str, forbidden: str
    ) -> T:
        if item is None:
            raise ItemNotFoundError(not_found, item_id)
        if item.owner_id != owner_id:  # type: ignore[attr-defined]
            raise ItemOwnershipError(forbidden, item_id)
        return item

