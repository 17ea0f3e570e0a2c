"""Exceptions raised by board operations."""

from uuid import UUID


class BoardError(Exception):
    """Base class for board domain errors."""


class ItemNotFoundError(BoardError):
    """The requested item does not exist."""

    def __init__(self, message: str, item_id: UUID | None = None) -> None:
        super().__init__(message)
        self.item_id = item_id


class ItemOwnershipError(BoardError):
    """The caller does not own the item it tried to change."""

    def __init__(self, message: str, item_id: UUID | None = None) -> None:
        super().__init__(message)
        self.item_id = item_id


class ItemValidationError(BoardError):
    """An item field failed a server-side limit."""
