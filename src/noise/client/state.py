"""Local mirror of the shared board with optimistic updates.

A client applies its own changes to the local state immediately, then sends
them to the server. The server broadcasts every change to every client,
including the one that made it. Create and update events whose owner is the
local owner are therefore echoes of changes already applied and are skipped.
Deletes are idempotent and always applied. Concurrent edits resolve as last
write wins.
"""

import logging
from typing import Any

from noise.client.models import BoardEvent, BoardItem

logger = logging.getLogger(__name__)


class BoardState:
    """Items on the board, keyed by id, in insertion order."""

    def __init__(self, owner_id: str | None, base_url: str = "") -> None:
        self.owner_id = owner_id
        self.base_url = base_url
        self._items: dict[str, BoardItem] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def get(self, item_id: str) -> BoardItem | None:
        return self._items.get(item_id)

    def items(self) -> list[BoardItem]:
        """All items in insertion order."""
        return list(self._items.values())

    def load(self, items: list[BoardItem]) -> None:
        """Replace the whole board, e.g. after the initial fetch."""
        self._items = {item.id: item for item in items}

    # ==================== Optimistic local mutations ====================

    def add_local(self, item: BoardItem) -> None:
        """Add an item created locally, before the server confirms it."""
        self._items[item.id] = item

    def update_local(self, item_id: str, changes: dict[str, Any]) -> BoardItem | None:
        """Apply changes locally.

        Returns:
            The item as it was before the change, for rollback; None if unknown
        """
        previous = self._items.get(item_id)
        if previous is None:
            return None
        self._items[item_id] = previous.model_copy(update=changes)
        return previous

    def remove_local(self, item_id: str) -> BoardItem | None:
        """Remove an item locally, returning it for rollback."""
        return self._items.pop(item_id, None)

    def rollback(self, item_id: str, snapshot: BoardItem | None) -> None:
        """Undo an optimistic change after the server rejected it.

        Args:
            item_id: Item the change applied to
            snapshot: State before the change; None drops an optimistic addition
        """
        if snapshot is None:
            self._items.pop(item_id, None)
        else:
            self._items[item_id] = snapshot

    def replace_id(self, temp_id: str, item: BoardItem) -> None:
        """Swap a temporary optimistic item for the server's version, keeping its position."""
        if temp_id not in self._items:
            self._items[item.id] = item
            return
        self._items = {
            (item.id if key == temp_id else key): (item if key == temp_id else value)
            for key, value in self._items.items()
        }

    # ==================== Server events ====================

    def is_own(self, item: BoardItem) -> bool:
        return self.owner_id is not None and item.owner_id == self.owner_id

    def apply_event(self, event: BoardEvent) -> bool:
        """Reconcile a broadcast event with local state.

        Returns:
            Whether the local state changed
        """
        if not event.is_known:
            logger.debug("Ignoring unknown board event %s", event.type)
            return False

        if event.action == "deleted":
            item_id = str(event.data.get("id", ""))
            return self._items.pop(item_id, None) is not None

        item = BoardItem.from_api(event.item_type, event.data, self.base_url)
        if self.is_own(item):
            # Echo of an optimistic change already applied
            return False

        if self._items.get(item.id) == item:
            return False
        self._items[item.id] = item
        return True
