"""Blinker signals emitted after board mutations.

Receivers get the sender plus ``event_type`` (the wire event name) and
``payload`` (a response model for created/updated, a ``DeletedItem`` for
deleted).
"""

from blinker import signal

item_created = signal("board-item-created")
item_updated = signal("board-item-updated")
item_deleted = signal("board-item-deleted")

ALL_SIGNALS = (item_created, item_updated, item_deleted)
