"""Python client for the board: REST API access and live local state."""

from noise.client.api import BoardApiClient, BoardApiError
from noise.client.listener import BoardListener
from noise.client.models import BoardEvent, BoardItem
from noise.client.state import BoardState

__all__ = [
    "BoardApiClient",
    "BoardApiError",
    "BoardEvent",
    "BoardItem",
    "BoardListener",
    "BoardState",
]
