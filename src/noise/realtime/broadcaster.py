import asyncio
import logging
from typing import Any

from fastapi import WebSocket
from pydantic import BaseModel

from noise.board import signals
from noise.web.models.board import BoardEvent

logger = logging.getLogger(__name__)


class BoardBroadcaster:
    """Fans every board mutation out to all connected WebSocket clients.

    All clients share one room: the board. Events are sent as
    ``{"type": <eventType>, "data": <payload>}``. Each broadcast runs as its
    own task, so clients may see concurrent events in whatever order they
    arrive; there is no ordering or delivery guarantee.
    """

    def __init__(self, active_websockets: set[WebSocket] | None = None) -> None:
        self.active_websockets: set[WebSocket] = (
            active_websockets if active_websockets is not None else set()
        )
        self._broadcast_tasks: set[asyncio.Task] = set()
        self._listening = False

    def register_listeners(self) -> None:
        """Register Blinker signal listeners."""
        if self._listening:
            return
        for board_signal in signals.ALL_SIGNALS:
            board_signal.connect(self._handle_board_event)
        self._listening = True
        logger.info("BoardBroadcaster listeners registered.")

    def unregister_listeners(self) -> None:
        """Disconnect from the board signals."""
        for board_signal in signals.ALL_SIGNALS:
            board_signal.disconnect(self._handle_board_event)
        self._listening = False

    async def connect(self, websocket: WebSocket) -> None:
        """Accept a WebSocket and join it to the board room."""
        await websocket.accept()
        self.active_websockets.add(websocket)
        logger.info(
            "WebSocket joined the board. Total: %d", len(self.active_websockets)
        )

    def disconnect(self, websocket: WebSocket) -> None:
        """Remove a WebSocket from the board room."""
        self.active_websockets.discard(websocket)
        logger.info("WebSocket left the board. Total: %d", len(self.active_websockets))

    def _handle_board_event(self, sender: object, event_type: str, payload: BaseModel) -> None:
        """Schedule a broadcast for a board signal."""
        if not self.active_websockets:
            return

        data = payload.model_dump(mode="json", by_alias=True)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No event loop running, skipping broadcast of %s", event_type)
            return

        task = loop.create_task(self.broadcast(event_type, data))
        # Keep a reference until the task completes
        self._broadcast_tasks.add(task)
        task.add_done_callback(self._broadcast_tasks.discard)

    async def broadcast(self, event_type: str, data: dict[str, Any]) -> int:
        """Send an event to every connected client.

        Returns:
            Number of clients the event was delivered to
        """
        if not self.active_websockets:
            return 0

        message = BoardEvent(type=event_type, data=data).model_dump_json(by_alias=True)

        delivered = 0
        disconnected_websockets = set()
        for ws in self.active_websockets.copy():  # Copy to avoid modification during iteration
            try:
                await ws.send_text(message)
                delivered += 1
            except Exception as e:
                logger.warning("Failed to send %s to WebSocket: %s", event_type, e)
                disconnected_websockets.add(ws)

        for ws in disconnected_websockets:
            self.active_websockets.discard(ws)
            logger.info("Removed disconnected WebSocket from the board")

        logger.debug("Broadcast %s to %d client(s)", event_type, delivered)
        return delivered

    async def close_all(self) -> None:
        """Close every connection, e.g. on shutdown."""
        for ws in self.active_websockets.copy():
            try:
                await ws.close()
            except Exception as e:
                logger.debug("Error closing WebSocket: %s", e)
        self.active_websockets.clear()

        if self._broadcast_tasks:
            await asyncio.gather(*self._broadcast_tasks, return_exceptions=True)
