"""WebSocket listener keeping a BoardState in sync with server broadcasts."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable

import websockets
from pydantic import ValidationError

from noise.client.models import BoardEvent
from noise.client.state import BoardState

logger = logging.getLogger(__name__)

EventCallback = Callable[[BoardEvent, bool], Awaitable[None] | None]


class BoardListener:
    """Consume ``/ws/board`` frames and apply them to local state.

    The listener reconnects after ``reconnect_delay`` seconds whenever the
    connection drops, until ``stop()`` is called.
    """

    def __init__(
        self,
        ws_url: str,
        state: BoardState,
        on_event: EventCallback | None = None,
        reconnect_delay: float = 2.0,
    ) -> None:
        self.ws_url = ws_url
        self.state = state
        self.on_event = on_event
        self.reconnect_delay = reconnect_delay
        self._stopped = asyncio.Event()
        self._connection = None

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    async def handle_message(self, raw: str | bytes) -> BoardEvent | None:
        """Decode one frame, apply it and notify the callback."""
        try:
            event = BoardEvent.model_validate(json.loads(raw))
        except (ValueError, ValidationError):
            logger.warning("Discarding malformed board frame: %r", raw)
            return None

        try:
            changed = self.state.apply_event(event)
        except (KeyError, ValidationError):
            logger.warning("Discarding incomplete %s frame: %r", event.type, raw)
            return None

        if self.on_event is not None:
            result = self.on_event(event, changed)
            if asyncio.iscoroutine(result):
                await result
        return event

    async def run(self) -> None:
        """Listen until stopped, reconnecting after dropped connections."""
        while not self.stopped:
            try:
                async with websockets.connect(self.ws_url) as connection:
                    self._connection = connection
                    logger.info("Connected to board feed at %s", self.ws_url)
                    async for message in connection:
                        await self.handle_message(message)
            except (OSError, websockets.exceptions.WebSocketException) as e:
                logger.warning("Board feed connection lost: %s", e)
            finally:
                self._connection = None

            if self.stopped:
                break
            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.reconnect_delay)
            except TimeoutError:
                logger.debug("Reconnecting to board feed")

    async def stop(self) -> None:
        """Stop listening and close the current connection."""
        self._stopped.set()
        if self._connection is not None:
            await self._connection.close()
