"""WebSocket routes for real-time board updates."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from noise.realtime.broadcaster import BoardBroadcaster
from noise.web.core.container import Container

logger = logging.getLogger(__name__)

router = APIRouter()


@router.websocket("/board")
@inject
async def board_websocket_endpoint(
    websocket: WebSocket,
    broadcaster: Annotated[BoardBroadcaster, Depends(Provide[Container.board_broadcaster])],
) -> None:
    """Join the shared board room and receive every item mutation as it happens."""
    await broadcaster.connect(websocket)
    try:
        while True:
            # Text or binary client frames are keep-alive pings; nothing to act on
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
    except WebSocketDisconnect as e:
        logger.info("Board WebSocket client disconnected (code %s)", e.code)
    finally:
        broadcaster.disconnect(websocket)
