"""Board listing endpoint."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Query

from noise.board.manager import BoardManager
from noise.web.core.container import Container
from noise.web.models.board import BoardResponse

router = APIRouter(prefix="/board")


@router.get("", response_model=BoardResponse)
@inject
async def get_board(
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
    limit: Annotated[int, Query(ge=1, le=100, description="Items per type")] = 100,
    offset: Annotated[int, Query(ge=0, description="Items to skip per type")] = 0,
) -> BoardResponse:
    """Get every audio and text item on the board, newest first.

    ``limit`` and ``offset`` apply to each item type separately; ``total``
    counts both types together.
    """
    return await board_manager.get_board(limit=limit, offset=offset)
