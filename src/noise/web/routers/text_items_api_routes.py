"""Text item endpoints."""

from typing import Annotated
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from noise.board.manager import BoardManager
from noise.web.core.container import Container
from noise.web.core.errors import ITEM_ERROR_RESPONSES
from noise.web.core.security import OwnerId
from noise.web.models.board import TextItemCreate, TextItemResponse, TextItemUpdate

router = APIRouter(prefix="/text-items", responses=ITEM_ERROR_RESPONSES)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TextItemResponse)
@inject
async def create_text_item(
    fields: TextItemCreate,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
) -> TextItemResponse:
    """Place a text caption on the board."""
    return await board_manager.create_text_item(owner_id, fields)


@router.patch("/{item_id}", response_model=TextItemResponse)
@inject
async def update_text_item(
    item_id: UUID,
    changes: TextItemUpdate,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
) -> TextItemResponse:
    """Edit, restyle or move a text item you own."""
    return await board_manager.update_text_item(owner_id, item_id, changes)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_text_item(
    item_id: UUID,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
) -> Response:
    """Delete a text item you own."""
    await board_manager.delete_text_item(owner_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
