"""Audio item endpoints: upload, move/restyle, re-record and delete."""

import logging
from typing import Annotated
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status
from pydantic import ValidationError

from noise.board.manager import BoardManager
from noise.config import NoiseConfig
from noise.web.core.container import Container
from noise.web.core.errors import ITEM_ERROR_RESPONSES, ApiError
from noise.web.core.security import OwnerId
from noise.web.core.uploads import read_audio_upload
from noise.web.models.board import AudioItemCreate, AudioItemResponse, AudioItemUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audio-items", responses=ITEM_ERROR_RESPONSES)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=AudioItemResponse)
@inject
async def create_audio_item(
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
    config: Annotated[NoiseConfig, Depends(Provide[Container.config])],
    x: Annotated[float, Form()],
    y: Annotated[float, Form()],
    file: Annotated[UploadFile | None, File(description="Audio file (webm, ogg, wav, mp3)")] = None,
    visual_format: Annotated[str, Form(alias="visualFormat")] = "waveform",
    scale: Annotated[float, Form()] = 100.0,
) -> AudioItemResponse:
    """Upload a recording and place it on the board."""
    upload = await read_audio_upload(file, config.upload)

    try:
        fields = AudioItemCreate(visual_format=visual_format or "waveform", x=x, y=y, scale=scale)
    except ValidationError as e:
        raise ApiError.bad_request(
            "Invalid request data",
            [
                {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
                for err in e.errors()
            ],
            error="Validation Error",
        ) from e

    return await board_manager.create_audio_item(
        owner_id, upload.content, upload.filename, upload.mime_type, fields
    )


@router.patch("/{item_id}", response_model=AudioItemResponse)
@inject
async def update_audio_item(
    item_id: UUID,
    changes: AudioItemUpdate,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
) -> AudioItemResponse:
    """Move, rescale or change the visualisation of an audio item you own."""
    return await board_manager.update_audio_item(owner_id, item_id, changes)


@router.post("/{item_id}/rerecord", response_model=AudioItemResponse)
@inject
async def rerecord_audio_item(
    item_id: UUID,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
    config: Annotated[NoiseConfig, Depends(Provide[Container.config])],
    file: Annotated[UploadFile | None, File(description="Replacement audio file")] = None,
) -> AudioItemResponse:
    """Replace the recording of an audio item you own, keeping its position."""
    upload = await read_audio_upload(file, config.upload)
    return await board_manager.rerecord_audio_item(
        owner_id, item_id, upload.content, upload.filename, upload.mime_type
    )


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
@inject
async def delete_audio_item(
    item_id: UUID,
    owner_id: OwnerId,
    board_manager: Annotated[BoardManager, Depends(Provide[Container.board_manager])],
) -> Response:
    """Delete an audio item you own, along with its stored file."""
    await board_manager.delete_audio_item(owner_id, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
