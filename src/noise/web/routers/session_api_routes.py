"""Anonymous session endpoint."""

import logging
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from noise.utils.auth import TokenService
from noise.web.core.container import Container
from noise.web.models.board import SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/session")


@router.post("", response_model=SessionResponse)
@inject
async def create_session(
    token_service: Annotated[TokenService, Depends(Provide[Container.token_service])],
) -> SessionResponse:
    """Issue a new anonymous owner id and the bearer token proving it.

    Clients store both and send the token with every mutation; the owner id
    decides which items they may edit or delete.
    """
    session = token_service.issue_session()
    logger.info("Issued anonymous session for owner %s", session.owner_id)
    return SessionResponse(token=session.token, owner_id=session.owner_id)
