"""FastAPI dependencies resolving the caller's anonymous owner id."""

from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Header

from noise.utils.auth import InvalidTokenError, TokenService, extract_bearer_token
from noise.web.core.container import Container
from noise.web.core.errors import ApiError


@inject
async def require_owner(
    token_service: Annotated[TokenService, Depends(Provide[Container.token_service])],
    authorization: Annotated[str | None, Header()] = None,
) -> str:
    """Resolve the owner id from the bearer token, rejecting the request without one."""
    token = extract_bearer_token(authorization)
    if token is None:
        raise ApiError.unauthorized("Authorization token is required")

    try:
        payload = token_service.verify_token(token)
    except InvalidTokenError as e:
        raise ApiError.unauthorized("Invalid or expired token") from e

    return payload.owner_id


OwnerId = Annotated[str, Depends(require_owner)]
