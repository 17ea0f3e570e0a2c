"""Anonymous session tokens for NOISE.

Every browser gets a random owner id at session start, signed into a JWT.
The owner id is the only identity the board knows about: it gates who may
update or delete an item.
"""

import logging
import uuid
from datetime import UTC, datetime, timedelta

import jwt
from pydantic import BaseModel

from noise.config.models import JwtConfig

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """Claims carried by a session token."""

    owner_id: str
    issued_at: datetime
    expires_at: datetime


class IssuedSession(BaseModel):
    """A freshly issued anonymous session."""

    token: str
    owner_id: str


class InvalidTokenError(Exception):
    """The token is malformed, forged, expired or missing its owner claim."""


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an ``Authorization: Bearer <token>`` header value.

    Args:
        authorization: Raw header value, possibly None

    Returns:
        The token, or None if the header is absent or not a bearer header
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class TokenService:
    """Issues and verifies HS256 session tokens."""

    def __init__(self, config: JwtConfig) -> None:
        """Initialize token service.

        Args:
            config: JWT section of the application configuration
        """
        self.secret = config.secret
        self.algorithm = config.algorithm
        self.lifetime = timedelta(days=config.expires_in_days)

    def issue_session(self) -> IssuedSession:
        """Create a new anonymous owner id and sign a token for it."""
        owner_id = str(uuid.uuid4())
        return IssuedSession(token=self.generate_token(owner_id), owner_id=owner_id)

    def generate_token(self, owner_id: str, now: datetime | None = None) -> str:
        """Sign a token for ``owner_id``.

        Args:
            owner_id: Anonymous owner id to embed
            now: Issue time; defaults to the current UTC time
        """
        issued_at = now or datetime.now(UTC)
        claims = {
            "ownerId": owner_id,
            "iat": issued_at,
            "exp": issued_at + self.lifetime,
        }
        return jwt.encode(claims, self.secret, algorithm=self.algorithm)

    def verify_token(self, token: str) -> TokenPayload:
        """Verify a token and return its claims.

        Raises:
            InvalidTokenError: If the token cannot be trusted
        """
        try:
            claims = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.PyJWTError as e:
            logger.debug("Rejected session token: %s", e)
            raise InvalidTokenError(str(e)) from e

        owner_id = claims.get("ownerId")
        if not isinstance(owner_id, str) or not owner_id:
            raise InvalidTokenError("Token has no ownerId claim")

        return TokenPayload(
            owner_id=owner_id,
            issued_at=datetime.fromtimestamp(claims.get("iat", 0), UTC),
            expires_at=datetime.fromtimestamp(claims["exp"], UTC),
        )
