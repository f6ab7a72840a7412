from typing import Optional
import logging
from fastapi import Request, HTTPException, status, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from factdesk.models.auth import Actor
from factdesk.security.jwt import decode_token

logger = logging.getLogger(__name__)


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


class JWTBearer(HTTPBearer):
    """
    Security scheme that extracts the bearer token from the Authorization
    header. A missing or malformed header is always a 401.
    """
    def __init__(self):
        super().__init__(bearerFormat="JWT", auto_error=False)

    async def __call__(self, request: Request) -> HTTPAuthorizationCredentials:
        credentials: Optional[HTTPAuthorizationCredentials] = await super().__call__(request)
        if not credentials:
            raise _unauthorized("INVALID_AUTH_HEADER", "Missing or invalid authorization header")
        if credentials.scheme.lower() != "bearer":
            raise _unauthorized("INVALID_AUTH_SCHEME", "Invalid authentication scheme.")
        return credentials


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials = Security(JWTBearer())
) -> Actor:
    """
    Dependency that validates the access token and returns the caller.

    Identity is owned by the auth service; the token's ``userId`` and
    ``roles`` claims are trusted as-is and authorization decisions are made
    by the services.
    """
    decoded_data = decode_token(credentials.credentials, request.app.state.settings)

    if not decoded_data.get("success"):
        if decoded_data.get("error") == "TOKEN_EXPIRED":
            logger.warning('Token expired during authentication')
            raise _unauthorized("TOKEN_EXPIRED", "Token has expired")
        logger.warning('Invalid token during authentication')
        raise _unauthorized("INVALID_TOKEN", "Invalid authentication token")

    payload = decoded_data["payload"]
    if payload.get('type') != 'access':
        logger.warning(f"Invalid token type provided: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN", "Invalid token type, expected 'access'")

    user_id = payload.get('userId')
    if not user_id:
        logger.warning('Token missing userId claim')
        raise _unauthorized("INVALID_TOKEN", "Invalid token: missing user ID")

    roles = payload.get('roles') or ['user']
    if not isinstance(roles, list):
        roles = [str(roles)]

    logger.debug(f'Authenticated user {user_id} with roles {roles}')
    return Actor(user_id=str(user_id), roles=[str(r) for r in roles])
