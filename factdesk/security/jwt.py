from typing import Dict, Any, Optional, List
from datetime import datetime, timedelta, timezone
from jose import jwt
from jose.exceptions import JWTError, ExpiredSignatureError
import logging

from factdesk.core.config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


def create_access_token(
    user_id: str,
    roles: Optional[List[str]] = None,
    expires_in: Optional[int] = None,
    settings: Optional[Settings] = None,
) -> str:
    """
    Create a signed JWT access token with user information.

    Token issuance belongs to the identity service in production; this is
    used by tooling and tests to mint tokens the API accepts.

    Args:
        user_id: The user's unique identifier in the system
        roles: List of user roles (e.g., ['user'], ['fact_checker'], ['admin'])
        expires_in: Token expiration duration in seconds
        settings: Settings holding the signing key (defaults to process settings)

    Returns:
        Encoded JWT token as a string
    """
    settings = settings or default_settings
    if roles is None:
        roles = ["user"]
    if expires_in is None:
        expires_in = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    now = datetime.now(timezone.utc)
    to_encode = {
        "userId": user_id,
        "roles": roles,
        "exp": now + timedelta(seconds=expires_in),
        "iat": now,
        "type": "access"
    }

    try:
        encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
        logger.debug(f"Created access token for user {user_id}")
        return encoded_jwt
    except Exception as e:
        logger.error(f"Failed to create access token: {str(e)}")
        raise


def decode_token(token: str, settings: Optional[Settings] = None) -> Dict[str, Any]:
    """
    Decode and verify a JWT token.

    Args:
        token: The JWT token to decode
        settings: Settings holding the signing key (defaults to process settings)

    Returns:
        Dictionary with 'success': True and token claims if valid,
        or 'success': False with 'error': 'TOKEN_EXPIRED' or 'INVALID_TOKEN'
    """
    settings = settings or default_settings
    try:
        decoded_token = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return {"success": True, "payload": decoded_token}
    except ExpiredSignatureError:
        logger.warning("Token expired during decoding")
        return {"success": False, "error": "TOKEN_EXPIRED"}
    except JWTError as e:
        logger.warning(f"Token decoding failed due to invalid signature or other JWT error: {str(e)}")
        return {"success": False, "error": "INVALID_TOKEN"}
