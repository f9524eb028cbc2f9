"""Bearer-token authentication.

Requests carry ``Authorization: Bearer <jwt>`` issued by the identity
provider; the token's ``sub`` claim is the user id.
"""
from __future__ import annotations

from typing import Optional

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from adgen.config import settings
from adgen.domain.errors import AuthenticationError

bearer_scheme = HTTPBearer(auto_error=False)


def decode_user_id(token: str) -> str:
    """Return the user id carried by a token, or raise AuthenticationError."""
    try:
        payload = jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        raise AuthenticationError(f"Invalid authentication token: {e}") from e

    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Authentication token has no subject")
    return str(user_id)


def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Not authenticated")
    return decode_user_id(credentials.credentials)
