"""Bearer token authentication dependency.

The gate trusts the verified token alone; it does not hit the user store.
"""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_service
from api.models import CurrentUser
from domain.model.errors import TokenError
from services.token_service import TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_required(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    token_service: TokenService = Depends(get_token_service),
) -> CurrentUser:
    """Resolve the caller from the Authorization header. Raises 401 if not authenticated."""
    if not credentials or not credentials.credentials.strip():
        raise _unauthorized("Not authenticated")

    try:
        claims = token_service.verify(credentials.credentials.strip())
    except TokenError as e:
        # Signature and expiry failures look the same to the caller
        logger.debug(f"Token rejected: {type(e).__name__}")
        raise _unauthorized("Invalid authentication credentials")

    return CurrentUser(id=claims.subject_id, email=claims.subject_email)
