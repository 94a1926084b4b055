"""
Parent authentication dependency.

Requests carry the hosted auth access token as ``Authorization: Bearer``;
the token is resolved to a user through the auth service.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.integrations.supabase_auth import (
    SupabaseAuthClient,
    SupabaseAuthError,
    SupabaseUser,
)

from .clients import get_auth_client

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth_client: SupabaseAuthClient = Depends(get_auth_client),
) -> SupabaseUser:
    """
    Resolve the bearer token to the signed-in parent.

    Raises:
        HTTPException: 401 when the token is missing or rejected
    """
    if credentials is None or not credentials.credentials:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    try:
        return await auth_client.get_user(credentials.credentials)
    except SupabaseAuthError as e:
        logger.debug(f"Rejected access token: {e.message}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized") from e


CurrentUserDep = Annotated[SupabaseUser, Depends(get_current_user)]
