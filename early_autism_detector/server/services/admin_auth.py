"""
Admin portal authentication.

The single admin account is configured through settings; a successful login
yields a signed JWT that every other admin endpoint requires.
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated, Optional, Tuple

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from early_autism_detector.core.logging_config import get_logger
from early_autism_detector.server.core.config import settings

logger = get_logger(__name__)

ALGORITHM = "HS256"
ADMIN_SCOPE = "admin"
UNAUTHORIZED_DETAIL = "Unauthorized - Admin access required"

admin_bearer = HTTPBearer(auto_error=False)


def check_admin_credentials(email: str, password: str) -> bool:
    admin = settings.admin
    return email.strip().lower() == admin.email.strip().lower() and password == admin.password


def create_admin_token(email: str, now: Optional[datetime] = None) -> Tuple[str, datetime]:
    """Issue an admin token and return it with its expiry."""
    now = now or datetime.now(timezone.utc)
    expires_at = now + timedelta(hours=settings.admin.session_hours)
    claims = {"sub": email, "scope": ADMIN_SCOPE, "iat": now, "exp": expires_at}
    return jwt.encode(claims, settings.admin.jwt_secret, algorithm=ALGORITHM), expires_at


def decode_admin_token(token: str) -> str:
    """
    Validate an admin token.

    Returns:
        The admin email the token was issued to

    Raises:
        JWTError: If the token is malformed, expired or not an admin token
    """
    claims = jwt.decode(token, settings.admin.jwt_secret, algorithms=[ALGORITHM])
    if claims.get("scope") != ADMIN_SCOPE:
        raise JWTError("Not an admin token")
    return claims["sub"]


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(admin_bearer),
) -> str:
    if credentials is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL)
    try:
        return decode_admin_token(credentials.credentials)
    except JWTError as e:
        logger.debug(f"Rejected admin token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=UNAUTHORIZED_DETAIL) from e


AdminDep = Annotated[str, Depends(require_admin)]
