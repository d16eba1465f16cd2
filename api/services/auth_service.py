"""
Bearer token authentication for admin and webhook endpoints.
"""
import hmac
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from api.dependencies import get_app_settings
from config import Settings
import structlog

logger = structlog.get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


def is_valid_admin_token(token: Optional[str], secret: str) -> bool:
    """Constant-time token check. An unset secret rejects everything."""
    if not secret or not token:
        return False
    return hmac.compare_digest(token.encode(), secret.encode())


async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    app_settings: Settings = Depends(get_app_settings)
) -> None:
    """
    Dependency guarding admin endpoints.
    """
    token = credentials.credentials if credentials else None
    if not is_valid_admin_token(token, app_settings.admin_secret_key):
        if not app_settings.admin_secret_key:
            logger.error("Admin endpoint called but ADMIN_SECRET_KEY is not set")
        else:
            logger.warning("Unauthorized admin request")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
