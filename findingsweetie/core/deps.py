"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from findingsweetie.core.config import Settings
from findingsweetie.core.errors import NotFoundError
from findingsweetie.core.security import decode_access_token
from findingsweetie.db.session import get_db
from findingsweetie.models.user import User
from findingsweetie.services.auth_service import get_user

security = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    db: Annotated[Session, Depends(get_db)],
    settings: Annotated[Settings, Depends(get_settings)],
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Require authenticated user. Raises 401 if not authenticated."""
    if not credentials:
        raise _unauthorized("Please log in to access this resource")
    user_id = decode_access_token(credentials.credentials, settings)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")
    try:
        return get_user(db, user_id)
    except NotFoundError:
        raise _unauthorized("User not found")
