"""Auth endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from findingsweetie.core.config import Settings
from findingsweetie.core.deps import get_current_user, get_settings
from findingsweetie.core.errors import ConstraintViolation, http_error
from findingsweetie.core.security import create_access_token
from findingsweetie.db.session import get_db
from findingsweetie.models.user import User
from findingsweetie.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserMe
from findingsweetie.services.auth_service import authenticate_user, create_user

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserMe, status_code=status.HTTP_201_CREATED)
def register(
    data: RegisterRequest,
    db: Session = Depends(get_db),
):
    """Register a new account."""
    try:
        return create_user(db, data)
    except ConstraintViolation as e:
        raise http_error(e)


@router.post("/login", response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Login and return access token."""
    user = authenticate_user(db, data.email, data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    token = create_access_token(user.id, settings)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=UserMe)
def me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user."""
    return current_user
