"""Account service: registration, login and profile changes."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from findingsweetie.core.errors import AuthenticationError, ConstraintViolation, NotFoundError, ValidationFailure
from findingsweetie.core.security import hash_password, verify_password
from findingsweetie.models.user import User
from findingsweetie.schemas.auth import RegisterRequest
from findingsweetie.schemas.user import ProfileUpdate

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by (normalized) email."""
    return db.execute(select(User).where(User.email == normalize_email(email))).scalar_one_or_none()


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError("User not found")
    return user


def create_user(db: Session, data: RegisterRequest) -> User:
    """Create a new user. Raises ConstraintViolation if the email is taken."""
    email = normalize_email(data.email)
    if get_user_by_email(db, email):
        raise ConstraintViolation("An account with this email already exists")

    user = User(
        email=email,
        hashed_password=hash_password(data.password),
        mobile_number=data.mobile_number or None,
        zip_code=data.zip_code,
        flag_sms_notification=data.flag_sms_notification,
        flag_email_notification=data.flag_email_notification,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # Another registration took the email between the check and the insert.
        db.rollback()
        raise ConstraintViolation("An account with this email already exists")
    db.refresh(user)
    logger.info("Registered user id=%s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def update_profile(db: Session, user: User, data: ProfileUpdate) -> User:
    """Apply the fields the caller supplied; others keep their values."""
    changes = data.model_dump(exclude_unset=True)
    if "email" in changes and changes["email"] is not None:
        email = normalize_email(changes["email"])
        if email != user.email:
            if get_user_by_email(db, email):
                raise ConstraintViolation("This email is already in use")
            user.email = email
    if "mobile_number" in changes:
        user.mobile_number = changes["mobile_number"] or None
    for field in ("zip_code", "flag_sms_notification", "flag_email_notification"):
        if changes.get(field) is not None:
            setattr(user, field, changes[field])
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConstraintViolation("This email is already in use")
    db.refresh(user)
    return user


def change_password(db: Session, user: User, current_password: str, new_password: str) -> None:
    """Replace the password after checking the current one.

    A wrong current password is an AuthenticationError (401), a too-short new
    one a ValidationFailure (400).
    """
    if len(new_password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(f"New password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if not verify_password(current_password, user.hashed_password):
        raise AuthenticationError("Current password is incorrect")
    user.hashed_password = hash_password(new_password)
    db.commit()
    logger.info("Password changed for user id=%s", user.id)
