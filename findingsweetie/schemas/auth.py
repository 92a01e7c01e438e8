"""Auth schemas."""

import re
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    mobile_number: str | None = Field(default=None, pattern=r"^(\d{10})?$")
    zip_code: str = Field(pattern=r"^\d{5}$")
    flag_sms_notification: bool = False
    flag_email_notification: bool = True

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: str) -> str:
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters long")
        if not re.search(r"[a-z]", v):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[A-Z]", v):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[0-9]", v):
            raise ValueError("Password must contain at least one number")
        return v


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserMe(BaseModel):
    id: int
    email: str
    mobile_number: str | None = None
    zip_code: str
    flag_sms_notification: bool
    flag_email_notification: bool
    created_at: datetime

    model_config = {"from_attributes": True}
