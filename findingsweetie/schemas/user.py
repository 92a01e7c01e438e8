"""User profile schemas."""

from __future__ import annotations

from pydantic import BaseModel, EmailStr, Field


class ProfileUpdate(BaseModel):
    email: EmailStr | None = None
    mobile_number: str | None = Field(default=None, pattern=r"^(\d{10})?$")
    zip_code: str | None = Field(default=None, pattern=r"^\d{5}$")
    flag_sms_notification: bool | None = None
    flag_email_notification: bool | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=1)
