"""Pet report schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field, field_validator

PetStatus = Literal["Lost", "Found", "Reunited"]
PetType = Literal["Dog", "Cat", "Bird", "Rabbit", "Other"]


class _PetFields(BaseModel):
    pet_name: str | None = Field(default=None, max_length=100)
    pet_breed: str | None = Field(default=None, max_length=100)
    pet_description: str | None = Field(default=None, max_length=1000)
    additional_comments: str | None = Field(default=None, max_length=1000)
    image_url: str | None = Field(default=None, max_length=500)
    last_seen_location: str | None = Field(default=None, max_length=200)
    images: list[str] = Field(default_factory=list, max_length=5)

    @field_validator(
        "pet_name", "pet_breed", "pet_description", "additional_comments", "last_seen_location", "image_url"
    )
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class PetCreate(_PetFields):
    status: PetStatus
    pet_type: PetType
    flag_chip: bool = False
    is_active: bool = True


class PetUpdate(_PetFields):
    status: PetStatus | None = None
    pet_type: PetType | None = None
    flag_chip: bool | None = None
    is_active: bool | None = None


class PetImageOut(BaseModel):
    id: int
    pet_id: int
    image_url: str
    is_primary: bool
    display_order: int

    model_config = {"from_attributes": True}


class PetImagesCreate(BaseModel):
    image_urls: list[str] = Field(min_length=1, max_length=5)


class PetOut(BaseModel):
    """Full report as seen by its owner."""

    id: int
    user_id: int
    status: str
    pet_type: str
    pet_name: str | None = None
    pet_breed: str | None = None
    pet_description: str | None = None
    additional_comments: str | None = None
    flag_chip: bool
    image_url: str | None = None
    last_seen_location: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    images: list[PetImageOut] = []

    model_config = {"from_attributes": True}


class PetSummary(BaseModel):
    """One public search hit."""

    id: int
    status: str
    pet_type: str
    pet_name: str | None = None
    pet_breed: str | None = None
    pet_description: str | None = None
    image_url: str | None = None
    last_seen_location: str | None = None
    zip_code: str
    created_at: datetime


class PetSearchResponse(BaseModel):
    count: int
    page: int
    limit: int
    pets: list[PetSummary]


class Contact(BaseModel):
    email: str | None = None
    mobile: str | None = None
    zip_code: str


class PetDetailOut(BaseModel):
    id: int
    status: str
    pet_type: str
    pet_name: str | None = None
    pet_breed: str | None = None
    pet_description: str | None = None
    additional_comments: str | None = None
    flag_chip: bool
    image_url: str | None = None
    last_seen_location: str | None = None
    is_active: bool
    created_at: datetime
    contact: Contact
    images: list[PetImageOut] = []


class OwnerPetList(BaseModel):
    count: int
    pets: list[PetOut]
