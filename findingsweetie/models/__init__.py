"""SQLAlchemy models."""

from __future__ import annotations

from findingsweetie.models.pet import PET_STATUSES, Pet
from findingsweetie.models.pet_image import PetImage
from findingsweetie.models.push_subscription import PushSubscription
from findingsweetie.models.user import User

__all__ = [
    "PET_STATUSES",
    "Pet",
    "PetImage",
    "PushSubscription",
    "User",
]
