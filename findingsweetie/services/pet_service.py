"""Pet report service: creation, status/visibility updates and search."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from findingsweetie.core.errors import NotFoundError, OwnershipError, ValidationFailure
from findingsweetie.models.pet import PET_STATUSES, Pet
from findingsweetie.models.user import User
from findingsweetie.schemas.pet import PetCreate, PetUpdate
from findingsweetie.services.image_service import add_images

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20


@dataclass
class SearchRow:
    """A public search hit: the report plus the owner's zip code."""

    pet: Pet
    zip_code: str


@dataclass
class PetDetail:
    """A report joined with the owner's contact, masked by their preferences."""

    pet: Pet
    contact_email: str | None
    contact_mobile: str | None
    zip_code: str


def _check_status(status: str) -> None:
    if status not in PET_STATUSES:
        raise ValidationFailure(f"Status must be one of {', '.join(PET_STATUSES)}")


def _offset(page: int, limit: int) -> int:
    if page < 1:
        raise ValidationFailure("Page must be a positive integer")
    if limit < 1:
        raise ValidationFailure("Limit must be a positive integer")
    return (page - 1) * limit


def get_pet(db: Session, pet_id: int) -> Pet:
    """Fetch any report by id, active or not."""
    pet = db.get(Pet, pet_id)
    if not pet:
        raise NotFoundError("Pet not found")
    return pet


def get_owned_pet(db: Session, pet_id: int, user_id: int) -> Pet:
    pet = get_pet(db, pet_id)
    if pet.user_id != user_id:
        raise OwnershipError("You do not have permission to modify this pet")
    return pet


def create_pet(db: Session, user_id: int, data: PetCreate) -> Pet:
    """Create a report and its initial image batch in one commit."""
    _check_status(data.status)
    pet = Pet(
        user_id=user_id,
        status=data.status,
        pet_type=data.pet_type,
        pet_name=data.pet_name,
        pet_breed=data.pet_breed,
        pet_description=data.pet_description,
        additional_comments=data.additional_comments,
        flag_chip=data.flag_chip,
        image_url=data.image_url,
        last_seen_location=data.last_seen_location,
        is_active=data.is_active,
    )
    db.add(pet)
    db.flush()
    add_images(db, pet, data.images, commit=False)
    db.commit()
    db.refresh(pet)
    logger.info("Created pet id=%s status=%s for user id=%s", pet.id, pet.status, user_id)
    return pet


def update_pet(db: Session, pet_id: int, user_id: int, data: PetUpdate) -> Pet:
    """Apply a partial update from the owner.

    Only supplied fields change, so setting ``status`` leaves ``is_active``
    alone unless the caller sends it too. Every status/visibility combination
    is allowed.
    """
    pet = get_owned_pet(db, pet_id, user_id)
    changes = data.model_dump(exclude_unset=True)
    new_images = changes.pop("images", None) or []

    if changes.get("status") is not None:
        _check_status(changes["status"])
    for field, value in changes.items():
        if value is None and field in ("status", "pet_type", "flag_chip", "is_active"):
            continue
        setattr(pet, field, value)

    db.flush()
    add_images(db, pet, new_images, commit=False)
    db.commit()
    db.refresh(pet)
    logger.info("Updated pet id=%s fields=%s", pet.id, sorted(changes))
    return pet


def delete_pet(db: Session, pet_id: int, user_id: int) -> None:
    """Hard-delete the caller's report; its images go with it."""
    pet = get_owned_pet(db, pet_id, user_id)
    db.delete(pet)
    db.commit()
    logger.info("Deleted pet id=%s", pet_id)


def search_pets(
    db: Session,
    status: str,
    pet_type: str | None = None,
    zip_code: str | None = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> list[SearchRow]:
    """Public search over active reports, newest first.

    Every predicate is applied before LIMIT/OFFSET, so a page is only short
    when the matches run out.
    """
    _check_status(status)
    offset = _offset(page, limit)

    stmt = (
        select(Pet, User.zip_code)
        .join(User, Pet.user_id == User.id)
        .where(Pet.status == status)
        .where(Pet.is_active.is_(True))
    )
    if pet_type:
        stmt = stmt.where(Pet.pet_type == pet_type)
    if zip_code:
        stmt = stmt.where(User.zip_code == zip_code)
    stmt = stmt.order_by(Pet.created_at.desc(), Pet.id.desc()).limit(limit).offset(offset)

    return [SearchRow(pet=pet, zip_code=zip_) for pet, zip_ in db.execute(stmt).all()]


def search_lost(db: Session, **filters) -> list[SearchRow]:
    return search_pets(db, "Lost", **filters)


def search_found(db: Session, **filters) -> list[SearchRow]:
    return search_pets(db, "Found", **filters)


def list_pets_for_owner(db: Session, user_id: int) -> list[Pet]:
    """All of a user's reports, inactive included, newest first, images loaded."""
    result = db.execute(
        select(Pet)
        .where(Pet.user_id == user_id)
        .options(selectinload(Pet.images))
        .order_by(Pet.created_at.desc(), Pet.id.desc())
    )
    return list(result.scalars().all())


def get_pet_detail(db: Session, pet_id: int) -> PetDetail:
    """Fetch a report with owner contact.

    Email is exposed only if the owner opted into email notifications and
    mobile only if they opted into SMS.
    """
    row = db.execute(
        select(Pet, User).join(User, Pet.user_id == User.id).where(Pet.id == pet_id)
    ).first()
    if not row:
        raise NotFoundError("Pet not found")
    pet, owner = row
    return PetDetail(
        pet=pet,
        contact_email=owner.email if owner.flag_email_notification else None,
        contact_mobile=owner.mobile_number if owner.flag_sms_notification else None,
        zip_code=owner.zip_code,
    )


def reactivate_all(db: Session) -> int:
    """Mark every inactive report active again. Returns how many changed."""
    pets = db.execute(select(Pet).where(Pet.is_active.is_not(True))).scalars().all()
    for pet in pets:
        pet.is_active = True
    db.commit()
    logger.info("Reactivated %s pets", len(pets))
    return len(pets)
