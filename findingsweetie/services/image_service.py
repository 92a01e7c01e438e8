"""Per-report image sets.

Each report holds at most ``MAX_IMAGES_PER_PET`` images. ``display_order``
only grows when images are appended, and while the set is non-empty at most
one image is primary; deleting the primary promotes the next image in
display order.
"""

from __future__ import annotations

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from findingsweetie.core.errors import NotFoundError, OwnershipError, ValidationFailure
from findingsweetie.models.pet import Pet
from findingsweetie.models.pet_image import PetImage

logger = logging.getLogger(__name__)

MAX_IMAGES_PER_PET = 5


def list_images(db: Session, pet_id: int) -> list[PetImage]:
    """Images for a pet, primary first, then by display order."""
    result = db.execute(
        select(PetImage)
        .where(PetImage.pet_id == pet_id)
        .order_by(PetImage.is_primary.desc(), PetImage.display_order.asc(), PetImage.id.asc())
    )
    return list(result.scalars().all())


def add_images(db: Session, pet: Pet, image_urls: list[str], commit: bool = True) -> list[PetImage]:
    """Append images to a pet's set.

    The first image becomes primary only when the pet had no images.
    """
    if not image_urls:
        return []
    if len(image_urls) > MAX_IMAGES_PER_PET:
        raise ValidationFailure(f"At most {MAX_IMAGES_PER_PET} images can be added at once")

    count, max_order = db.execute(
        select(func.count(PetImage.id), func.max(PetImage.display_order)).where(PetImage.pet_id == pet.id)
    ).one()
    if count + len(image_urls) > MAX_IMAGES_PER_PET:
        raise ValidationFailure(f"A report can have at most {MAX_IMAGES_PER_PET} images")

    start = 0 if max_order is None else max_order + 1
    images = [
        PetImage(
            pet_id=pet.id,
            image_url=url,
            is_primary=(count == 0 and index == 0),
            display_order=start + index,
        )
        for index, url in enumerate(image_urls)
    ]
    db.add_all(images)
    if commit:
        db.commit()
        for image in images:
            db.refresh(image)
    else:
        db.flush()
    logger.info("Added %s images to pet id=%s", len(images), pet.id)
    return images


def delete_image(db: Session, pet_id: int, image_id: int, user_id: int) -> PetImage | None:
    """Delete one image from the caller's pet.

    Returns the image promoted to primary, if any.
    """
    pet = db.get(Pet, pet_id)
    if not pet:
        raise NotFoundError("Pet not found")
    if pet.user_id != user_id:
        raise OwnershipError("You do not have permission to modify this pet")
    image = db.get(PetImage, image_id)
    if not image or image.pet_id != pet_id:
        raise NotFoundError("Image not found")

    was_primary = image.is_primary
    db.delete(image)
    db.flush()

    promoted = None
    if was_primary:
        promoted = db.execute(
            select(PetImage)
            .where(PetImage.pet_id == pet_id)
            .order_by(PetImage.display_order.asc(), PetImage.id.asc())
            .limit(1)
        ).scalar_one_or_none()
        if promoted:
            promoted.is_primary = True
    db.commit()
    if promoted:
        db.refresh(promoted)
        logger.info("Promoted image id=%s to primary for pet id=%s", promoted.id, pet_id)
    return promoted
