"""Pet report API: registration, public search, detail and owner edits."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from findingsweetie.core.deps import get_current_user
from findingsweetie.core.errors import RegistryError, http_error
from findingsweetie.db.session import get_db
from findingsweetie.models.user import User
from findingsweetie.schemas.pet import (
    Contact,
    PetCreate,
    PetDetailOut,
    PetImageOut,
    PetImagesCreate,
    PetOut,
    PetSearchResponse,
    PetSummary,
    PetType,
    PetUpdate,
)
from findingsweetie.services.image_service import add_images, delete_image, list_images
from findingsweetie.services.pet_service import (
    DEFAULT_PAGE_SIZE,
    SearchRow,
    create_pet,
    delete_pet,
    get_owned_pet,
    get_pet,
    get_pet_detail,
    search_pets,
    update_pet,
)

router = APIRouter(prefix="/pets", tags=["pets"])

ZIP_PATTERN = r"^\d{5}$"


def _summaries(rows: list[SearchRow]) -> list[PetSummary]:
    return [
        PetSummary(
            id=row.pet.id,
            status=row.pet.status,
            pet_type=row.pet.pet_type,
            pet_name=row.pet.pet_name,
            pet_breed=row.pet.pet_breed,
            pet_description=row.pet.pet_description,
            image_url=row.pet.image_url,
            last_seen_location=row.pet.last_seen_location,
            zip_code=row.zip_code,
            created_at=row.pet.created_at,
        )
        for row in rows
    ]


def _search(db: Session, status_: str, zip_code: str | None, pet_type: str | None, page: int, limit: int):
    try:
        rows = search_pets(db, status_, pet_type=pet_type, zip_code=zip_code, page=page, limit=limit)
    except RegistryError as e:
        raise http_error(e)
    return PetSearchResponse(count=len(rows), page=page, limit=limit, pets=_summaries(rows))


@router.post("/register", response_model=PetOut, status_code=status.HTTP_201_CREATED)
def register_pet(
    data: PetCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Post a new Lost or Found report, optionally with up to 5 image URLs."""
    try:
        pet = create_pet(db, current_user.id, data)
    except RegistryError as e:
        raise http_error(e)
    return PetOut.model_validate(pet)


@router.get("/lost", response_model=PetSearchResponse)
def search_lost_pets(
    zip_code: str | None = Query(default=None, alias="zip", pattern=ZIP_PATTERN),
    pet_type: PetType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
):
    """Active lost reports, newest first."""
    return _search(db, "Lost", zip_code, pet_type, page, limit)


@router.get("/found", response_model=PetSearchResponse)
def search_found_pets(
    zip_code: str | None = Query(default=None, alias="zip", pattern=ZIP_PATTERN),
    pet_type: PetType | None = Query(default=None, alias="type"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1),
    db: Session = Depends(get_db),
):
    """Active found reports, newest first."""
    return _search(db, "Found", zip_code, pet_type, page, limit)


@router.get("/{pet_id}", response_model=PetDetailOut)
def pet_detail(
    pet_id: int = Path(ge=1),
    db: Session = Depends(get_db),
):
    """Any report by id, with owner contact limited to what they opted to share."""
    try:
        detail = get_pet_detail(db, pet_id)
    except RegistryError as e:
        raise http_error(e)
    pet = detail.pet
    return PetDetailOut(
        id=pet.id,
        status=pet.status,
        pet_type=pet.pet_type,
        pet_name=pet.pet_name,
        pet_breed=pet.pet_breed,
        pet_description=pet.pet_description,
        additional_comments=pet.additional_comments,
        flag_chip=pet.flag_chip,
        image_url=pet.image_url,
        last_seen_location=pet.last_seen_location,
        is_active=pet.is_active,
        created_at=pet.created_at,
        contact=Contact(email=detail.contact_email, mobile=detail.contact_mobile, zip_code=detail.zip_code),
        images=[PetImageOut.model_validate(i) for i in list_images(db, pet.id)],
    )


@router.put("/{pet_id}", response_model=PetOut)
def update_pet_report(
    data: PetUpdate,
    pet_id: int = Path(ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Owner edit. Only fields present in the body change."""
    try:
        pet = update_pet(db, pet_id, current_user.id, data)
    except RegistryError as e:
        raise http_error(e)
    return PetOut.model_validate(pet)


@router.delete("/{pet_id}")
def delete_pet_report(
    pet_id: int = Path(ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Owner delete; images are removed with the report."""
    try:
        delete_pet(db, pet_id, current_user.id)
    except RegistryError as e:
        raise http_error(e)
    return {"success": True, "message": "Pet deleted successfully"}


# ---- images ----


@router.get("/{pet_id}/images", response_model=list[PetImageOut])
def get_pet_images(
    pet_id: int = Path(ge=1),
    db: Session = Depends(get_db),
):
    """Images for a report, primary first."""
    try:
        get_pet(db, pet_id)
    except RegistryError as e:
        raise http_error(e)
    return list_images(db, pet_id)


@router.post("/{pet_id}/images", response_model=list[PetImageOut], status_code=status.HTTP_201_CREATED)
def add_pet_images(
    data: PetImagesCreate,
    pet_id: int = Path(ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Append images to the caller's report."""
    try:
        pet = get_owned_pet(db, pet_id, current_user.id)
        return add_images(db, pet, data.image_urls)
    except RegistryError as e:
        raise http_error(e)


@router.delete("/{pet_id}/images/{image_id}")
def delete_pet_image(
    pet_id: int = Path(ge=1),
    image_id: int = Path(ge=1),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Delete one image; a new primary is chosen if the primary goes."""
    try:
        promoted = delete_image(db, pet_id, image_id, current_user.id)
    except RegistryError as e:
        raise http_error(e)
    return {
        "success": True,
        "promoted_image_id": promoted.id if promoted else None,
    }
