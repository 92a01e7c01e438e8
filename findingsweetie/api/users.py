"""Current-user endpoints: profile, password and the report dashboard."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from findingsweetie.core.deps import get_current_user
from findingsweetie.core.errors import RegistryError, http_error
from findingsweetie.db.session import get_db
from findingsweetie.models.user import User
from findingsweetie.schemas.auth import UserMe
from findingsweetie.schemas.pet import OwnerPetList, PetOut
from findingsweetie.schemas.user import ChangePasswordRequest, ProfileUpdate
from findingsweetie.services.auth_service import change_password, update_profile
from findingsweetie.services.pet_service import list_pets_for_owner

router = APIRouter(prefix="/user", tags=["user"])


@router.get("/profile", response_model=UserMe)
def get_profile(current_user: User = Depends(get_current_user)):
    """Get current user's profile."""
    return current_user


@router.put("/profile", response_model=UserMe)
def put_profile(
    data: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Update current user's profile. Omitted fields are left as they are."""
    try:
        return update_profile(db, current_user, data)
    except RegistryError as e:
        raise http_error(e)


@router.post("/change-password")
def post_change_password(
    data: ChangePasswordRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Change the current user's password."""
    try:
        change_password(db, current_user, data.current_password, data.new_password)
    except RegistryError as e:
        raise http_error(e)
    return {"success": True, "message": "Password changed successfully"}


@router.get("/pets", response_model=OwnerPetList)
def my_pets(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """All of the current user's reports, inactive ones included."""
    pets = list_pets_for_owner(db, current_user.id)
    return OwnerPetList(count=len(pets), pets=[PetOut.model_validate(p) for p in pets])
