"""Pet service tests: visibility, search semantics and partial updates."""

from datetime import datetime, timedelta

import pytest

from findingsweetie.core.errors import NotFoundError, OwnershipError, ValidationFailure
from findingsweetie.schemas.pet import PetUpdate
from findingsweetie.services.pet_service import (
    get_pet,
    get_pet_detail,
    list_pets_for_owner,
    reactivate_all,
    search_found,
    search_lost,
    search_pets,
    update_pet,
)


def _ids(rows):
    return [row.pet.id for row in rows]


def test_scenario_lost_pet_visible_until_deactivated(db, make_user, make_pet):
    user = make_user(email="a@x.com", zip_code="12345")
    pet = make_pet(user, status="Lost", pet_type="Dog", is_active=True)

    assert _ids(search_lost(db, zip_code="12345")) == [pet.id]

    update_pet(db, pet.id, user.id, PetUpdate(is_active=False))
    assert search_lost(db, zip_code="12345") == []
    assert get_pet(db, pet.id).id == pet.id


@pytest.mark.parametrize(
    "filters",
    [
        {},
        {"zip_code": "12345"},
        {"pet_type": "Dog"},
        {"zip_code": "12345", "pet_type": "Dog"},
        {"page": 1, "limit": 1},
    ],
)
def test_inactive_reports_never_searchable(db, make_user, make_pet, filters):
    user = make_user(zip_code="12345")
    hidden = make_pet(user, status="Lost", pet_type="Dog", is_active=False)
    make_pet(user, status="Found", pet_type="Dog", is_active=False)

    assert hidden.id not in _ids(search_lost(db, **filters))
    assert search_found(db, **filters) == []


def test_search_rows_carry_owner_zip(db, make_user, make_pet):
    user = make_user(zip_code="90210")
    make_pet(user, status="Found", pet_type="Cat")
    rows = search_found(db)
    assert len(rows) == 1
    assert rows[0].zip_code == "90210"


def test_reunited_reports_not_searchable_by_status(db, make_user, make_pet):
    user = make_user()
    make_pet(user, status="Reunited")
    assert search_lost(db) == []
    assert search_found(db) == []
    assert len(search_pets(db, "Reunited")) == 1


def test_newest_first(db, make_user, make_pet):
    user = make_user()
    old = make_pet(user)
    new = make_pet(user)
    middle = make_pet(user)
    base = datetime(2024, 1, 1, 12, 0, 0)
    old.created_at = base
    middle.created_at = base + timedelta(hours=1)
    new.created_at = base + timedelta(hours=2)
    db.commit()

    assert _ids(search_lost(db)) == [new.id, middle.id, old.id]


def test_zip_and_type_filter_before_paging(db, make_user, make_pet):
    """A page is only short once matching rows run out."""
    near = make_user(zip_code="11111")
    far = make_user(zip_code="22222")
    base = datetime(2024, 1, 1)
    matches = []
    for i in range(6):
        noise = make_pet(far, pet_type="Dog")
        cat = make_pet(near, pet_type="Cat")
        dog = make_pet(near, pet_type="Dog")
        noise.created_at = base + timedelta(minutes=3 * i + 2)
        cat.created_at = base + timedelta(minutes=3 * i + 1)
        dog.created_at = base + timedelta(minutes=3 * i)
        matches.append(dog)
    db.commit()

    expected = [p.id for p in reversed(matches)]
    page1 = search_lost(db, zip_code="11111", pet_type="Dog", page=1, limit=4)
    page2 = search_lost(db, zip_code="11111", pet_type="Dog", page=2, limit=4)
    assert _ids(page1) == expected[:4]
    assert _ids(page2) == expected[4:]


def test_page_beyond_results_is_empty(db, make_user, make_pet):
    user = make_user()
    make_pet(user)
    assert search_lost(db, page=5, limit=20) == []


@pytest.mark.parametrize("page, limit", [(0, 20), (-1, 20), (1, 0)])
def test_bad_pagination_rejected(db, page, limit):
    with pytest.raises(ValidationFailure):
        search_lost(db, page=page, limit=limit)


def test_unknown_search_status_rejected(db):
    with pytest.raises(ValidationFailure):
        search_pets(db, "Missing")


def test_status_change_keeps_active_flag(db, make_user, make_pet):
    user = make_user()
    pet = make_pet(user, status="Lost", is_active=False)

    updated = update_pet(db, pet.id, user.id, PetUpdate(status="Reunited"))
    assert updated.status == "Reunited"
    assert updated.is_active is False


def test_reunited_report_can_be_reactivated(db, make_user, make_pet):
    user = make_user()
    pet = make_pet(user, status="Reunited", is_active=False)

    updated = update_pet(db, pet.id, user.id, PetUpdate(status="Lost", is_active=True))
    assert updated.status == "Lost"
    assert updated.is_active is True
    assert _ids(search_lost(db)) == [pet.id]


def test_partial_update_leaves_other_fields(db, make_user, make_pet):
    user = make_user()
    pet = make_pet(user, pet_name="Rex", pet_breed="Beagle")

    updated = update_pet(db, pet.id, user.id, PetUpdate(pet_name="Max"))
    assert updated.pet_name == "Max"
    assert updated.pet_breed == "Beagle"
    assert updated.pet_type == "Dog"


def test_update_can_append_images(db, make_user, make_pet):
    user = make_user()
    pet = make_pet(user, images=["/1.jpg"])

    updated = update_pet(db, pet.id, user.id, PetUpdate(images=["/2.jpg"]))
    assert [(i.image_url, i.display_order, i.is_primary) for i in updated.images] == [
        ("/1.jpg", 0, True),
        ("/2.jpg", 1, False),
    ]


def test_update_requires_owner(db, make_user, make_pet):
    owner = make_user()
    stranger = make_user()
    pet = make_pet(owner)

    with pytest.raises(OwnershipError):
        update_pet(db, pet.id, stranger.id, PetUpdate(status="Found"))
    with pytest.raises(NotFoundError):
        update_pet(db, 999, owner.id, PetUpdate(status="Found"))


def test_owner_listing_includes_inactive(db, make_user, make_pet):
    owner = make_user()
    other = make_user()
    active = make_pet(owner)
    inactive = make_pet(owner, status="Found", is_active=False)
    make_pet(other)

    ids = [p.id for p in list_pets_for_owner(db, owner.id)]
    assert sorted(ids) == sorted([active.id, inactive.id])


@pytest.mark.parametrize(
    "email_opt_in, sms_opt_in, expected",
    [
        (True, True, ("me@test.com", "5551112222")),
        (True, False, ("me@test.com", None)),
        (False, True, (None, "5551112222")),
        (False, False, (None, None)),
    ],
)
def test_contact_masking(db, make_user, make_pet, email_opt_in, sms_opt_in, expected):
    user = make_user(
        email="me@test.com",
        mobile_number="5551112222",
        flag_email_notification=email_opt_in,
        flag_sms_notification=sms_opt_in,
    )
    pet = make_pet(user)

    detail = get_pet_detail(db, pet.id)
    assert (detail.contact_email, detail.contact_mobile) == expected
    assert detail.zip_code == "12345"


def test_detail_missing_pet(db):
    with pytest.raises(NotFoundError):
        get_pet_detail(db, 42)


def test_reactivate_all(db, make_user, make_pet):
    user = make_user()
    make_pet(user, is_active=False)
    make_pet(user, status="Found", is_active=False)
    make_pet(user)

    assert reactivate_all(db) == 2
    assert len(search_lost(db)) == 2
    assert len(search_found(db)) == 1
    assert reactivate_all(db) == 0
