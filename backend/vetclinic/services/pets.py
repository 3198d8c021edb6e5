"""Module: pets."""

import logging
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from vetclinic.core.errors import BadRequest, NotFound
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.pet import PET_ACTIVE, PET_ARCHIVED, Pet, Species
from vetclinic.db.models.user import User
from vetclinic.db.transaction import read_guard, unit_of_work
from vetclinic.schemas.pets import PetProfilePatch
from vetclinic.services.age import Clock, validate_age

logger = logging.getLogger(__name__)

UPDATE_FAILED = "Server error while updating pet profile."
FETCH_FAILED = "Server error while fetching pets."


def _pet_list_stmt():
    return (
        select(
            Pet.pet_id.label("pet_id"),
            Pet.pet_name.label("pet_name"),
            Pet.pet_gender.label("pet_gender"),
            Pet.pet_breed.label("pet_breed"),
            Pet.pet_color.label("pet_color"),
            Pet.pet_birthday.label("pet_birthday"),
            Pet.pet_age_year.label("pet_age_year"),
            Pet.pet_age_month.label("pet_age_month"),
            Pet.pet_status.label("pet_status"),
            Species.spec_description.label("species"),
            Owner.owner_id.label("owner_id"),
            (User.user_firstname + " " + User.user_lastname).label("owner_name"),
            User.user_email.label("email"),
            User.user_contact.label("contact"),
            Owner.owner_address.label("address"),
        )
        .select_from(Pet)
        .outerjoin(Species, Species.spec_id == Pet.species_id)
        .outerjoin(Owner, Owner.owner_id == Pet.owner_id)
        .outerjoin(User, User.user_id == Owner.user_id)
    )


def _load_pet(db: Session, pet_id: int) -> Pet:
    with read_guard(FETCH_FAILED):
        pet = db.get(Pet, pet_id)
    if pet is None:
        raise NotFound("Pet not found.")
    return pet


def get_pet(db: Session, pet_id: int) -> Dict[str, Any]:
    with read_guard(FETCH_FAILED):
        row = db.execute(_pet_list_stmt().where(Pet.pet_id == pet_id)).mappings().first()
    if row is None:
        raise NotFound("Pet not found.")
    return dict(row)


def _list_by_status(db: Session, status: int) -> List[Dict[str, Any]]:
    with read_guard(FETCH_FAILED):
        rows = db.execute(
            _pet_list_stmt().where(Pet.pet_status == status).order_by(desc(Pet.pet_id))
        ).mappings().all()
    return [dict(r) for r in rows]


def list_active_pets(db: Session) -> List[Dict[str, Any]]:
    return _list_by_status(db, PET_ACTIVE)


def list_archived_pets(db: Session) -> List[Dict[str, Any]]:
    return _list_by_status(db, PET_ARCHIVED)


def update_pet_profile(
    db: Session,
    pet_id: int,
    patch: PetProfilePatch,
    today: Clock = date.today,
) -> Dict[str, Any]:
    """
    Apply a partial profile update.

    Whenever the birthday or an age component is submitted, the age is
    recomputed from the effective birthday and any submitted age must agree
    with it. The computed age is what gets stored.
    """
    pet = _load_pet(db, pet_id)
    supplied = patch.model_fields_set

    species_id = pet.species_id
    if "species" in supplied and patch.species:
        with read_guard(FETCH_FAILED):
            species_id = db.execute(
                select(Species.spec_id).where(Species.spec_description == patch.species)
            ).scalar_one_or_none()
        if species_id is None:
            raise BadRequest("Invalid species.")

    age = None
    if supplied & {"pet_birthday", "pet_age_year", "pet_age_month"}:
        birthday = patch.pet_birthday or pet.pet_birthday
        if birthday is None:
            raise BadRequest("Birthday is required to set the pet's age.")
        age = validate_age(birthday, patch.pet_age_year, patch.pet_age_month, today())

    with unit_of_work(db, UPDATE_FAILED):
        for name in ("pet_name", "pet_gender", "pet_breed", "pet_color"):
            if name in supplied and getattr(patch, name) is not None:
                setattr(pet, name, getattr(patch, name))
        pet.species_id = species_id
        if age is not None:
            pet.pet_birthday = patch.pet_birthday or pet.pet_birthday
            pet.pet_age_year = age.years
            pet.pet_age_month = age.months

    logger.info("Updated pet %s", pet_id)
    return get_pet(db, pet_id)


def _set_status(db: Session, pet_id: int, status: int) -> Pet:
    pet = _load_pet(db, pet_id)
    with unit_of_work(db, UPDATE_FAILED):
        pet.pet_status = status
    return pet


def archive_pet(db: Session, pet_id: int) -> str:
    pet = _set_status(db, pet_id, PET_ARCHIVED)
    logger.info("Archived pet %s", pet_id)
    return f"Pet {pet.pet_name} archived successfully!"


def restore_pet(db: Session, pet_id: int) -> str:
    pet = _set_status(db, pet_id, PET_ACTIVE)
    logger.info("Restored pet %s", pet_id)
    return f"Pet {pet.pet_name} restored successfully!"
