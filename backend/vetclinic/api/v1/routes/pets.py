"""Module: pets."""

from datetime import date
from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vetclinic.api.v1.routes.deps import get_clock, get_current_user, get_db, require_roles
from vetclinic.core.roles import CLINICAL_ROLES
from vetclinic.schemas.pets import PetProfilePatch
from vetclinic.schemas.vaccines import VaccinationCreate
from vetclinic.services import pets as pet_service
from vetclinic.services import vaccines as vaccine_service

router = APIRouter()

clinical_staff = Depends(require_roles(*CLINICAL_ROLES))
authenticated = Depends(get_current_user)


# -------------------------
# Endpoints
# -------------------------

@router.get("/active", summary="List active pets", dependencies=[authenticated])
def get_all_active_pets(db: Session = Depends(get_db)):
    return pet_service.list_active_pets(db)


@router.get("/archived", summary="List archived pets", dependencies=[authenticated])
def get_all_archived_pets(db: Session = Depends(get_db)):
    return pet_service.list_archived_pets(db)


@router.get("/{pet_id}", summary="Get pet detail", dependencies=[authenticated])
def get_pet(pet_id: int, db: Session = Depends(get_db)):
    return pet_service.get_pet(db, pet_id)


@router.patch("/{pet_id}", summary="Update pet profile", dependencies=[clinical_staff])
def update_pet_profile(
    pet_id: int,
    patch: PetProfilePatch,
    db: Session = Depends(get_db),
    today: Callable[[], date] = Depends(get_clock),
):
    pet = pet_service.update_pet_profile(db, pet_id, patch, today)
    return {"message": "Pet profile updated successfully!", "pet": pet}


@router.put("/{pet_id}/archive", summary="Archive a pet", dependencies=[clinical_staff])
def archive_pet(pet_id: int, db: Session = Depends(get_db)):
    return {"message": pet_service.archive_pet(db, pet_id)}


@router.put("/{pet_id}/restore", summary="Restore an archived pet", dependencies=[clinical_staff])
def restore_pet(pet_id: int, db: Session = Depends(get_db)):
    return {"message": pet_service.restore_pet(db, pet_id)}


@router.post("/{pet_id}/vaccines", status_code=201, summary="Add a vaccination record", dependencies=[clinical_staff])
def add_pet_vaccination_record(
    pet_id: int,
    payload: VaccinationCreate,
    db: Session = Depends(get_db),
    today: Callable[[], date] = Depends(get_clock),
):
    return vaccine_service.add_vaccination_record(db, pet_id, payload, today)


@router.get("/{pet_id}/vaccines", summary="List vaccinations for a pet", dependencies=[authenticated])
def list_pet_vaccinations(pet_id: int, db: Session = Depends(get_db)):
    return vaccine_service.list_pet_vaccinations(db, pet_id)
