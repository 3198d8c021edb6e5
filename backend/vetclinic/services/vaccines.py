"""Module: vaccines."""

import logging
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from vetclinic.core.errors import BadRequest, NotFound
from vetclinic.db.models.pet import Pet
from vetclinic.db.models.vaccination import ImmunizationRecord, Vaccine
from vetclinic.db.transaction import read_guard, unit_of_work
from vetclinic.schemas.vaccines import VaccinationCreate

logger = logging.getLogger(__name__)

ADD_FAILED = "Server error while adding record."
FETCH_FAILED = "Server error while fetching vaccination records."


def list_vaccines(db: Session) -> List[Dict[str, Any]]:
    with read_guard(FETCH_FAILED):
        rows = db.execute(
            select(Vaccine.vax_id.label("vax_id"), Vaccine.vax_type.label("vax_type"))
            .order_by(Vaccine.vax_type)
        ).mappings().all()
    return [dict(r) for r in rows]


def get_vaccine_by_type(db: Session, vax_type: str) -> Vaccine | None:
    return db.execute(select(Vaccine).where(Vaccine.vax_type == vax_type)).scalar_one_or_none()


def add_vaccination_record(
    db: Session,
    pet_id: int,
    payload: VaccinationCreate,
    today=date.today,
) -> Dict[str, Any]:
    if not payload.vax_type or not payload.imm_rec_quantity:
        raise BadRequest("Vaccine type and dose quantity are required.")
    if payload.imm_rec_quantity < 0:
        raise BadRequest("Dose quantity must be positive.")

    with unit_of_work(db, ADD_FAILED):
        if db.get(Pet, pet_id) is None:
            raise NotFound("Pet not found.")

        vaccine = get_vaccine_by_type(db, payload.vax_type)
        if vaccine is None:
            raise BadRequest("Invalid vaccine type. Please select a valid vaccine.")

        record = ImmunizationRecord(
            pet_id=pet_id,
            vax_id=vaccine.vax_id,
            imm_rec_quantity=payload.imm_rec_quantity,
            imm_rec_date=payload.imm_rec_date or today(),
        )
        db.add(record)
        db.flush()
        imm_rec_id = record.imm_rec_id

    logger.info("Added vaccination %s for pet %s", imm_rec_id, pet_id)
    return {"message": "Vaccination record added successfully!", "imm_rec_id": imm_rec_id}


def list_pet_vaccinations(db: Session, pet_id: int) -> List[Dict[str, Any]]:
    with read_guard(FETCH_FAILED):
        rows = db.execute(
            select(
                ImmunizationRecord.imm_rec_id.label("imm_rec_id"),
                ImmunizationRecord.pet_id.label("pet_id"),
                Vaccine.vax_type.label("vax_type"),
                ImmunizationRecord.imm_rec_quantity.label("imm_rec_quantity"),
                ImmunizationRecord.imm_rec_date.label("imm_rec_date"),
            )
            .join(Vaccine, Vaccine.vax_id == ImmunizationRecord.vax_id)
            .where(ImmunizationRecord.pet_id == pet_id)
            .order_by(desc(ImmunizationRecord.imm_rec_date))
        ).mappings().all()
    return [dict(r) for r in rows]
