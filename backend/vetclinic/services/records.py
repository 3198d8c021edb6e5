"""Module: records.

Visit-record workflows: creation, partial update and the joined read model.

Every mutation runs inside ``unit_of_work`` so sub-record writes (diagnosis,
surgery, lab link) and the final ``record_info`` statement commit or roll back
together. All role, access-code and input checks finish before the first write.
"""

import logging
from datetime import date
from typing import Any, Dict, List

from sqlalchemy import asc, delete, desc, insert, select, update
from sqlalchemy.orm import Session

from vetclinic.core.errors import BadRequest, Forbidden, NotFound
from vetclinic.core.roles import Role
from vetclinic.db.models.diagnosis import DiagnosisInfo
from vetclinic.db.models.laboratory import Laboratory, MatchRecordLab
from vetclinic.db.models.pet import Pet
from vetclinic.db.models.record import RecordInfo
from vetclinic.db.models.surgery import SurgeryInfo
from vetclinic.db.transaction import read_guard, unit_of_work
from vetclinic.schemas.records import RecordCreate, RecordPatch
from vetclinic.services.access_code import AccessCodeSession, verify_access_code

logger = logging.getLogger(__name__)

CREATE_FAILED = "Server error while adding medical record."
UPDATE_FAILED = "Server error while updating medical record."
FETCH_FAILED = "Failed to fetch visit records"

# Plain columns a patch may overwrite directly.
PATCHABLE_COLUMNS = (
    "record_date",
    "record_weight",
    "record_temp",
    "record_condition",
    "record_symptom",
    "record_recent_visit",
    "record_purchase",
    "record_purpose",
    "record_lab_file",
)

# Columns written by the single UPDATE that closes every record mutation.
MUTABLE_COLUMNS = PATCHABLE_COLUMNS + ("lab_id", "diagnosis_id", "surgery_id")


# -------------------------
# Read model
# -------------------------
def _complete_record_stmt():
    return (
        select(
            RecordInfo.record_id.label("id"),
            RecordInfo.pet_id.label("petId"),
            RecordInfo.record_date.label("date"),
            RecordInfo.record_purpose.label("purposeOfVisit"),
            RecordInfo.record_weight.label("weight"),
            RecordInfo.record_temp.label("temperature"),
            RecordInfo.record_condition.label("conditions"),
            RecordInfo.record_symptom.label("symptoms"),
            RecordInfo.record_recent_visit.label("recentVisit"),
            RecordInfo.record_purchase.label("recentPurchase"),
            RecordInfo.record_lab_file.label("file"),
            RecordInfo.lab_id.label("lab_id"),
            RecordInfo.diagnosis_id.label("diagnosis_id"),
            RecordInfo.surgery_id.label("surgery_id"),
            Pet.pet_name.label("pet_name"),
            Laboratory.lab_description.label("laboratories"),
            DiagnosisInfo.diagnosis_text.label("latestDiagnosis"),
            SurgeryInfo.surgery_type.label("surgeryType"),
            SurgeryInfo.surgery_date.label("surgeryDate"),
        )
        .select_from(RecordInfo)
        .join(Pet, Pet.pet_id == RecordInfo.pet_id)
        .outerjoin(Laboratory, Laboratory.lab_id == RecordInfo.lab_id)
        .outerjoin(DiagnosisInfo, DiagnosisInfo.diagnosis_id == RecordInfo.diagnosis_id)
        .outerjoin(SurgeryInfo, SurgeryInfo.surgery_id == RecordInfo.surgery_id)
    )


def _as_record_dict(row) -> Dict[str, Any]:
    d = dict(row)
    d["hadSurgery"] = d.get("surgery_id") is not None
    return d


def get_complete_record(db: Session, record_id: int) -> Dict[str, Any] | None:
    row = db.execute(
        _complete_record_stmt().where(RecordInfo.record_id == record_id)
    ).mappings().first()
    return _as_record_dict(row) if row else None


def list_visit_records(db: Session, pet_id: int | None) -> List[Dict[str, Any]]:
    if pet_id is None:
        raise BadRequest("pet_id is required")

    with read_guard(FETCH_FAILED):
        rows = db.execute(
            _complete_record_stmt()
            .where(RecordInfo.pet_id == pet_id)
            .order_by(desc(RecordInfo.record_date), desc(RecordInfo.record_id))
        ).mappings().all()
    return [_as_record_dict(r) for r in rows]


def search_records(
    db: Session,
    pet_id: int | None,
    start_date: date | None = None,
    end_date: date | None = None,
    sort_order: str | None = None,
) -> List[Dict[str, Any]]:
    if pet_id is None:
        raise BadRequest("pet_id is required")
    if start_date and end_date and start_date > end_date:
        raise BadRequest("start_date must be on or before end_date")

    order = asc if (sort_order or "").upper() == "ASC" else desc
    stmt = _complete_record_stmt().where(RecordInfo.pet_id == pet_id)
    if start_date:
        stmt = stmt.where(RecordInfo.record_date >= start_date)
    if end_date:
        stmt = stmt.where(RecordInfo.record_date <= end_date)
    stmt = stmt.order_by(order(RecordInfo.record_date), order(RecordInfo.record_id))

    with read_guard(FETCH_FAILED):
        rows = db.execute(stmt).mappings().all()
    return [_as_record_dict(r) for r in rows]


# -------------------------
# Sub-record helpers
# -------------------------
def get_lab_id_by_description(db: Session, description: str) -> int | None:
    return db.execute(
        select(Laboratory.lab_id).where(Laboratory.lab_description == description)
    ).scalar_one_or_none()


def insert_lab_info(db: Session, description: str) -> int:
    return db.execute(
        insert(Laboratory).values(lab_description=description).returning(Laboratory.lab_id)
    ).scalar_one()


def lookup_or_create_lab(db: Session, description: str) -> int:
    lab_id = get_lab_id_by_description(db, description)
    if lab_id is None:
        lab_id = insert_lab_info(db, description)
        logger.info("Created laboratory %s (%r)", lab_id, description)
    return lab_id


def link_record_lab(db: Session, record_id: int, lab_id: int) -> None:
    linked = db.execute(
        select(MatchRecordLab.lab_id).where(MatchRecordLab.record_id == record_id)
    ).first()
    if linked is None:
        db.execute(insert(MatchRecordLab).values(record_id=record_id, lab_id=lab_id))
    else:
        db.execute(
            update(MatchRecordLab)
            .where(MatchRecordLab.record_id == record_id)
            .values(lab_id=lab_id)
        )


def insert_diagnosis(db: Session, text: str) -> int:
    return db.execute(
        insert(DiagnosisInfo).values(diagnosis_text=text).returning(DiagnosisInfo.diagnosis_id)
    ).scalar_one()


def update_diagnosis_text(db: Session, diagnosis_id: int, text: str) -> None:
    db.execute(
        update(DiagnosisInfo)
        .where(DiagnosisInfo.diagnosis_id == diagnosis_id)
        .values(diagnosis_text=text)
    )


def insert_surgery_info(db: Session, surgery_type: str, surgery_date: date) -> int:
    return db.execute(
        insert(SurgeryInfo)
        .values(surgery_type=surgery_type, surgery_date=surgery_date)
        .returning(SurgeryInfo.surgery_id)
    ).scalar_one()


def update_surgery_info(
    db: Session,
    surgery_id: int,
    surgery_type: str | None,
    surgery_date: date | None,
) -> None:
    changes: Dict[str, Any] = {}
    if surgery_type is not None:
        changes["surgery_type"] = surgery_type
    if surgery_date is not None:
        changes["surgery_date"] = surgery_date
    if changes:
        db.execute(
            update(SurgeryInfo).where(SurgeryInfo.surgery_id == surgery_id).values(**changes)
        )


def remove_surgery_from_record(db: Session, record_id: int, surgery_id: int) -> None:
    # Detach first: the surgery row is still referenced until record_info lets go of it.
    db.execute(
        update(RecordInfo).where(RecordInfo.record_id == record_id).values(surgery_id=None)
    )
    db.execute(delete(SurgeryInfo).where(SurgeryInfo.surgery_id == surgery_id))


def locked_record_stmt(record_id: int):
    """Load a record row for update; concurrent mutations of it queue on the row lock."""
    return (
        select(RecordInfo)
        .where(RecordInfo.record_id == record_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def authorize_diagnosis_edit(
    role: Role,
    access_session: AccessCodeSession,
    supplied_code: str | None,
) -> None:
    if role is Role.DOCTOR:
        return
    if role is Role.CLINICIAN:
        verify_access_code(access_session, supplied_code)
        return
    if role in (Role.OWNER, Role.ADMIN):
        raise Forbidden("You are not allowed to edit the diagnosis.")
    raise Forbidden(f"Unrecognized role: {role!r}")


# -------------------------
# Workflows
# -------------------------
def create_record(db: Session, pet_id: int, payload: RecordCreate, role: Role) -> Dict[str, Any]:
    if role is Role.CLINICIAN and payload.diagnosis_text is not None:
        raise Forbidden("Clinicians cannot add a diagnosis when creating a record.")
    if payload.missing_fields():
        raise BadRequest("Missing required fields.")
    if (payload.surgery_type is None) != (payload.surgery_date is None):
        raise BadRequest("Surgery type and date are required.")

    with unit_of_work(db, CREATE_FAILED):
        if db.get(Pet, pet_id) is None:
            raise NotFound("Pet not found.")

        lab_id = None
        if payload.lab_description is not None:
            lab_id = lookup_or_create_lab(db, payload.lab_description)

        diagnosis_id = None
        if payload.diagnosis_text is not None:
            diagnosis_id = insert_diagnosis(db, payload.diagnosis_text)

        surgery_id = None
        if payload.surgery_type is not None:
            surgery_id = insert_surgery_info(db, payload.surgery_type, payload.surgery_date)

        record_id = db.execute(
            insert(RecordInfo)
            .values(
                pet_id=pet_id,
                **{name: getattr(payload, name) for name in PATCHABLE_COLUMNS},
                lab_id=lab_id,
                diagnosis_id=diagnosis_id,
                surgery_id=surgery_id,
            )
            .returning(RecordInfo.record_id)
        ).scalar_one()

        if lab_id is not None:
            link_record_lab(db, record_id, lab_id)

    logger.info("Created record %s for pet %s", record_id, pet_id)

    with read_guard(CREATE_FAILED):
        record = get_complete_record(db, record_id)
    if record is None:
        raise NotFound("Failed to retrieve the newly created record.")
    return record


def update_record(
    db: Session,
    record_id: int,
    patch: RecordPatch,
    role: Role,
    access_session: AccessCodeSession,
) -> Dict[str, Any]:
    """
    Merge ``patch`` over the stored record and persist it.

    Surgery follows the ``hadSurgery`` flag: true creates or updates the linked
    surgery row, false detaches and deletes it. Diagnosis text is created once
    and edited in place afterwards. Returns the re-read joined record.
    """
    supplied = patch.supplied

    with unit_of_work(db, UPDATE_FAILED):
        current = db.execute(locked_record_stmt(record_id)).scalar_one_or_none()
        if current is None:
            raise NotFound("Record not found.")

        # Validation: nothing below this block may fail for input reasons.
        if patch.diagnosis_text is not None:
            authorize_diagnosis_edit(role, access_session, patch.access_code)
        if "lab_description" in supplied and patch.lab_description is None:
            raise BadRequest("Invalid lab description.")
        if patch.had_surgery is True and current.surgery_id is None:
            if patch.surgery_type is None or patch.surgery_date is None:
                raise BadRequest("Surgery type and date are required.")

        values = {name: getattr(current, name) for name in MUTABLE_COLUMNS}
        for name in PATCHABLE_COLUMNS:
            if name in supplied and getattr(patch, name) is not None:
                values[name] = getattr(patch, name)

        if patch.diagnosis_text is not None:
            if current.diagnosis_id is None:
                values["diagnosis_id"] = insert_diagnosis(db, patch.diagnosis_text)
            else:
                update_diagnosis_text(db, current.diagnosis_id, patch.diagnosis_text)

        if patch.had_surgery is True:
            if current.surgery_id is not None:
                update_surgery_info(db, current.surgery_id, patch.surgery_type, patch.surgery_date)
            else:
                values["surgery_id"] = insert_surgery_info(
                    db, patch.surgery_type, patch.surgery_date
                )
        elif patch.had_surgery is False and current.surgery_id is not None:
            remove_surgery_from_record(db, record_id, current.surgery_id)
            values["surgery_id"] = None

        if patch.lab_description is not None:
            lab_id = lookup_or_create_lab(db, patch.lab_description)
            link_record_lab(db, record_id, lab_id)
            values["lab_id"] = lab_id

        db.execute(
            update(RecordInfo)
            .where(RecordInfo.record_id == record_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

    logger.info("Updated record %s (fields=%s)", record_id, sorted(supplied - {"access_code"}))

    with read_guard(UPDATE_FAILED):
        db.expire_all()
        record = get_complete_record(db, record_id)
    if record is None:
        raise NotFound("Record not found.")
    return record
