"""Module: records."""

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from vetclinic.api.v1.routes.deps import (
    get_access_session,
    get_app_settings,
    get_current_user,
    get_db,
    require_roles,
)
from vetclinic.core.config import Settings
from vetclinic.core.roles import CLINICAL_ROLES, Role
from vetclinic.schemas.records import RecordCreate, RecordPatch
from vetclinic.services import records as record_service
from vetclinic.services.access_code import AccessCodeSession, issue_access_code
from vetclinic.services.mailer import send_email

router = APIRouter()


# Endpoint: all visit records for one pet, newest first.
@router.get("", summary="List visit records for a pet", dependencies=[Depends(get_current_user)])
def get_visit_records(
    pet_id: int | None = Query(default=None),
    db: Session = Depends(get_db),
):
    return record_service.list_visit_records(db, pet_id)


@router.get("/search", summary="Search a pet's records by date range", dependencies=[Depends(get_current_user)])
def search_records(
    pet_id: int | None = Query(default=None),
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    sort_order: str = Query(default="DESC"),
    db: Session = Depends(get_db),
):
    return record_service.search_records(db, pet_id, start_date, end_date, sort_order)


# Endpoint: emails a diagnosis access code to the clinic owner for this session.
@router.get("/request-access-code", summary="Request a diagnosis access code")
def request_diagnosis_access_code(
    access_session: AccessCodeSession = Depends(get_access_session),
    settings: Settings = Depends(get_app_settings),
    _role: Role = Depends(require_roles(Role.CLINICIAN)),
):
    code = issue_access_code(
        access_session,
        settings,
        lambda to, subject, body: send_email(settings, to, subject, body),
    )
    return {
        "message": "Access code sent to the clinic owner.",
        "accessCode": code,
    }


@router.post("/pets/{pet_id}", status_code=201, summary="Create a visit record")
def add_record(
    pet_id: int,
    payload: RecordCreate,
    db: Session = Depends(get_db),
    role: Role = Depends(require_roles(*CLINICAL_ROLES)),
):
    return record_service.create_record(db, pet_id, payload, role)


@router.api_route("/{record_id}", methods=["PATCH", "PUT"], summary="Update a visit record")
def update_record(
    record_id: int,
    patch: RecordPatch,
    db: Session = Depends(get_db),
    role: Role = Depends(require_roles(*CLINICAL_ROLES)),
    access_session: AccessCodeSession = Depends(get_access_session),
):
    record = record_service.update_record(db, record_id, patch, role, access_session)
    return {"message": "Medical record updated successfully!", **record}
