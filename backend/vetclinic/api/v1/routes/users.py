"""Module: users."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from vetclinic.api.v1.routes.deps import get_current_user, get_db, require_roles
from vetclinic.core.roles import Role
from vetclinic.db.models.user import User
from vetclinic.schemas.accounts import EmployeeProfilePatch, OwnerProfilePatch, as_user_payload
from vetclinic.services import accounts as account_service

router = APIRouter()

employees = Depends(require_roles(Role.DOCTOR, Role.CLINICIAN, Role.ADMIN))
pet_owners = Depends(require_roles(Role.OWNER))


@router.put("/update-employee-profile", summary="Update own staff profile", dependencies=[employees])
def update_employee_profile(
    payload: EmployeeProfilePatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user = account_service.update_employee_profile(db, user, payload)
    return {
        "message": "Employee profile updated successfully!",
        "user": as_user_payload(user),
    }


@router.get("/petowner-profile", summary="Get own owner profile", dependencies=[pet_owners])
def get_petowner_profile(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return account_service.get_owner_profile(db, user)


@router.put("/update-petowner-profile", summary="Update own owner profile", dependencies=[pet_owners])
def update_petowner_profile(
    payload: OwnerProfilePatch,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = account_service.update_owner_profile(db, user, payload)
    return {"message": "Pet owner profile updated successfully!", "profile": profile}
