import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from vetclinic.api.v1.routes.deps import (
    get_app_settings,
    get_bearer_token,
    get_clock,
    get_current_user,
    get_db,
)
from vetclinic.core.config import Settings
from vetclinic.core.errors import Conflict
from vetclinic.core.roles import Role
from vetclinic.core.security import (
    hash_password,
    issue_token,
    revoke_token,
    revoke_tokens_for,
    verify_password,
)
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.pet import Pet, Species
from vetclinic.db.models.user import User
from vetclinic.db.transaction import unit_of_work
from vetclinic.schemas.accounts import (
    MIN_PASSWORD_LENGTH,
    EmployeeSignupComplete,
    EmployeeSignupRequest,
    UserPayload,
    as_user_payload,
)
from vetclinic.services import accounts as account_service
from vetclinic.services.age import compute_age
from vetclinic.services.mailer import send_email

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    email: str
    password: str


class PetCreatePayload(BaseModel):
    pet_name: str = Field(min_length=1)
    species: str | None = None
    pet_gender: str | None = None
    pet_breed: str | None = None
    pet_color: str | None = None
    pet_birthday: date | None = None


class OwnerRegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    contact: str | None = None
    address: str | None = None
    alt_person: str | None = None
    alt_contact: str | None = None
    pet: PetCreatePayload | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPayload


@router.post("/register-owner", response_model=UserPayload, status_code=201)
def register_owner(
    payload: OwnerRegisterRequest,
    db: Session = Depends(get_db),
    today=Depends(get_clock),
):
    normalized_email = account_service.normalize_email(payload.email)
    if account_service.email_taken(db, normalized_email):
        raise Conflict(account_service.EMAIL_TAKEN)

    with unit_of_work(db, "Server error while registering owner."):
        user = User(
            user_email=normalized_email,
            user_password=hash_password(payload.password),
            user_role=Role.OWNER.value,
            user_firstname=payload.first_name.strip(),
            user_lastname=payload.last_name.strip(),
            user_contact=payload.contact,
        )
        db.add(user)
        account_service.flush_unique(db)

        owner = Owner(
            user_id=user.user_id,
            owner_address=payload.address,
            owner_alt_person1=payload.alt_person,
            owner_alt_contact1=payload.alt_contact,
        )
        db.add(owner)
        db.flush()

        if payload.pet is not None:
            species_id = None
            if payload.pet.species:
                species_id = db.execute(
                    select(Species.spec_id).where(Species.spec_description == payload.pet.species)
                ).scalar_one_or_none()
                if species_id is None:
                    raise HTTPException(status_code=400, detail="Invalid species")

            age = compute_age(payload.pet.pet_birthday, today()) if payload.pet.pet_birthday else None
            db.add(
                Pet(
                    owner_id=owner.owner_id,
                    species_id=species_id,
                    pet_name=payload.pet.pet_name.strip(),
                    pet_gender=payload.pet.pet_gender,
                    pet_breed=payload.pet.pet_breed,
                    pet_color=payload.pet.pet_color,
                    pet_birthday=payload.pet.pet_birthday,
                    pet_age_year=age.years if age else None,
                    pet_age_month=age.months if age else None,
                )
            )

    db.refresh(user)
    logger.info("Registered owner user %s", user.user_id)
    return as_user_payload(user)


# Staff signup: the request mails a signed token to the clinic owner for approval.
@router.post("/signup/employee", status_code=202)
def signup_employee(
    payload: EmployeeSignupRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    account_service.request_employee_signup(
        db,
        payload,
        settings,
        send=lambda to, subject, body: send_email(settings, to, subject, body),
    )
    return {"message": "Employee signup request sent to the clinic owner for approval."}


@router.post("/signup/employee-verify", response_model=UserPayload, status_code=201)
def signup_employee_verify(
    payload: EmployeeSignupComplete,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    user = account_service.complete_employee_signup(db, payload, settings)
    return as_user_payload(user)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    normalized_email = account_service.normalize_email(payload.email)
    user = db.execute(
        select(User).where(func.lower(User.user_email) == normalized_email)
    ).scalar_one_or_none()

    if not user or not verify_password(payload.password, user.user_password):
        logger.info("Failed login attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return LoginResponse(
        access_token=issue_token(user.user_id),
        user=as_user_payload(user),
    )


@router.post("/logout")
def logout(
    request: Request,
    token: str = Depends(get_bearer_token),
    user: User = Depends(get_current_user),
):
    revoke_token(token)
    # Drops any diagnosis access code held by this browser session too.
    if "session" in request.scope:
        request.session.clear()
    logger.info("User %s logged out", user.user_id)
    return {"message": "Logout successful."}


@router.get("/me", response_model=UserPayload)
def me(user: User = Depends(get_current_user)):
    return as_user_payload(user)


@router.post("/change-password")
def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not verify_password(payload.current_password, user.user_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    with unit_of_work(db, "Server error while changing password."):
        user.user_password = hash_password(payload.new_password)

    # Existing sessions were authenticated with the old password.
    revoke_tokens_for(user.user_id)
    return {"message": "Password changed successfully. Please log in again."}
