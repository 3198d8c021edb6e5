"""Module: accounts.

Staff accounts are created in two steps. A signup request becomes a signed,
time-limited token that is emailed to the clinic owner. The owner hands it to
the new employee, who completes signup by choosing a password. Nothing is
stored until that second step.
"""

import logging
from typing import Any, Callable, Dict

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from vetclinic.core.config import Settings
from vetclinic.core.errors import BadRequest, Conflict, NotFound, ServerError
from vetclinic.core.roles import Role
from vetclinic.core.security import hash_password
from vetclinic.db.models.owner import Owner
from vetclinic.db.models.user import User
from vetclinic.db.transaction import read_guard, unit_of_work
from vetclinic.schemas.accounts import (
    EmployeeProfilePatch,
    EmployeeSignupComplete,
    EmployeeSignupRequest,
    OwnerProfilePatch,
)
from vetclinic.services.mailer import EmailDeliveryError

logger = logging.getLogger(__name__)

EMAIL_TAKEN = "Email already registered"
EMPLOYEE_ROLES = (Role.DOCTOR, Role.CLINICIAN)
EMPLOYEE_SIGNUP_SALT = "employee-signup"
EMPLOYEE_SIGNUP_SUBJECT = "Employee Signup Verification"
SIGNUP_FAILED = "Server error while completing employee signup."
PROFILE_UPDATE_FAILED = "Server error while updating profile."
FETCH_FAILED = "Server error while fetching profile."

Sender = Callable[[str, str, str], None]


def normalize_email(value: str) -> str:
    return value.strip().lower()


def email_taken(db: Session, email: str, exclude_user_id: int | None = None) -> bool:
    stmt = select(User.user_id).where(func.lower(User.user_email) == normalize_email(email))
    if exclude_user_id is not None:
        stmt = stmt.where(User.user_id != exclude_user_id)
    with read_guard(FETCH_FAILED):
        return db.execute(stmt).first() is not None


def flush_unique(db: Session) -> None:
    """
    Flush pending user rows inside an open unit of work.

    ``email_taken`` runs before the write, so two concurrent requests can both
    pass it; the loser hits the unique index here and gets a 409.
    """
    try:
        db.flush()
    except IntegrityError as e:
        logger.info("Unique constraint rejected account write: %s", e.orig)
        raise Conflict(EMAIL_TAKEN) from e


# -------------------------
# Employee signup
# -------------------------
def parse_employee_role(value: str) -> Role:
    try:
        role = Role.parse(value)
    except ValueError:
        raise BadRequest("Invalid employee role.")
    if role not in EMPLOYEE_ROLES:
        raise BadRequest("Invalid employee role.")
    return role


def _signup_serializer(settings: Settings) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(settings.session_secret, salt=EMPLOYEE_SIGNUP_SALT)


def request_employee_signup(
    db: Session,
    payload: EmployeeSignupRequest,
    settings: Settings,
    send: Sender,
) -> None:
    role = parse_employee_role(payload.role)
    email = normalize_email(payload.email)
    if email_taken(db, email):
        raise Conflict(EMAIL_TAKEN)

    recipient = settings.clinic_owner_email
    if not recipient:
        raise ServerError("Clinic owner email is not set.")

    token = _signup_serializer(settings).dumps(
        {
            "email": email,
            "role": role.value,
            "first_name": payload.first_name,
            "last_name": payload.last_name,
            "contact": payload.contact,
        }
    )
    hours = settings.employee_signup_max_age_seconds // 3600
    body = (
        f"{payload.first_name} {payload.last_name} <{email}> asked to join the clinic "
        f"as a {role.value}.\n\n"
        f"Verification token: {token}\n\n"
        f"Forward this token to them only if you approve. It is valid for {hours} hours."
    )

    try:
        send(recipient, EMPLOYEE_SIGNUP_SUBJECT, body)
    except EmailDeliveryError as e:
        logger.error("Employee signup email could not be delivered: %s", e)
        raise ServerError("Server error while requesting employee signup.", original_error=e) from e

    logger.info("Employee signup requested (role=%s)", role.value)


def complete_employee_signup(
    db: Session,
    payload: EmployeeSignupComplete,
    settings: Settings,
) -> User:
    try:
        data = _signup_serializer(settings).loads(
            payload.token, max_age=settings.employee_signup_max_age_seconds
        )
    except SignatureExpired as e:
        raise BadRequest("Verification token has expired.") from e
    except BadSignature as e:
        raise BadRequest("Invalid verification token.") from e

    role = parse_employee_role(data["role"])
    if email_taken(db, data["email"]):
        raise Conflict(EMAIL_TAKEN)

    with unit_of_work(db, SIGNUP_FAILED):
        user = User(
            user_email=data["email"],
            user_password=hash_password(payload.password),
            user_role=role.value,
            user_firstname=data["first_name"],
            user_lastname=data["last_name"],
            user_contact=data.get("contact"),
        )
        db.add(user)
        flush_unique(db)

    logger.info("Employee user %s created (role=%s)", user.user_id, role.value)
    return user


# -------------------------
# Profiles
# -------------------------
USER_PROFILE_COLUMNS = (
    ("first_name", "user_firstname"),
    ("last_name", "user_lastname"),
    ("contact", "user_contact"),
)

OWNER_PROFILE_COLUMNS = (
    ("address", "owner_address"),
    ("alt_person", "owner_alt_person1"),
    ("alt_contact", "owner_alt_contact1"),
)


def _apply(target: Any, patch, columns) -> None:
    for field, column in columns:
        value = getattr(patch, field)
        if field in patch.model_fields_set and value is not None:
            setattr(target, column, value)


def _apply_user_fields(db: Session, user: User, patch: EmployeeProfilePatch) -> None:
    if "email" in patch.model_fields_set and patch.email:
        email = normalize_email(patch.email)
        if email_taken(db, email, exclude_user_id=user.user_id):
            raise Conflict(EMAIL_TAKEN)
        user.user_email = email
    _apply(user, patch, USER_PROFILE_COLUMNS)


def update_employee_profile(db: Session, user: User, patch: EmployeeProfilePatch) -> User:
    with unit_of_work(db, PROFILE_UPDATE_FAILED):
        _apply_user_fields(db, user, patch)
        flush_unique(db)

    logger.info("Updated employee profile %s", user.user_id)
    return user


def _load_owner(db: Session, user_id: int) -> Owner:
    with read_guard(FETCH_FAILED):
        owner = db.execute(select(Owner).where(Owner.user_id == user_id)).scalar_one_or_none()
    if owner is None:
        raise NotFound("Owner profile not found.")
    return owner


def _owner_profile(user: User, owner: Owner) -> Dict[str, Any]:
    return {
        "user_id": user.user_id,
        "owner_id": owner.owner_id,
        "email": user.user_email,
        "first_name": user.user_firstname,
        "last_name": user.user_lastname,
        "contact": user.user_contact,
        "address": owner.owner_address,
        "alt_person": owner.owner_alt_person1,
        "alt_contact": owner.owner_alt_contact1,
    }


def get_owner_profile(db: Session, user: User) -> Dict[str, Any]:
    return _owner_profile(user, _load_owner(db, user.user_id))


def update_owner_profile(db: Session, user: User, patch: OwnerProfilePatch) -> Dict[str, Any]:
    owner = _load_owner(db, user.user_id)

    with unit_of_work(db, PROFILE_UPDATE_FAILED):
        _apply_user_fields(db, user, patch)
        _apply(owner, patch, OWNER_PROFILE_COLUMNS)
        flush_unique(db)

    logger.info("Updated owner profile %s", user.user_id)
    return _owner_profile(user, owner)
