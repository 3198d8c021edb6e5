"""Request and response payloads for user accounts."""

from pydantic import BaseModel, ConfigDict, Field

from vetclinic.core.roles import Role
from vetclinic.db.models.user import User

MIN_PASSWORD_LENGTH = 8


class UserPayload(BaseModel):
    user_id: int
    email: str
    first_name: str
    last_name: str
    contact: str | None = None
    role: str


def as_user_payload(user: User) -> UserPayload:
    return UserPayload(
        user_id=user.user_id,
        email=user.user_email,
        first_name=user.user_firstname,
        last_name=user.user_lastname,
        contact=user.user_contact,
        role=(user.user_role or Role.OWNER.value).lower(),
    )


class EmployeeSignupRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = Field(min_length=3)
    role: str
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    contact: str | None = None


class EmployeeSignupComplete(BaseModel):
    token: str = Field(min_length=1)
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)


class EmployeeProfilePatch(BaseModel):
    """Partial profile update; omitted fields keep their stored values."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = Field(default=None, min_length=3)
    contact: str | None = None


class OwnerProfilePatch(EmployeeProfilePatch):
    address: str | None = None
    alt_person: str | None = None
    alt_contact: str | None = None
