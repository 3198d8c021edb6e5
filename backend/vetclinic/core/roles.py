"""Module: roles."""

import enum


class Role(str, enum.Enum):
    """Closed set of account roles stored in ``users.user_role``."""

    OWNER = "owner"
    DOCTOR = "doctor"
    CLINICIAN = "clinician"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        """Map a stored role string to a Role; unknown values raise ValueError."""
        return cls((value or "").strip().lower())


# Staff roles allowed to write medical and vaccination records.
CLINICAL_ROLES = (Role.DOCTOR, Role.CLINICIAN)
