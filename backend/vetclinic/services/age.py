"""Module: age.

Pet age is stored as (years, months) next to the birthday. Both values are
always derived here from the birthday and a single reading of the clock, so the
number that is validated is the number that gets written.
"""

from datetime import date
from typing import Callable, NamedTuple

from dateutil.relativedelta import relativedelta

from vetclinic.core.errors import BadRequest

Clock = Callable[[], date]


class PetAge(NamedTuple):
    years: int
    months: int


def compute_age(birthday: date, today: date) -> PetAge:
    """Whole years elapsed since ``birthday`` plus the whole months left over."""
    if birthday > today:
        raise BadRequest("Birthday cannot be in the future.")
    delta = relativedelta(today, birthday)
    return PetAge(years=delta.years, months=delta.months)


def validate_age(
    birthday: date,
    years: int | None,
    months: int | None,
    today: date,
) -> PetAge:
    """
    Check a submitted age against the one computed from ``birthday``.

    Omitted components are not compared. Returns the computed age, which is
    what callers must persist.
    """
    computed = compute_age(birthday, today)
    if (years is not None and years != computed.years) or (
        months is not None and months != computed.months
    ):
        raise BadRequest(
            "Age mismatch! The computed age based on birthday is "
            f"{computed.years} years and {computed.months} months."
        )
    return computed
