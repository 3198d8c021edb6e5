from datetime import date

import pytest

from vetclinic.core.errors import BadRequest
from vetclinic.services.age import PetAge, compute_age, validate_age


@pytest.mark.parametrize(
    "birthday, today, expected",
    [
        (date(2020, 1, 1), date(2025, 4, 1), PetAge(5, 3)),
        (date(2020, 1, 31), date(2020, 2, 29), PetAge(0, 1)),
        (date(2020, 1, 15), date(2020, 2, 14), PetAge(0, 0)),
        (date(2024, 4, 2), date(2025, 4, 1), PetAge(0, 11)),
        (date(2025, 4, 1), date(2025, 4, 1), PetAge(0, 0)),
    ],
)
def test_compute_age(birthday, today, expected):
    assert compute_age(birthday, today) == expected


def test_compute_age_rejects_future_birthday():
    with pytest.raises(BadRequest) as exc:
        compute_age(date(2026, 1, 1), date(2025, 4, 1))
    assert exc.value.message == "Birthday cannot be in the future."


def test_validate_age_mismatch_reports_computed_values():
    with pytest.raises(BadRequest) as exc:
        validate_age(date(2020, 1, 1), 3, 0, date(2025, 4, 1))

    assert exc.value.message == (
        "Age mismatch! The computed age based on birthday is 5 years and 3 months."
    )
    assert exc.value.status_code == 400


def test_validate_age_returns_computed_age_on_match():
    assert validate_age(date(2020, 1, 1), 5, 3, date(2025, 4, 1)) == PetAge(5, 3)


def test_validate_age_ignores_omitted_components():
    assert validate_age(date(2020, 1, 1), None, 3, date(2025, 4, 1)) == PetAge(5, 3)
    assert validate_age(date(2020, 1, 1), None, None, date(2025, 4, 1)) == PetAge(5, 3)

    with pytest.raises(BadRequest):
        validate_age(date(2020, 1, 1), None, 4, date(2025, 4, 1))
