"""Request payloads for pet profiles."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class PetProfilePatch(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    pet_name: str | None = Field(default=None, min_length=1)
    pet_gender: str | None = None
    pet_breed: str | None = None
    pet_color: str | None = None
    species: str | None = None
    pet_birthday: date | None = None
    # Out-of-range ages are reported as an age mismatch, not a schema error.
    pet_age_year: int | None = None
    pet_age_month: int | None = None
