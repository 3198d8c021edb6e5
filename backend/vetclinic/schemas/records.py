"""Request payloads for visit records."""

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Columns every new record must carry.
REQUIRED_RECORD_FIELDS = (
    "record_date",
    "record_weight",
    "record_temp",
    "record_condition",
    "record_symptom",
    "record_recent_visit",
    "record_purchase",
    "record_purpose",
)


class _RecordFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    record_date: date | None = None
    record_weight: float | None = None
    record_temp: float | None = None
    record_condition: str | None = None
    record_symptom: str | None = None
    record_recent_visit: str | None = None
    record_purchase: str | None = None
    record_purpose: str | None = None
    record_lab_file: str | None = None

    lab_description: str | None = None
    diagnosis_text: str | None = None
    surgery_type: str | None = None
    surgery_date: date | None = None

    # HTML forms submit empty inputs as "", which means "not given".
    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RecordCreate(_RecordFields):
    """New record. Required columns are checked by the service, not by pydantic."""

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_RECORD_FIELDS if getattr(self, name) is None]


class RecordPatch(_RecordFields):
    """
    Partial update. Only fields present in the request body take part in the
    merge; use ``supplied`` rather than checking for ``None``.
    """

    access_code: str | None = Field(default=None, alias="accessCode")
    had_surgery: bool | None = Field(default=None, alias="hadSurgery")

    @property
    def supplied(self) -> set[str]:
        return set(self.model_fields_set)
