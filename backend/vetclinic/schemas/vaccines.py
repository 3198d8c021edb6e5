from datetime import date

from pydantic import BaseModel, ConfigDict


class VaccinationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    vax_type: str | None = None
    imm_rec_quantity: int | None = None
    imm_rec_date: date | None = None
