"""Module: vaccination."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


# Vaccine catalogue; records reference it by vax_id.
class Vaccine(Base):
    __tablename__ = "vaccines"

    vax_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vax_type: Mapped[str] = mapped_column(String, unique=True, nullable=False)


class ImmunizationRecord(Base):
    __tablename__ = "immunization_record"

    imm_rec_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    pet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pet_info.pet_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    vax_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("vaccines.vax_id"),
        nullable=False
    )

    imm_rec_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    imm_rec_date: Mapped[date] = mapped_column(Date, nullable=False)
