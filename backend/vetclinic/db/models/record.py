"""Module: record."""

from datetime import date

from sqlalchemy import Date, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


# One clinic visit's medical data for a pet.
# Diagnosis, surgery and lab details live in their own tables and are linked by id.
class RecordInfo(Base):
    __tablename__ = "record_info"

    record_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    pet_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("pet_info.pet_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    record_date: Mapped[date] = mapped_column(Date, nullable=False)
    record_weight: Mapped[float] = mapped_column(Numeric(6, 2, asdecimal=False), nullable=False)
    record_temp: Mapped[float] = mapped_column(Numeric(4, 1, asdecimal=False), nullable=False)
    record_condition: Mapped[str] = mapped_column(String, nullable=False)
    record_symptom: Mapped[str] = mapped_column(String, nullable=False)
    record_recent_visit: Mapped[str] = mapped_column(String, nullable=False)
    record_purchase: Mapped[str] = mapped_column(String, nullable=False)
    record_purpose: Mapped[str] = mapped_column(String, nullable=False)
    record_lab_file: Mapped[str | None] = mapped_column(String, nullable=True)

    lab_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("laboratories.lab_id", ondelete="SET NULL"),
        nullable=True,
    )
    diagnosis_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("diagnosis_info.diagnosis_id", ondelete="SET NULL"),
        nullable=True,
    )
    # Set only while the visit involved surgery; the surgery row is owned by this record.
    surgery_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("surgery_info.surgery_id"),
        nullable=True,
    )
