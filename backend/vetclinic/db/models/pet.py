"""Module: pet."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, SmallInteger, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base

PET_ACTIVE = 1
PET_ARCHIVED = 0


class Species(Base):
    __tablename__ = "species"

    spec_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    spec_description: Mapped[str] = mapped_column(String, unique=True, nullable=False)


# Core pet profile used by visit records and vaccinations.
class Pet(Base):
    __tablename__ = "pet_info"

    # Primary Key
    pet_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("owner.owner_id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    species_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("species.spec_id", ondelete="SET NULL"),
        nullable=True,
    )

    # Basic Info
    pet_name: Mapped[str] = mapped_column(String, nullable=False)
    pet_gender: Mapped[str | None] = mapped_column(String, nullable=True)
    pet_breed: Mapped[str | None] = mapped_column(String, nullable=True)
    pet_color: Mapped[str | None] = mapped_column(String, nullable=True)

    # Age is derived from birthday and stored alongside it; both are written together.
    pet_birthday: Mapped[date | None] = mapped_column(Date, nullable=True)
    pet_age_year: Mapped[int | None] = mapped_column(Integer, nullable=True)
    pet_age_month: Mapped[int | None] = mapped_column(Integer, nullable=True)

    pet_status: Mapped[int] = mapped_column(SmallInteger, nullable=False, default=PET_ACTIVE)

    # Audit
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
