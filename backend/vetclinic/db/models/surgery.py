"""Module: surgery."""

from datetime import date

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


class SurgeryInfo(Base):
    __tablename__ = "surgery_info"

    surgery_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    surgery_type: Mapped[str] = mapped_column(String, nullable=False)
    surgery_date: Mapped[date] = mapped_column(Date, nullable=False)
