"""Module: diagnosis."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


class DiagnosisInfo(Base):
    __tablename__ = "diagnosis_info"

    diagnosis_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    diagnosis_text: Mapped[str] = mapped_column(Text, nullable=False)
