"""Module: laboratory."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


# Named lab test types, deduplicated by description.
class Laboratory(Base):
    __tablename__ = "laboratories"

    lab_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    lab_description: Mapped[str] = mapped_column(String, unique=True, nullable=False)


# Record -> lab link; one row per record.
class MatchRecordLab(Base):
    __tablename__ = "match_record_lab"

    record_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("record_info.record_id", ondelete="CASCADE"),
        primary_key=True,
    )
    lab_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("laboratories.lab_id", ondelete="CASCADE"),
        nullable=False,
    )
