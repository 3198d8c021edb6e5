"""Module: owner."""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from vetclinic.db.base import Base


# Pet-owner profile attached to a users row with role "owner".
class Owner(Base):
    __tablename__ = "owner"

    owner_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.user_id", ondelete="CASCADE"),
        unique=True,
        nullable=False
    )
    owner_address: Mapped[str | None] = mapped_column(String, nullable=True)
    owner_alt_person1: Mapped[str | None] = mapped_column(String, nullable=True)
    owner_alt_contact1: Mapped[str | None] = mapped_column(String, nullable=True)
