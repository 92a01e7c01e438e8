"""Pet report model.

A report is a Lost, Found or Reunited posting owned by one user. ``is_active``
is independent of ``status``: inactive reports never appear in public search
but stay reachable by id and from the owner's dashboard.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from findingsweetie.db.base import Base, TimestampMixin
from findingsweetie.models.pet_image import PetImage

if TYPE_CHECKING:
    from findingsweetie.models.user import User

PET_STATUSES = ("Lost", "Found", "Reunited")

STATUS_CHECK_SQL = "status IN ({})".format(", ".join(f"'{s}'" for s in PET_STATUSES))


class Pet(TimestampMixin, Base):
    __tablename__ = "pets"
    __table_args__ = (
        CheckConstraint(STATUS_CHECK_SQL, name="status"),
        Index("idx_pets_user_id", "user_id"),
        Index("idx_pets_status", "status"),
        Index("idx_pets_type", "pet_type"),
        Index("idx_pets_location", "last_seen_location"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False)
    pet_type: Mapped[str] = mapped_column(String(50), nullable=False)
    pet_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pet_breed: Mapped[str | None] = mapped_column(String(100), nullable=True)
    pet_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    additional_comments: Mapped[str | None] = mapped_column(Text, nullable=True)
    flag_chip: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("0"))
    image_url: Mapped[str | None] = mapped_column(String(500), nullable=True)  # legacy single image
    last_seen_location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default=text("1"))

    owner: Mapped["User"] = relationship(back_populates="pets")
    images: Mapped[list[PetImage]] = relationship(
        back_populates="pet",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=(PetImage.is_primary.desc(), PetImage.display_order, PetImage.id),
    )

    def __repr__(self) -> str:
        return f"<Pet id={self.id} status={self.status} active={self.is_active}>"


Index("idx_pets_created", Pet.created_at.desc())
