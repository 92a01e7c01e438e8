"""Pet image model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from findingsweetie.db.base import Base

if TYPE_CHECKING:
    from findingsweetie.models.pet import Pet


class PetImage(Base):
    __tablename__ = "pet_images"
    __table_args__ = (Index("idx_pet_images_pet_id", "pet_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    pet_id: Mapped[int] = mapped_column(ForeignKey("pets.id", ondelete="CASCADE"), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    is_primary: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=text("0"))
    display_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default=text("0"))

    pet: Mapped["Pet"] = relationship(back_populates="images")
