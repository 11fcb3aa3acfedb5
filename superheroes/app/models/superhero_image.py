"""
SuperheroImage ORM model.
One row per stored object; `url` is derived from the object's storage key.
"""
from __future__ import annotations

from sqlalchemy import ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, CreatedAtMixin


class SuperheroImage(CreatedAtMixin, Base):
    __tablename__ = "superhero_images"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    url: Mapped[str] = mapped_column(String(2000), nullable=False, unique=True)
    # Display position. Neither unique nor contiguous; ties sort by id.
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    superhero_id: Mapped[int] = mapped_column(
        ForeignKey("superheroes.id", ondelete="CASCADE"),
        nullable=False,
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    superhero: Mapped["Superhero"] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "Superhero",
        back_populates="images",
    )

    __table_args__ = (
        Index("ix_superhero_images_superhero_id_order", "superhero_id", "order"),
    )

    def __repr__(self) -> str:
        return f"<SuperheroImage id={self.id} superhero_id={self.superhero_id} order={self.order}>"
