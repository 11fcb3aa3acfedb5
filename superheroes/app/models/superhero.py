"""
Superhero ORM model.
Owns an ordered collection of images; deleting a superhero cascades to them.
"""
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, CreatedAtMixin


class Superhero(CreatedAtMixin, Base):
    __tablename__ = "superheroes"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    nickname: Mapped[str] = mapped_column(String(100), nullable=False)
    real_name: Mapped[str] = mapped_column(String(200), nullable=False)
    origin_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    superpowers: Mapped[str | None] = mapped_column(Text, nullable=True)
    catch_phrase: Mapped[str | None] = mapped_column(String(500), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    # ── Relationships ─────────────────────────────────────────────────────────
    images: Mapped[list["SuperheroImage"]] = relationship(  # type: ignore[name-defined]  # noqa: F821
        "SuperheroImage",
        back_populates="superhero",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[SuperheroImage.order, SuperheroImage.id]",
    )

    __table_args__ = (
        Index("ix_superheroes_nickname", "nickname"),
    )

    def __repr__(self) -> str:
        return f"<Superhero id={self.id} nickname={self.nickname!r}>"
