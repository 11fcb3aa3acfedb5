"""
Superhero CRUD operations.
Extends CRUDBase with image-hydrated reads.
"""
from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.interfaces import LoaderOption

from app.crud.base import CRUDBase
from app.models.superhero import Superhero
from app.models.superhero_image import SuperheroImage
from app.schemas.superhero import SuperheroCreate, SuperheroUpdate


def _images_loader(images_limit: int | None) -> LoaderOption:
    """
    Eager-load images sorted by (order, id).
    With images_limit, only the first N images of each superhero are loaded.
    """
    if images_limit is None:
        return selectinload(Superhero.images)

    ranked = select(
        SuperheroImage.id,
        func.row_number()
        .over(
            partition_by=SuperheroImage.superhero_id,
            order_by=(SuperheroImage.order, SuperheroImage.id),
        )
        .label("position"),
    ).subquery()
    first_ids = select(ranked.c.id).where(ranked.c.position <= images_limit)
    return selectinload(Superhero.images.and_(SuperheroImage.id.in_(first_ids)))


class CRUDSuperhero(CRUDBase[Superhero, SuperheroCreate, SuperheroUpdate]):

    async def get_with_images(
        self,
        db: AsyncSession,
        superhero_id: int,
        *,
        images_limit: int | None = None,
    ) -> Superhero | None:
        """Fetch a superhero with its images freshly loaded, lowest order first."""
        result = await db.execute(
            select(Superhero)
            .options(_images_loader(images_limit))
            .where(Superhero.id == superhero_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_with_images(
        self,
        db: AsyncSession,
        *,
        skip: int = 0,
        limit: int = 100,
        images_limit: int | None = 1,
    ) -> tuple[list[Superhero], int]:
        """Return (superheroes, total) ordered by id, each with its first N images."""
        total = await self.get_count(db)
        result = await db.execute(
            select(Superhero)
            .options(_images_loader(images_limit))
            .order_by(Superhero.id)
            .offset(skip)
            .limit(limit)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all()), total


crud_superhero = CRUDSuperhero(Superhero)
