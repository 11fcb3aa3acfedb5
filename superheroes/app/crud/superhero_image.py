"""
SuperheroImage CRUD operations.
Every query that takes image ids is scoped to the owning superhero.
"""
from __future__ import annotations

from collections.abc import Collection

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.crud.base import CRUDBase
from app.models.superhero_image import SuperheroImage
from app.schemas.superhero_image import SuperheroImageRead


class CRUDSuperheroImage(CRUDBase[SuperheroImage, SuperheroImageRead, SuperheroImageRead]):

    async def create_image(
        self,
        db: AsyncSession,
        *,
        superhero_id: int,
        url: str,
        order: int,
    ) -> SuperheroImage:
        image = SuperheroImage(superhero_id=superhero_id, url=url, order=order)
        db.add(image)
        await db.flush()
        await db.refresh(image)
        return image

    async def list_owned(
        self,
        db: AsyncSession,
        *,
        superhero_id: int,
        image_ids: Collection[int],
    ) -> list[SuperheroImage]:
        """Return the images among image_ids that belong to superhero_id."""
        if not image_ids:
            return []
        result = await db.execute(
            select(SuperheroImage)
            .where(
                SuperheroImage.id.in_(image_ids),
                SuperheroImage.superhero_id == superhero_id,
            )
            .order_by(SuperheroImage.order, SuperheroImage.id)
        )
        return list(result.scalars().all())

    async def remove_many(
        self,
        db: AsyncSession,
        *,
        superhero_id: int,
        image_ids: Collection[int],
    ) -> int:
        """Set-delete images owned by superhero_id. Returns the number of rows removed."""
        if not image_ids:
            return 0
        result = await db.execute(
            delete(SuperheroImage)
            .where(
                SuperheroImage.id.in_(image_ids),
                SuperheroImage.superhero_id == superhero_id,
            )
            .execution_options(synchronize_session="fetch")
        )
        await db.flush()
        return result.rowcount or 0

    async def update_order(
        self, db: AsyncSession, *, image: SuperheroImage, order: int
    ) -> SuperheroImage:
        return await self.update(db, db_obj=image, obj_in={"order": order})

    async def max_order(self, db: AsyncSession, *, superhero_id: int) -> int | None:
        """Highest order value among a superhero's images, or None without images."""
        result = await db.execute(
            select(func.max(SuperheroImage.order)).where(
                SuperheroImage.superhero_id == superhero_id
            )
        )
        return result.scalar_one_or_none()


crud_superhero_image = CRUDSuperheroImage(SuperheroImage)
