"""
Superhero business logic service.
Sequences record changes with image uploads, removals and reordering.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    NotFoundException,
    StorageNotConfiguredException,
    ValidationException,
)
from app.crud.superhero import crud_superhero
from app.crud.superhero_image import crud_superhero_image
from app.db.session import metadata_errors
from app.models.superhero import Superhero
from app.models.superhero_image import SuperheroImage
from app.schemas.superhero import SuperheroCreate, SuperheroUpdate
from app.schemas.superhero_image import ImageOrder
from app.services.image_service import image_service
from app.services.object_storage import ObjectStore
from app.services.upload_guard import (
    ImagePayload,
    assert_batch_size,
    assert_within_limit,
)

logger = logging.getLogger(__name__)


class SuperheroService:

    async def get_superhero(self, db: AsyncSession, *, superhero_id: int) -> Superhero:
        """Fetch a superhero with all images, lowest order first."""
        with metadata_errors("superhero read"):
            superhero = await crud_superhero.get_with_images(db, superhero_id)
        if superhero is None:
            raise NotFoundException("Superhero", superhero_id)
        return superhero

    async def list_superheroes(
        self, db: AsyncSession, *, page: int, size: int
    ) -> tuple[list[Superhero], int]:
        """List superheroes, each carrying only its first image."""
        with metadata_errors("superhero list"):
            return await crud_superhero.list_with_images(
                db, skip=(page - 1) * size, limit=size, images_limit=1
            )

    async def create_superhero(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_in: SuperheroCreate,
        files: Sequence[ImagePayload] = (),
    ) -> Superhero:
        """
        Create a superhero, then upload its images numbered from 0.
        Files are validated before the record exists.
        """
        self._validate_batch(store, files)

        with metadata_errors("superhero create"):
            superhero = await crud_superhero.create(db, obj_in=superhero_in)
            await db.commit()

        if files:
            await image_service.write_images(
                db, store, superhero_id=superhero.id, files=files, start_order=0
            )

        logger.info("Created superhero id=%s with %d image(s)", superhero.id, len(files))
        return await self.get_superhero(db, superhero_id=superhero.id)

    async def append_images(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_id: int,
        files: Sequence[ImagePayload],
    ) -> list[SuperheroImage]:
        """Upload more images after the superhero's current last one."""
        if not files:
            raise ValidationException("No files uploaded")
        self._validate_batch(store, files)
        await self._require(db, superhero_id)

        return await image_service.write_images(
            db,
            store,
            superhero_id=superhero_id,
            files=files,
            start_order=await self._next_order(db, superhero_id),
        )

    async def update_superhero(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_id: int,
        superhero_in: SuperheroUpdate | None = None,
        remove_image_ids: Sequence[int] = (),
        image_orders: Sequence[ImageOrder] = (),
        files: Sequence[ImagePayload] = (),
    ) -> Superhero:
        """
        Apply image removals, reordering, field changes and new uploads.

        All input is validated first, so an ownership mismatch or an oversized
        file leaves the superhero untouched. Then, in order: removals,
        reordering, field changes, uploads appended after the last image.
        """
        superhero = await self._require(db, superhero_id)

        if remove_image_ids:
            await image_service.find_owned(
                db, superhero_id=superhero_id, image_ids=remove_image_ids, strict=True
            )
        if image_orders:
            await image_service.find_owned(
                db,
                superhero_id=superhero_id,
                image_ids=[item.id for item in image_orders],
                strict=True,
            )
            conflicting = set(remove_image_ids) & {item.id for item in image_orders}
            if conflicting:
                raise ValidationException(
                    "Images cannot be removed and reordered in the same request: "
                    + ", ".join(str(i) for i in sorted(conflicting))
                )
        self._validate_batch(store, files)

        if remove_image_ids:
            await image_service.remove_images(
                db, store, superhero_id=superhero_id, image_ids=remove_image_ids, strict=True
            )
            # Bulk delete leaves removed rows in a loaded collection.
            db.expire(superhero, ["images"])
        if image_orders:
            await image_service.apply_order(
                db, superhero_id=superhero_id, assignments=image_orders
            )

        if superhero_in is not None:
            with metadata_errors("superhero update"):
                await crud_superhero.update(db, db_obj=superhero, obj_in=superhero_in)
                await db.commit()

        if files:
            await image_service.write_images(
                db,
                store,
                superhero_id=superhero_id,
                files=files,
                start_order=await self._next_order(db, superhero_id),
            )

        return await self.get_superhero(db, superhero_id=superhero_id)

    async def delete_superhero(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_id: int,
    ) -> None:
        """
        Delete every stored image object, then the superhero and its image rows.
        If an object delete fails nothing is removed from the database.
        """
        superhero = await self.get_superhero(db, superhero_id=superhero_id)

        await image_service.delete_objects(store, superhero.images)

        with metadata_errors("superhero delete"):
            await crud_superhero.remove(db, db_obj=superhero)
            await db.commit()

        logger.info(
            "Deleted superhero id=%s and %d image(s)", superhero_id, len(superhero.images)
        )

    # ── Private helpers ───────────────────────────────────────────────────────

    def _validate_batch(self, store: ObjectStore, files: Sequence[ImagePayload]) -> None:
        if not files:
            return
        if not store.public_base_url:
            raise StorageNotConfiguredException("STORAGE_PUBLIC_URL")
        assert_batch_size(files, settings.MAX_IMAGES_PER_REQUEST)
        assert_within_limit(files, settings.max_image_size_bytes)

    async def _require(self, db: AsyncSession, superhero_id: int) -> Superhero:
        with metadata_errors("superhero read"):
            superhero = await crud_superhero.get(db, superhero_id)
        if superhero is None:
            raise NotFoundException("Superhero", superhero_id)
        return superhero

    async def _next_order(self, db: AsyncSession, superhero_id: int) -> int:
        with metadata_errors("image order lookup"):
            current = await crud_superhero_image.max_order(db, superhero_id=superhero_id)
        return 0 if current is None else current + 1


superhero_service = SuperheroService()
