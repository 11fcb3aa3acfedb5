"""
Superhero image service.

Writes, removes and reorders image rows while keeping them in step with the
objects in the bucket. Object storage and the database are not updated
atomically: uploads happen before their row is inserted, and object deletes
happen before their rows are removed, so a failure midway leaves at worst an
orphaned object, never a row pointing at nothing.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import (
    OwnershipMismatchException,
    StorageNotConfiguredException,
    UpstreamMetadataException,
    ValidationException,
)
from app.crud.superhero_image import crud_superhero_image
from app.db.session import metadata_errors
from app.models.superhero_image import SuperheroImage
from app.schemas.superhero_image import ImageOrder
from app.services.media_keys import (
    build_public_url,
    derive_key,
    key_from_public_url,
    upload_clock,
)
from app.services.object_storage import ObjectStore
from app.services.upload_guard import DEFAULT_CONTENT_TYPE, ImagePayload

logger = logging.getLogger(__name__)


class ImageService:

    async def write_images(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_id: int,
        files: Sequence[ImagePayload],
        start_order: int = 0,
    ) -> list[SuperheroImage]:
        """
        Upload files in order and insert one image row per upload.

        File i gets order start_order + i. Each row is committed as soon as
        its upload succeeds; if an upload fails the rest of the batch is
        abandoned and rows already committed stay.
        """
        if files and not store.public_base_url:
            raise StorageNotConfiguredException("STORAGE_PUBLIC_URL")

        created: list[SuperheroImage] = []
        for index, payload in enumerate(files):
            key = derive_key(
                superhero_id,
                payload.filename,
                upload_clock.next_instant(),
                prefix=settings.STORAGE_KEY_PREFIX,
            )
            await store.put(key, payload.data, payload.content_type or DEFAULT_CONTENT_TYPE)

            try:
                with metadata_errors("image insert"):
                    image = await crud_superhero_image.create_image(
                        db,
                        superhero_id=superhero_id,
                        url=build_public_url(store.public_base_url, key),
                        order=start_order + index,
                    )
                    await db.commit()
            except UpstreamMetadataException:
                await db.rollback()
                logger.error(
                    "Object left without metadata row: superhero_id=%s key=%s",
                    superhero_id,
                    key,
                )
                raise
            created.append(image)

        return created

    async def find_owned(
        self,
        db: AsyncSession,
        *,
        superhero_id: int,
        image_ids: Sequence[int],
        strict: bool,
    ) -> list[SuperheroImage]:
        """
        Look up the images among image_ids that belong to superhero_id.
        With strict, any id not owned by the superhero is an ownership mismatch.
        """
        requested = set(image_ids)
        with metadata_errors("image lookup"):
            images = await crud_superhero_image.list_owned(
                db, superhero_id=superhero_id, image_ids=requested
            )

        if strict and len(images) != len(requested):
            raise OwnershipMismatchException(requested - {image.id for image in images})
        return images

    async def delete_objects(
        self, store: ObjectStore, images: Sequence[SuperheroImage]
    ) -> None:
        """Delete the stored object behind each image; the first failure aborts."""
        for image in images:
            key = key_from_public_url(store.public_base_url, image.url)
            if key is None:
                logger.warning(
                    "Skipping object delete for image %s: url %s is not under %r",
                    image.id,
                    image.url,
                    store.public_base_url,
                )
                continue
            await store.delete(key)

    async def remove_images(
        self,
        db: AsyncSession,
        store: ObjectStore,
        *,
        superhero_id: int,
        image_ids: Sequence[int],
        strict: bool = True,
    ) -> list[SuperheroImage]:
        """
        Delete images of a superhero from the bucket, then their rows.

        Rows are only removed once every object delete has succeeded.
        """
        images = await self.find_owned(
            db, superhero_id=superhero_id, image_ids=image_ids, strict=strict
        )
        if not images:
            return []

        await self.delete_objects(store, images)

        with metadata_errors("image delete"):
            await crud_superhero_image.remove_many(
                db,
                superhero_id=superhero_id,
                image_ids=[image.id for image in images],
            )
            await db.commit()

        logger.info(
            "Removed %d image(s) from superhero_id=%s", len(images), superhero_id
        )
        return images

    async def apply_order(
        self,
        db: AsyncSession,
        *,
        superhero_id: int,
        assignments: Sequence[ImageOrder],
    ) -> list[SuperheroImage]:
        """Set new order values; every image must belong to the superhero."""
        if not assignments:
            return []

        image_ids = [item.id for item in assignments]
        if len(set(image_ids)) != len(image_ids):
            raise ValidationException("Each image may appear only once in image_orders")

        images = await self.find_owned(
            db, superhero_id=superhero_id, image_ids=image_ids, strict=True
        )
        by_id = {image.id: image for image in images}

        with metadata_errors("image reorder"):
            for item in assignments:
                await crud_superhero_image.update_order(
                    db, image=by_id[item.id], order=item.order
                )
            await db.commit()

        return images


image_service = ImageService()
