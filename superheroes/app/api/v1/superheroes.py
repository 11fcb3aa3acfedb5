"""
Superhero routes.
CRUD plus image upload, removal and reordering.
File-carrying routes accept multipart/form-data with files under `files`.
"""
from __future__ import annotations

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from app.core.dependencies import DBSession, Storage
from app.schemas.pagination import PaginatedResponse
from app.schemas.superhero import SuperheroCreate, SuperheroRead, SuperheroUpdate
from app.schemas.superhero_image import (
    SuperheroImageRead,
    parse_image_ids,
    parse_image_orders,
)
from app.services.superhero_service import superhero_service
from app.services.upload_guard import DEFAULT_CONTENT_TYPE, ImagePayload

router = APIRouter(prefix="/superheroes", tags=["Superheroes"])


async def _read_uploads(files: list[UploadFile] | None) -> list[ImagePayload]:
    payloads: list[ImagePayload] = []
    for upload in files or []:
        data = await upload.read()
        # Browsers send an empty part for an untouched file input.
        if not upload.filename and not data:
            continue
        payloads.append(
            ImagePayload(
                filename=upload.filename or "file",
                content_type=upload.content_type or DEFAULT_CONTENT_TYPE,
                data=data,
            )
        )
    return payloads


@router.get(
    "/",
    response_model=PaginatedResponse[SuperheroRead],
    summary="List superheroes with their cover image",
)
async def list_superheroes(
    db: DBSession,
    page: int = Query(default=1, ge=1),
    size: int = Query(default=20, ge=1, le=100),
) -> PaginatedResponse[SuperheroRead]:
    superheroes, total = await superhero_service.list_superheroes(db, page=page, size=size)
    return PaginatedResponse[SuperheroRead].build(
        superheroes, total=total, page=page, size=size
    )


@router.post(
    "/",
    response_model=SuperheroRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create a superhero, optionally with images",
)
async def create_superhero(
    db: DBSession,
    store: Storage,
    nickname: str = Form(min_length=1, max_length=100),
    real_name: str = Form(min_length=1, max_length=200),
    origin_description: str | None = Form(default=None, max_length=10000),
    superpowers: str | None = Form(default=None, max_length=10000),
    catch_phrase: str | None = Form(default=None, max_length=500),
    files: list[UploadFile] | None = File(default=None),
) -> SuperheroRead:
    superhero_in = SuperheroCreate(
        nickname=nickname,
        real_name=real_name,
        origin_description=origin_description,
        superpowers=superpowers,
        catch_phrase=catch_phrase,
    )
    superhero = await superhero_service.create_superhero(
        db, store, superhero_in=superhero_in, files=await _read_uploads(files)
    )
    return SuperheroRead.model_validate(superhero)


@router.get(
    "/{superhero_id}",
    response_model=SuperheroRead,
    summary="Get a superhero with all images",
)
async def get_superhero(superhero_id: int, db: DBSession) -> SuperheroRead:
    superhero = await superhero_service.get_superhero(db, superhero_id=superhero_id)
    return SuperheroRead.model_validate(superhero)


@router.post(
    "/{superhero_id}/images",
    response_model=list[SuperheroImageRead],
    status_code=status.HTTP_201_CREATED,
    summary="Upload additional images to a superhero",
)
async def upload_images(
    superhero_id: int,
    db: DBSession,
    store: Storage,
    files: list[UploadFile] | None = File(default=None),
) -> list[SuperheroImageRead]:
    images = await superhero_service.append_images(
        db, store, superhero_id=superhero_id, files=await _read_uploads(files)
    )
    return [SuperheroImageRead.model_validate(image) for image in images]


@router.patch(
    "/{superhero_id}",
    response_model=SuperheroRead,
    summary="Update a superhero's fields and images",
)
async def update_superhero(
    superhero_id: int,
    db: DBSession,
    store: Storage,
    nickname: str | None = Form(default=None, min_length=1, max_length=100),
    real_name: str | None = Form(default=None, min_length=1, max_length=200),
    origin_description: str | None = Form(default=None, max_length=10000),
    superpowers: str | None = Form(default=None, max_length=10000),
    catch_phrase: str | None = Form(default=None, max_length=500),
    remove_image_ids: list[str] | None = Form(default=None),
    image_orders: str | None = Form(default=None),
    files: list[UploadFile] | None = File(default=None),
) -> SuperheroRead:
    changes = {
        "nickname": nickname,
        "real_name": real_name,
        "origin_description": origin_description,
        "superpowers": superpowers,
        "catch_phrase": catch_phrase,
    }
    changes = {field: value for field, value in changes.items() if value is not None}

    superhero = await superhero_service.update_superhero(
        db,
        store,
        superhero_id=superhero_id,
        superhero_in=SuperheroUpdate(**changes) if changes else None,
        remove_image_ids=parse_image_ids(remove_image_ids),
        image_orders=parse_image_orders(image_orders),
        files=await _read_uploads(files),
    )
    return SuperheroRead.model_validate(superhero)


@router.delete(
    "/{superhero_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a superhero and its stored images",
)
async def delete_superhero(superhero_id: int, db: DBSession, store: Storage) -> None:
    await superhero_service.delete_superhero(db, store, superhero_id=superhero_id)
