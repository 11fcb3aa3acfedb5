"""
SuperheroImage Pydantic schemas and parsers for image-mutation form fields.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from pydantic import BaseModel, Field, PositiveInt, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ValidationException


class SuperheroImageRead(BaseModel):
    id: int
    url: str
    order: int
    superhero_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ImageOrder(BaseModel):
    id: PositiveInt
    order: int = Field(ge=0)


_id_list = TypeAdapter(list[PositiveInt])
_order_list = TypeAdapter(list[ImageOrder])


def _ids_from_text(text: str) -> list[int]:
    text = text.strip()
    if not text:
        return []
    try:
        if text.startswith("["):
            return _id_list.validate_json(text)
        return _id_list.validate_python([part.strip() for part in text.split(",")])
    except PydanticValidationError as exc:
        raise ValidationException(f"Invalid image id list: {text!r}") from exc


def parse_image_ids(raw: str | Sequence[str | int] | None) -> list[int]:
    """
    Normalise removal ids from a form field.

    Accepts a JSON array (``"[1, 2]"``), comma-separated text (``"1,2"``),
    repeated form values, or already-parsed integers. Duplicates are dropped
    keeping first-seen order. Malformed input raises ValidationException.
    """
    if raw is None:
        return []
    items = [raw] if isinstance(raw, str) else list(raw)

    ids: list[int] = []
    for item in items:
        if isinstance(item, bool) or (isinstance(item, int) and item < 1):
            raise ValidationException(f"Invalid image id: {item!r}")
        if isinstance(item, int):
            ids.append(item)
        else:
            ids.extend(_ids_from_text(item))
    return list(dict.fromkeys(ids))


def parse_image_orders(raw: str | Sequence[ImageOrder] | None) -> list[ImageOrder]:
    """Parse a JSON array of ``{"id": ..., "order": ...}`` objects."""
    if raw is None:
        return []
    if isinstance(raw, str):
        if not raw.strip():
            return []
        try:
            orders = _order_list.validate_json(raw)
        except PydanticValidationError as exc:
            raise ValidationException(f"Invalid image order list: {raw!r}") from exc
    else:
        orders = list(raw)

    seen: set[int] = set()
    for item in orders:
        if item.id in seen:
            raise ValidationException(f"Image {item.id} appears more than once in image_orders")
        seen.add(item.id)
    return orders
