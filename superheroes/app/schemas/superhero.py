"""
Superhero Pydantic schemas.
Includes create/update/read variants.
"""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from app.schemas.superhero_image import SuperheroImageRead


# ── Create ────────────────────────────────────────────────────────────────────

class SuperheroCreate(BaseModel):
    nickname: str = Field(min_length=1, max_length=100)
    real_name: str = Field(min_length=1, max_length=200)
    origin_description: str | None = Field(default=None, max_length=10000)
    superpowers: str | None = Field(default=None, max_length=10000)
    catch_phrase: str | None = Field(default=None, max_length=500)


# ── Update ────────────────────────────────────────────────────────────────────

class SuperheroUpdate(BaseModel):
    nickname: str | None = Field(default=None, min_length=1, max_length=100)
    real_name: str | None = Field(default=None, min_length=1, max_length=200)
    origin_description: str | None = Field(default=None, max_length=10000)
    superpowers: str | None = Field(default=None, max_length=10000)
    catch_phrase: str | None = Field(default=None, max_length=500)


# ── Read ──────────────────────────────────────────────────────────────────────

class SuperheroRead(BaseModel):
    id: int
    nickname: str
    real_name: str
    origin_description: str | None
    superpowers: str | None
    catch_phrase: str | None
    created_at: datetime
    updated_at: datetime
    images: list[SuperheroImageRead] = Field(default_factory=list)

    model_config = {"from_attributes": True}
