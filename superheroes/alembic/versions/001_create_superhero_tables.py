"""001_create_superhero_tables

Revision ID: 001
Revises:
Create Date: 2026-10-19 00:00:00.000000

Creates:
  - superheroes
  - superhero_images
"""
from __future__ import annotations

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | None = None
depends_on: str | None = None


def upgrade() -> None:
    # ── superheroes ───────────────────────────────────────────────────────────
    op.create_table(
        "superheroes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("nickname", sa.String(100), nullable=False),
        sa.Column("real_name", sa.String(200), nullable=False),
        sa.Column("origin_description", sa.Text(), nullable=True),
        sa.Column("superpowers", sa.Text(), nullable=True),
        sa.Column("catch_phrase", sa.String(500), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_superheroes"),
    )
    op.create_index("ix_superheroes_nickname", "superheroes", ["nickname"])

    # ── superhero_images ──────────────────────────────────────────────────────
    op.create_table(
        "superhero_images",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("url", sa.String(2000), nullable=False),
        sa.Column("order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("superhero_id", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id", name="pk_superhero_images"),
        sa.ForeignKeyConstraint(
            ["superhero_id"],
            ["superheroes.id"],
            name="fk_superhero_images_superhero_id_superheroes",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("url", name="uq_superhero_images_url"),
    )
    op.create_index(
        "ix_superhero_images_superhero_id_order",
        "superhero_images",
        ["superhero_id", "order"],
    )


def downgrade() -> None:
    op.drop_index("ix_superhero_images_superhero_id_order", table_name="superhero_images")
    op.drop_table("superhero_images")
    op.drop_index("ix_superheroes_nickname", table_name="superheroes")
    op.drop_table("superheroes")
