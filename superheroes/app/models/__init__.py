"""
ORM model package. Import all models here so Alembic autogenerate
can discover every table through the shared Base metadata.
"""
from app.models.superhero import Superhero  # noqa: F401
from app.models.superhero_image import SuperheroImage  # noqa: F401
