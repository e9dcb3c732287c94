"""
Declarative base for all ORM models.
Models import Base from here; init_db() imports the model modules before create_all().
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class that all SQLAlchemy models inherit from."""
    pass
