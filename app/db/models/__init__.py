"""
Database models module.

This module imports all database models to ensure they are registered with SQLAlchemy's Base.metadata
before table creation.

All models must be imported here to be included in database migrations and table creation.
"""
from app.db.models.user import User
from app.db.models.creation import Creation, CreationLike

# Explicitly export all models for clarity
__all__ = [
    "User",
    "Creation",
    "CreationLike",
]
