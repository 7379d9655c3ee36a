"""Database module for SQLAlchemy models and session management."""

from plan_review.database.base import Base, create_engine, create_session_factory, init_models
from plan_review.database.models import Submission

__all__ = [
    "Base",
    "create_engine",
    "create_session_factory",
    "init_models",
    "Submission",
]
