"""SQLAlchemy ORM models."""

from itqan.models.base import Base
from itqan.models.session_entry import SessionEntry

__all__ = ["Base", "SessionEntry"]
