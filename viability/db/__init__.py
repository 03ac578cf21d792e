"""
Database session management and models.
"""

from viability.db.database import get_db, get_db_context, init_db
from viability.db.models import Base, Project

__all__ = ["get_db", "get_db_context", "init_db", "Base", "Project"]
