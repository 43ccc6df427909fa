"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(): Async connection management
  - FileModel: Uploaded file entity
  - file_crud: CRUD operation singleton

Dependencies: sqlalchemy, fileshare.configs
System role: Relational adapter for file metadata
"""

from fileshare.boundary.db.base import Base, TimestampMixin, UUIDMixin
from fileshare.boundary.db.connection import get_async_engine, get_async_session_factory
from fileshare.boundary.db.models.file_model import FileModel
from fileshare.boundary.db.CRUD import BaseCRUD, FileCRUD, file_crud

__all__ = [
    # Base classes
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    # Connection
    "get_async_engine",
    "get_async_session_factory",
    # Models
    "FileModel",
    # CRUD
    "BaseCRUD",
    "FileCRUD",
    "file_crud",
]
