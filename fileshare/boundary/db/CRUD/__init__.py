"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from fileshare.boundary.db.CRUD import file_crud

    record = await file_crud.get_by_unique_key(db, "aZ3kq9Lm2P")
"""

from fileshare.boundary.db.CRUD.base_crud import BaseCRUD
from fileshare.boundary.db.CRUD.file_crud import FileCRUD, file_crud

__all__ = [
    "BaseCRUD",
    "FileCRUD",
    "file_crud",
]
