"""
Database models package.

Exports:
  - FileModel: Uploaded file ORM model

Dependencies: sqlalchemy, fileshare.boundary.db.base
System role: Database model definitions for domain entities
"""

from fileshare.boundary.db.models.file_model import FileModel

__all__ = ["FileModel"]
