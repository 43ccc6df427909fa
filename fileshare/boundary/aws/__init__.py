"""
AWS-compatible object storage boundary.

Exports: S3FileStore
"""

from .s3_client import S3FileStore

__all__ = ["S3FileStore"]
