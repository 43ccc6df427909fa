"""
File ORM model.

Represents an uploaded file: display metadata, the share key handed out in
links, the storage path of its blob and a download counter.

Dependencies: sqlalchemy, fileshare.boundary.db.base
System role: File metadata persistence
"""

from sqlalchemy import BigInteger, CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from fileshare.boundary.db.base import Base, TimestampMixin, UUIDMixin


class FileModel(Base, UUIDMixin, TimestampMixin):
    """
    File ORM model.

    Lifecycle: created after a successful blob write, mutated only by the
    download counter increment, removed by owner-initiated deletion.

    Attributes:
        id: UUID primary key (auto-generated)
        name: Original filename shown to users (255 char limit)
        size: Size in bytes, never negative
        content_type: Declared MIME type (column "type")
        unique_key: Share key used in download links, unique and immutable
        downloads: Download counter, never negative, only ever increases
        path: Storage path of the blob, unique
        user_id: Owning identity from the auth service
        created_at: Upload timestamp (UTC)
        updated_at: Last counter change (UTC)

    Constraints:
        unique_key and path are unique; size and downloads are >= 0
    """

    __tablename__ = "files"
    __table_args__ = (
        CheckConstraint("size >= 0", name="ck_files_size_non_negative"),
        CheckConstraint("downloads >= 0", name="ck_files_downloads_non_negative"),
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        doc="Original filename",
    )

    size: Mapped[int] = mapped_column(
        BigInteger,
        nullable=False,
        default=0,
    )

    content_type: Mapped[str] = mapped_column(
        "type",
        String(255),
        nullable=False,
        default="application/octet-stream",
    )

    unique_key: Mapped[str] = mapped_column(
        String(64),
        nullable=False,
        unique=True,
        index=True,
    )

    downloads: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
    )

    path: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        unique=True,
        doc="Storage path of the blob",
    )

    user_id: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<FileModel(id={self.id}, unique_key={self.unique_key!r}, name={self.name!r})>"
