"""
File model for documents stored in the library.
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, LargeBinary, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from doclib.core.database import Base


class LibraryFile(Base):
    """File record attached to exactly one library folder."""

    __tablename__ = "library_files"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # File information
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    parent_folder_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        nullable=False,
        index=True
    )

    # Content blobs are only loaded on demand
    payload: Mapped[bytes] = mapped_column(LargeBinary, nullable=False, deferred=True)
    drawing_data: Mapped[Optional[bytes]] = mapped_column(
        LargeBinary,
        nullable=True,
        deferred=True
    )
    file_size: Mapped[int] = mapped_column(nullable=False, default=0)

    # Weak references to subjects and units owned by other subsystems
    linked_subject_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        index=True
    )
    linked_unit_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        index=True
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "length(trim(name)) > 0",
            name='ck_library_file_name_not_blank'
        ),
        CheckConstraint(
            "file_size >= 0",
            name='ck_library_file_valid_size'
        ),
    )

    def __repr__(self) -> str:
        return f"<LibraryFile(id={self.id}, name='{self.name}', parent_folder_id={self.parent_folder_id})>"
