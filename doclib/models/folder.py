"""
Folder model for the hierarchical document library.
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, CheckConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from doclib.core.database import Base


class LibraryFolder(Base):
    """
    Folder in the document library.

    Tree edges are stored as plain identifier columns. A folder with no
    ``parent_id`` is the library root; exactly one exists once the library
    has been bootstrapped.
    """

    __tablename__ = "library_folders"

    # Primary key
    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4
    )

    # Folder information
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    parent_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        nullable=True,
        index=True
    )
    color_hex: Mapped[Optional[str]] = mapped_column(String(7), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now()
    )

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "length(trim(name)) > 0",
            name='ck_library_folder_name_not_blank'
        ),
        CheckConstraint(
            "parent_id IS NULL OR parent_id != id",
            name='ck_library_folder_not_own_parent'
        ),
    )

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def __repr__(self) -> str:
        return f"<LibraryFolder(id={self.id}, name='{self.name}', parent_id={self.parent_id})>"
