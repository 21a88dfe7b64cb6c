"""
Lazy creation of the single library root folder.
"""
import asyncio
import enum
import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from doclib.models.folder import LibraryFolder
from doclib.core.config import settings
from doclib.core.exceptions import CommitFailedError

logger = logging.getLogger(__name__)


class RootState(str, enum.Enum):
    """Bootstrap state of the library root."""
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class RootBootstrapper:
    """
    Guarantees that exactly one parentless folder exists.

    Lookups and creation run under a lock, and the lookup is repeated once the
    lock is held, so concurrent first calls share one root instead of each
    inserting their own.
    """

    def __init__(self, root_name: Optional[str] = None):
        self.root_name = root_name or settings.LIBRARY_ROOT_NAME
        self.state = RootState.UNINITIALIZED
        self.root_id: Optional[uuid.UUID] = None
        self._lock = asyncio.Lock()

    def reset(self) -> None:
        """Forget the cached root, e.g. after the database was replaced."""
        self.state = RootState.UNINITIALIZED
        self.root_id = None

    async def get_or_create_root(self, db: AsyncSession) -> LibraryFolder:
        """
        Return the library root, creating it on first use.

        Args:
            db: Database session

        Returns:
            The root folder

        Raises:
            CommitFailedError: If the new root cannot be saved
        """
        if self.state is RootState.READY:
            root = await db.get(LibraryFolder, self.root_id)
            if root is not None and root.parent_id is None:
                return root
            logger.warning(f"Cached library root {self.root_id} is gone, bootstrapping again")
            self.reset()

        async with self._lock:
            root = await self._find_root(db)

            if root is None:
                root = LibraryFolder(name=self.root_name, parent_id=None)
                db.add(root)
                try:
                    await db.commit()
                except SQLAlchemyError as e:
                    await db.rollback()
                    logger.error(f"Error creating library root: {e}")
                    raise CommitFailedError("Failed to create library root") from e
                await db.refresh(root)
                logger.info(f"Created library root {root.id} named '{root.name}'")

            self.root_id = root.id
            self.state = RootState.READY
            return root

    async def _find_root(self, db: AsyncSession) -> Optional[LibraryFolder]:
        """Find the root, folding any extra parentless folders under the oldest one."""
        stmt = (
            select(LibraryFolder)
            .where(LibraryFolder.parent_id.is_(None))
            .order_by(LibraryFolder.created_at, LibraryFolder.id)
        )
        result = await db.execute(stmt)
        roots = list(result.scalars().all())

        if not roots:
            return None

        root, extras = roots[0], roots[1:]
        if extras:
            for extra in extras:
                extra.parent_id = root.id
            try:
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Error repairing library roots: {e}")
                raise CommitFailedError("Failed to repair library roots") from e
            logger.warning(
                f"Found {len(roots)} parentless folders; moved {len(extras)} under root {root.id}"
            )

        return root
