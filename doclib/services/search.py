"""
Search service for name matching across the whole library.
"""
import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from doclib.models.folder import LibraryFolder
from doclib.models.file import LibraryFile
from doclib.core.exceptions import InternalError

logger = logging.getLogger(__name__)


@dataclass
class LibrarySearchResults:
    """Folders and files whose names contain the query."""
    query: str
    is_active: bool
    folders: List[LibraryFolder] = field(default_factory=list)
    files: List[LibraryFile] = field(default_factory=list)


def match_nodes(
    query: str,
    folders: Iterable[LibraryFolder],
    files: Iterable[LibraryFile]
) -> LibrarySearchResults:
    """
    Case-insensitive substring match of ``query`` against node names.

    A blank query means search is inactive and matches nothing.
    """
    query = query or ""
    if not query.strip():
        return LibrarySearchResults(query=query, is_active=False)

    needle = query.casefold()
    matching_folders = [f for f in folders if needle in f.name.casefold()]
    matching_files = [f for f in files if needle in f.name.casefold()]

    return LibrarySearchResults(
        query=query,
        is_active=True,
        folders=sorted(matching_folders, key=lambda f: f.name.casefold()),
        files=sorted(matching_files, key=lambda f: f.name.casefold()),
    )


class SearchService:
    """Service for searching the library regardless of the current folder."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(self, query: str) -> LibrarySearchResults:
        """
        Search every folder and file name in the library.

        Args:
            query: Substring to look for

        Returns:
            LibrarySearchResults with matching folders and files

        Raises:
            InternalError: If loading the library fails
        """
        if not (query or "").strip():
            return LibrarySearchResults(query=query or "", is_active=False)

        try:
            folders = (await self.db.execute(select(LibraryFolder))).scalars().all()
            files = (await self.db.execute(select(LibraryFile))).scalars().all()
        except Exception as e:
            logger.error(f"Error searching library for '{query}': {e}")
            raise InternalError("Failed to search library")

        results = match_nodes(query, folders, files)
        logger.debug(
            f"Search '{query}' matched {len(results.folders)} folders "
            f"and {len(results.files)} files"
        )
        return results
