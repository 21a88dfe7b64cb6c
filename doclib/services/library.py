"""
Library service for folder and file tree management.
"""
import uuid
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set

from sqlalchemy import select, delete, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import undefer

from doclib.models.folder import LibraryFolder
from doclib.models.file import LibraryFile
from doclib.models.node import NodeKind
from doclib.schemas.folder import FolderUpdate, normalize_color_hex, color_name
from doclib.services.dragdrop import DragItem
from doclib.services.selection import Selection
from doclib.services.tree_index import TreeIndex, FolderChildren
from doclib.core.config import settings
from doclib.core.security import InputValidator, UNTITLED_FILE_NAME
from doclib.core.exceptions import (
    ServiceException, NotFoundError, ValidationError, InvalidNameError,
    RootDeletionForbiddenError, SelfMoveError, CycleDetectedError,
    DestinationNotFoundError, CommitFailedError, InternalError
)

logger = logging.getLogger(__name__)

# SQLite caps bound parameters per statement
DELETE_BATCH_SIZE = 500


@dataclass
class DeletionResult:
    """Outcome of a recursive folder deletion."""
    folder_id: uuid.UUID
    folders_deleted: int
    files_deleted: int


@dataclass
class SkippedItem:
    """Selection member rejected by a bulk operation."""
    kind: NodeKind
    id: uuid.UUID
    code: str
    message: str


@dataclass
class BulkResult:
    """Best-effort bulk operation report."""
    succeeded: List[DragItem] = field(default_factory=list)
    skipped: List[SkippedItem] = field(default_factory=list)

    def skip(self, kind: NodeKind, item_id: uuid.UUID, error: ServiceException) -> None:
        self.skipped.append(SkippedItem(kind, item_id, error.code, error.message))


@dataclass
class FolderInfo:
    """Summary of a folder's contents and location."""
    id: uuid.UUID
    name: str
    file_count: int
    subfolder_count: int
    color_name: str
    parent_name: str
    path: List[str]


@dataclass
class MoveDestination:
    """Folder listed as a possible move target."""
    id: uuid.UUID
    name: str
    depth: int
    disabled: bool


class LibraryService:
    """
    Service for mutating and querying the library tree.

    Every mutation validates against a fresh :class:`TreeIndex`, applies the
    change to the session and commits once, so a call is one transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # Queries

    async def get_folder(self, folder_id: uuid.UUID) -> LibraryFolder:
        """
        Get a folder by ID.

        Raises:
            NotFoundError: If folder not found
        """
        folder = await self.db.get(LibraryFolder, folder_id)
        if folder is None:
            raise NotFoundError(f"Folder with ID {folder_id} not found")
        return folder

    async def get_file(self, file_id: uuid.UUID, with_payload: bool = False) -> LibraryFile:
        """
        Get a file by ID.

        Args:
            file_id: File ID
            with_payload: Also load the binary payload

        Raises:
            NotFoundError: If file not found
        """
        stmt = select(LibraryFile).where(LibraryFile.id == file_id)
        if with_payload:
            stmt = stmt.options(undefer(LibraryFile.payload))
        result = await self.db.execute(stmt)
        file = result.scalar_one_or_none()
        if file is None:
            raise NotFoundError(f"File with ID {file_id} not found")
        return file

    async def list_children(self, folder_id: uuid.UUID) -> FolderChildren:
        """Direct child folders and files of a folder, sorted by name."""
        await self.get_folder(folder_id)

        folders = (await self.db.execute(
            select(LibraryFolder).where(LibraryFolder.parent_id == folder_id)
        )).scalars().all()
        files = (await self.db.execute(
            select(LibraryFile).where(LibraryFile.parent_folder_id == folder_id)
        )).scalars().all()

        return FolderChildren(
            folders=sorted(folders, key=lambda f: f.name.casefold()),
            files=sorted(files, key=lambda f: f.name.casefold()),
        )

    async def load_index(self, include_files: bool = True) -> TreeIndex:
        """Snapshot the whole library into a tree index."""
        folders = (await self.db.execute(select(LibraryFolder))).scalars().all()
        files = []
        if include_files:
            files = (await self.db.execute(select(LibraryFile))).scalars().all()
        return TreeIndex(folders, files)

    async def folder_info(self, folder_id: uuid.UUID) -> FolderInfo:
        """
        Summarize a folder.

        Raises:
            NotFoundError: If folder not found
        """
        index = await self.load_index()
        folder = index.folder(folder_id)
        if folder is None:
            raise NotFoundError(f"Folder with ID {folder_id} not found")

        children = index.children(folder_id)
        parent = index.folder(folder.parent_id) if folder.parent_id else None

        return FolderInfo(
            id=folder.id,
            name=folder.name,
            file_count=len(children.files),
            subfolder_count=len(children.folders),
            color_name=color_name(folder.color_hex),
            parent_name=parent.name if parent else "Root",
            path=index.path(folder_id),
        )

    async def move_destinations(
        self,
        moving_folder_ids: Iterable[uuid.UUID] = ()
    ) -> List[MoveDestination]:
        """
        List every folder root-first, depth-first as a move target.

        Folders being moved and everything below them are marked disabled.
        """
        index = await self.load_index(include_files=False)
        blocked = index.blocked_destinations(moving_folder_ids)

        return [
            MoveDestination(
                id=folder.id,
                name=folder.name,
                depth=depth,
                disabled=folder.id in blocked,
            )
            for folder, depth in index.walk()
        ]

    # Creation

    async def create_folder(
        self,
        parent_id: uuid.UUID,
        name: Optional[str] = None,
        color_hex: Optional[str] = None
    ) -> LibraryFolder:
        """
        Create a folder inside ``parent_id``.

        Args:
            parent_id: Parent folder ID
            name: Folder name (defaults to the configured default name)
            color_hex: Optional folder color

        Returns:
            Created folder

        Raises:
            DestinationNotFoundError: If the parent does not exist
            InvalidNameError: If the name is blank or too long
            ValidationError: If the color is malformed
            CommitFailedError: If saving fails
        """
        try:
            parent = await self.db.get(LibraryFolder, parent_id)
            if parent is None:
                raise DestinationNotFoundError(f"Parent folder {parent_id} not found")

            clean_name = self._clean_name(settings.DEFAULT_FOLDER_NAME if name is None else name)
            folder = LibraryFolder(
                name=clean_name,
                parent_id=parent.id,
                color_hex=self._clean_color(color_hex),
            )

            self.db.add(folder)
            await self._commit("folder creation")
            await self.db.refresh(folder)

            logger.info(f"Created folder '{folder.name}' ({folder.id}) in {parent.id}")
            return folder

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error creating folder: {e}")
            raise InternalError("Failed to create folder")

    async def create_file(
        self,
        parent_folder_id: uuid.UUID,
        name: str,
        payload: bytes,
        subject_id: Optional[uuid.UUID] = None,
        unit_id: Optional[uuid.UUID] = None,
        drawing_data: Optional[bytes] = None
    ) -> LibraryFile:
        """
        Import a file into a folder.

        The name is sanitized as a filename; an unusable name falls back to
        ``"Untitled"``.

        Raises:
            DestinationNotFoundError: If the folder does not exist
            ValidationError: If the payload is too large or links are inconsistent
            CommitFailedError: If saving fails
        """
        try:
            parent = await self.db.get(LibraryFolder, parent_folder_id)
            if parent is None:
                raise DestinationNotFoundError(f"Folder {parent_folder_id} not found")

            if not InputValidator.validate_file_size(len(payload)):
                raise ValidationError(
                    f"File exceeds the maximum allowed size of {settings.MAX_FILE_SIZE} bytes"
                )
            self._check_links(subject_id, unit_id)

            file = LibraryFile(
                name=InputValidator.sanitize_filename(name) or UNTITLED_FILE_NAME,
                parent_folder_id=parent.id,
                payload=payload,
                drawing_data=drawing_data,
                file_size=len(payload),
                linked_subject_id=subject_id,
                linked_unit_id=unit_id,
            )

            self.db.add(file)
            await self._commit("file import")
            await self.db.refresh(file, attribute_names=["created_at"])

            logger.info(f"Imported file '{file.name}' ({file.id}, {file.file_size} bytes) into {parent.id}")
            return file

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error importing file: {e}")
            raise InternalError("Failed to import file")

    async def duplicate_folder(self, folder_id: uuid.UUID) -> LibraryFolder:
        """
        Create an empty sibling copy named ``"<name> Copy"`` with the same color.

        Raises:
            NotFoundError: If folder not found
            ValidationError: If the folder is the library root
        """
        try:
            folder = await self.get_folder(folder_id)
            if folder.is_root:
                raise ValidationError("The library root cannot be duplicated")

            suffix = " Copy"
            base = folder.name[:settings.MAX_NAME_LENGTH - len(suffix)].rstrip()
            duplicate = LibraryFolder(
                name=self._clean_name(f"{base}{suffix}"),
                parent_id=folder.parent_id,
                color_hex=folder.color_hex,
            )

            self.db.add(duplicate)
            await self._commit("folder duplication")
            await self.db.refresh(duplicate)

            logger.info(f"Duplicated folder {folder.id} as {duplicate.id}")
            return duplicate

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error duplicating folder {folder_id}: {e}")
            raise InternalError("Failed to duplicate folder")

    # Updates

    async def rename_folder(self, folder_id: uuid.UUID, new_name: str) -> LibraryFolder:
        """
        Rename a folder.

        Raises:
            NotFoundError: If folder not found
            InvalidNameError: If the trimmed name is empty or too long
        """
        try:
            folder = await self.get_folder(folder_id)
            clean_name = self._clean_name(new_name)

            old_name = folder.name
            folder.name = clean_name
            await self._commit("folder rename")

            logger.info(f"Renamed folder {folder.id} from '{old_name}' to '{clean_name}'")
            return folder

        except InvalidNameError as e:
            logger.warning(f"Rejected rename of folder {folder_id}: {e.message}")
            raise
        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error renaming folder {folder_id}: {e}")
            raise InternalError("Failed to rename folder")

    async def rename_file(self, file_id: uuid.UUID, new_name: str) -> LibraryFile:
        """
        Rename a file.

        The name follows the same filename rules as an import.

        Raises:
            NotFoundError: If file not found
            InvalidNameError: If nothing usable remains after sanitizing
        """
        try:
            file = await self.get_file(file_id)
            clean_name = self._clean_name(InputValidator.sanitize_filename(new_name))

            old_name = file.name
            file.name = clean_name
            await self._commit("file rename")

            logger.info(f"Renamed file {file.id} from '{old_name}' to '{clean_name}'")
            return file

        except InvalidNameError as e:
            logger.warning(f"Rejected rename of file {file_id}: {e.message}")
            raise
        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error renaming file {file_id}: {e}")
            raise InternalError("Failed to rename file")

    async def recolor_folder(self, folder_id: uuid.UUID, color_hex: Optional[str]) -> LibraryFolder:
        """
        Set a folder's color; ``None`` resets it to the default.

        Raises:
            NotFoundError: If folder not found
            ValidationError: If the color is malformed
        """
        try:
            folder = await self.get_folder(folder_id)
            folder.color_hex = self._clean_color(color_hex)
            await self._commit("folder recolor")

            logger.info(f"Recolored folder {folder.id} to {folder.color_hex or 'default'}")
            return folder

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error recoloring folder {folder_id}: {e}")
            raise InternalError("Failed to recolor folder")

    async def update_folder(self, folder_id: uuid.UUID, folder_data: FolderUpdate) -> LibraryFolder:
        """
        Rename and/or recolor a folder in one transaction.

        Only fields set in ``folder_data`` change; an explicit ``color_hex``
        of ``None`` resets the color. Nothing is applied if either value is
        rejected.

        Args:
            folder_id: Folder ID
            folder_data: Update data

        Returns:
            Updated folder

        Raises:
            NotFoundError: If folder not found
            InvalidNameError: If the new name is blank or too long
            ValidationError: If the color is malformed
        """
        try:
            folder = await self.get_folder(folder_id)
            update_data = folder_data.model_dump(exclude_unset=True)

            name = folder.name
            if "name" in update_data:
                name = self._clean_name(update_data["name"])
            color_hex = folder.color_hex
            if "color_hex" in update_data:
                color_hex = self._clean_color(update_data["color_hex"])

            folder.name = name
            folder.color_hex = color_hex
            await self._commit("folder update")

            logger.info(f"Updated {', '.join(sorted(update_data)) or 'nothing'} of folder {folder.id}")
            return folder

        except InvalidNameError as e:
            logger.warning(f"Rejected update of folder {folder_id}: {e.message}")
            raise
        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error updating folder {folder_id}: {e}")
            raise InternalError("Failed to update folder")

    async def link_file(
        self,
        file_id: uuid.UUID,
        subject_id: Optional[uuid.UUID],
        unit_id: Optional[uuid.UUID]
    ) -> LibraryFile:
        """
        Tag a file with a subject and unit; ``None`` clears a link.

        Raises:
            NotFoundError: If file not found
            ValidationError: If a unit is given without a subject
        """
        try:
            file = await self.get_file(file_id)
            self._check_links(subject_id, unit_id)

            file.linked_subject_id = subject_id
            file.linked_unit_id = unit_id
            await self._commit("file links")

            logger.info(f"Linked file {file.id} to subject {subject_id} and unit {unit_id}")
            return file

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error linking file {file_id}: {e}")
            raise InternalError("Failed to link file")

    async def unlink_references(
        self,
        subject_id: Optional[uuid.UUID] = None,
        unit_id: Optional[uuid.UUID] = None
    ) -> int:
        """
        Clear links to a subject or unit that no longer exists.

        Returns:
            int: Number of files whose links were cleared

        Raises:
            ValidationError: If neither reference is given
        """
        if subject_id is None and unit_id is None:
            raise ValidationError("A subject or unit reference is required")

        try:
            conditions = []
            if subject_id is not None:
                conditions.append(LibraryFile.linked_subject_id == subject_id)
            if unit_id is not None:
                conditions.append(LibraryFile.linked_unit_id == unit_id)

            affected = (await self.db.execute(
                select(LibraryFile.id).where(or_(*conditions))
            )).scalars().all()

            if subject_id is not None:
                await self.db.execute(
                    update(LibraryFile)
                    .where(LibraryFile.linked_subject_id == subject_id)
                    .values(linked_subject_id=None)
                )
            if unit_id is not None:
                await self.db.execute(
                    update(LibraryFile)
                    .where(LibraryFile.linked_unit_id == unit_id)
                    .values(linked_unit_id=None)
                )
            await self._commit("link cleanup")

            logger.info(
                f"Cleared links to subject {subject_id} / unit {unit_id} on {len(affected)} files"
            )
            return len(affected)

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error clearing file links: {e}")
            raise InternalError("Failed to clear file links")

    # Deletion

    async def delete_folder(self, folder_id: uuid.UUID) -> DeletionResult:
        """
        Delete a folder together with every folder and file below it.

        Raises:
            NotFoundError: If folder not found
            RootDeletionForbiddenError: If the folder is the library root
            CorruptedTreeError: If the subtree contains a cycle
        """
        try:
            index = await self.load_index()
            folder = index.folder(folder_id)
            if folder is None:
                raise NotFoundError(f"Folder with ID {folder_id} not found")
            if folder.is_root:
                raise RootDeletionForbiddenError()

            subtree = index.subtree(folder_id)
            await self._delete_rows(LibraryFile, subtree.file_ids)
            await self._delete_rows(LibraryFolder, subtree.folder_ids | {folder_id})
            await self._commit("folder deletion")

            result = DeletionResult(
                folder_id=folder_id,
                folders_deleted=len(subtree.folder_ids) + 1,
                files_deleted=len(subtree.file_ids),
            )
            logger.info(
                f"Deleted folder {folder_id} with {result.folders_deleted - 1} subfolders "
                f"and {result.files_deleted} files"
            )
            return result

        except RootDeletionForbiddenError as e:
            logger.warning(f"Rejected deletion of folder {folder_id}: {e.message}")
            raise
        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting folder {folder_id}: {e}")
            raise InternalError("Failed to delete folder")

    async def delete_file(self, file_id: uuid.UUID) -> None:
        """
        Delete a single file.

        Raises:
            NotFoundError: If file not found
        """
        try:
            file = await self.get_file(file_id)
            await self.db.delete(file)
            await self._commit("file deletion")

            logger.info(f"Deleted file {file_id}")

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error deleting file {file_id}: {e}")
            raise InternalError("Failed to delete file")

    # Moves

    async def move_folder(self, folder_id: uuid.UUID, destination_id: uuid.UUID) -> LibraryFolder:
        """
        Move a folder into another folder.

        Raises:
            SelfMoveError: If the folder is its own destination
            NotFoundError: If folder not found
            DestinationNotFoundError: If the destination does not exist
            CycleDetectedError: If the destination is inside the folder's subtree
        """
        try:
            index = await self.load_index(include_files=False)
            folder = self._apply_folder_move(index, folder_id, destination_id)
            await self._commit("folder move")

            logger.info(f"Moved folder {folder_id} into {destination_id}")
            return folder

        except (SelfMoveError, CycleDetectedError) as e:
            logger.warning(f"Rejected move of folder {folder_id} into {destination_id}: {e.message}")
            raise
        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error moving folder {folder_id}: {e}")
            raise InternalError("Failed to move folder")

    async def move_file(self, file_id: uuid.UUID, destination_id: uuid.UUID) -> LibraryFile:
        """
        Move a file into another folder.

        Raises:
            NotFoundError: If file not found
            DestinationNotFoundError: If the destination does not exist
        """
        try:
            file = await self.get_file(file_id)
            destination = await self.db.get(LibraryFolder, destination_id)
            if destination is None:
                raise DestinationNotFoundError(f"Destination folder {destination_id} not found")

            file.parent_folder_id = destination.id
            await self._commit("file move")

            logger.info(f"Moved file {file_id} into {destination_id}")
            return file

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error moving file {file_id}: {e}")
            raise InternalError("Failed to move file")

    async def drop(self, item: DragItem, destination_id: uuid.UUID):
        """Apply a dragged folder or file to the folder it was dropped on."""
        if item.kind is NodeKind.FOLDER:
            return await self.move_folder(item.id, destination_id)
        return await self.move_file(item.id, destination_id)

    # Bulk operations

    async def bulk_move(self, selection: Selection, destination_id: uuid.UUID) -> BulkResult:
        """
        Move every selected item into ``destination_id``.

        Members that cannot be moved are skipped and reported; the rest are
        committed together.

        Raises:
            DestinationNotFoundError: If the destination does not exist
        """
        result = BulkResult()
        try:
            index = await self.load_index()
            if not index.has_folder(destination_id):
                raise DestinationNotFoundError(f"Destination folder {destination_id} not found")

            for file_id in sorted(selection.file_ids, key=str):
                file = index.file(file_id)
                if file is None:
                    result.skip(NodeKind.FILE, file_id, NotFoundError(f"File with ID {file_id} not found"))
                    continue
                file.parent_folder_id = destination_id
                result.succeeded.append(DragItem(NodeKind.FILE, file_id))

            for folder_id in sorted(selection.folder_ids, key=str):
                try:
                    self._apply_folder_move(index, folder_id, destination_id)
                except (SelfMoveError, CycleDetectedError, NotFoundError) as e:
                    result.skip(NodeKind.FOLDER, folder_id, e)
                    continue
                result.succeeded.append(DragItem(NodeKind.FOLDER, folder_id))

            await self._commit("bulk move")

            logger.info(
                f"Bulk move into {destination_id}: {len(result.succeeded)} moved, "
                f"{len(result.skipped)} skipped"
            )
            for item in result.skipped:
                logger.warning(f"Skipped {item.kind.value} {item.id} in bulk move: {item.message}")
            return result

        except ServiceException:
            # Files may already be re-parented in the session
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error in bulk move into {destination_id}: {e}")
            raise InternalError("Failed to move selection")

    async def bulk_delete(self, selection: Selection) -> BulkResult:
        """
        Delete every selected item, folders recursively.

        The root is skipped; items already removed by an earlier folder in
        the same selection count as deleted.
        """
        result = BulkResult()
        try:
            index = await self.load_index()
            doomed_folders: Set[uuid.UUID] = set()
            doomed_files: Set[uuid.UUID] = set()

            for file_id in sorted(selection.file_ids, key=str):
                if index.file(file_id) is None:
                    result.skip(NodeKind.FILE, file_id, NotFoundError(f"File with ID {file_id} not found"))
                    continue
                doomed_files.add(file_id)
                result.succeeded.append(DragItem(NodeKind.FILE, file_id))

            for folder_id in sorted(selection.folder_ids, key=str):
                folder = index.folder(folder_id)
                if folder is None:
                    result.skip(NodeKind.FOLDER, folder_id, NotFoundError(f"Folder with ID {folder_id} not found"))
                    continue
                if folder.is_root:
                    result.skip(NodeKind.FOLDER, folder_id, RootDeletionForbiddenError())
                    continue

                if folder_id not in doomed_folders:
                    subtree = index.subtree(folder_id)
                    doomed_folders.update(subtree.folder_ids)
                    doomed_folders.add(folder_id)
                    doomed_files.update(subtree.file_ids)
                result.succeeded.append(DragItem(NodeKind.FOLDER, folder_id))

            await self._delete_rows(LibraryFile, doomed_files)
            await self._delete_rows(LibraryFolder, doomed_folders)
            await self._commit("bulk deletion")

            logger.info(
                f"Bulk delete removed {len(doomed_folders)} folders and {len(doomed_files)} files, "
                f"{len(result.skipped)} items skipped"
            )
            for item in result.skipped:
                logger.warning(f"Skipped {item.kind.value} {item.id} in bulk delete: {item.message}")
            return result

        except ServiceException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Error in bulk delete: {e}")
            raise InternalError("Failed to delete selection")

    # Helpers

    def _apply_folder_move(
        self,
        index: TreeIndex,
        folder_id: uuid.UUID,
        destination_id: uuid.UUID
    ) -> LibraryFolder:
        """Validate a folder move against the index and re-parent in place."""
        if folder_id == destination_id:
            raise SelfMoveError()

        folder = index.folder(folder_id)
        if folder is None:
            raise NotFoundError(f"Folder with ID {folder_id} not found")
        if not index.has_folder(destination_id):
            raise DestinationNotFoundError(f"Destination folder {destination_id} not found")
        if index.is_descendant(destination_id, folder_id):
            raise CycleDetectedError()

        folder.parent_id = destination_id
        return folder

    async def _delete_rows(self, model, ids: Set[uuid.UUID]) -> None:
        ids = list(ids)
        for start in range(0, len(ids), DELETE_BATCH_SIZE):
            batch = ids[start:start + DELETE_BATCH_SIZE]
            await self.db.execute(delete(model).where(model.id.in_(batch)))

    async def _commit(self, operation: str) -> None:
        """
        Commit pending changes.

        Raises:
            CommitFailedError: If the commit fails; the session is rolled back
        """
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Commit failed for {operation}: {e}")
            raise CommitFailedError(f"Failed to save {operation}") from e

    @staticmethod
    def _clean_name(name: str) -> str:
        clean_name = InputValidator.sanitize_name(name)
        if clean_name is None:
            raise InvalidNameError(
                f"Name must not be empty or longer than {settings.MAX_NAME_LENGTH} characters"
            )
        return clean_name

    @staticmethod
    def _clean_color(color_hex: Optional[str]) -> Optional[str]:
        try:
            return normalize_color_hex(color_hex)
        except ValueError as e:
            raise ValidationError(str(e)) from None

    @staticmethod
    def _check_links(subject_id: Optional[uuid.UUID], unit_id: Optional[uuid.UUID]) -> None:
        if unit_id is not None and subject_id is None:
            raise ValidationError("A unit link requires a subject link")
