"""
Read-only index over the flat collection of library folders and files.
"""
import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Set, Tuple

from doclib.models.folder import LibraryFolder
from doclib.models.file import LibraryFile
from doclib.core.exceptions import CorruptedTreeError


@dataclass
class FolderChildren:
    """Direct children of a folder."""
    folders: List[LibraryFolder] = field(default_factory=list)
    files: List[LibraryFile] = field(default_factory=list)


@dataclass
class Subtree:
    """Every folder and file below a folder, excluding the folder itself."""
    folder_ids: Set[uuid.UUID] = field(default_factory=set)
    file_ids: Set[uuid.UUID] = field(default_factory=set)


def _name_key(node) -> Tuple[str, str]:
    return (node.name.casefold(), str(node.id))


class TreeIndex:
    """
    Index answering structural queries over a snapshot of folder and file rows.

    Children maps are computed once from the snapshot. Upward walks read the
    rows' current ``parent_id`` values, so they stay correct while a batch
    re-parents folders in place.
    """

    def __init__(
        self,
        folders: Iterable[LibraryFolder],
        files: Iterable[LibraryFile] = ()
    ):
        self._folders: Dict[uuid.UUID, LibraryFolder] = {f.id: f for f in folders}
        self._files: Dict[uuid.UUID, LibraryFile] = {f.id: f for f in files}

        self._child_folders: Dict[uuid.UUID, List[LibraryFolder]] = defaultdict(list)
        self._child_files: Dict[uuid.UUID, List[LibraryFile]] = defaultdict(list)

        for folder in self._folders.values():
            if folder.parent_id is not None:
                self._child_folders[folder.parent_id].append(folder)
        for file in self._files.values():
            self._child_files[file.parent_folder_id].append(file)

        for children in self._child_folders.values():
            children.sort(key=_name_key)
        for children in self._child_files.values():
            children.sort(key=_name_key)

    @property
    def folder_count(self) -> int:
        return len(self._folders)

    @property
    def file_count(self) -> int:
        return len(self._files)

    def folders(self) -> List[LibraryFolder]:
        return list(self._folders.values())

    def files(self) -> List[LibraryFile]:
        return list(self._files.values())

    def folder(self, folder_id: uuid.UUID) -> Optional[LibraryFolder]:
        return self._folders.get(folder_id)

    def file(self, file_id: uuid.UUID) -> Optional[LibraryFile]:
        return self._files.get(file_id)

    def has_folder(self, folder_id: uuid.UUID) -> bool:
        return folder_id in self._folders

    def roots(self) -> List[LibraryFolder]:
        """Folders without a parent, sorted by name."""
        roots = [f for f in self._folders.values() if f.parent_id is None]
        return sorted(roots, key=_name_key)

    def children(self, folder_id: uuid.UUID) -> FolderChildren:
        """Direct child folders and files of a folder, sorted by name."""
        return FolderChildren(
            folders=list(self._child_folders.get(folder_id, ())),
            files=list(self._child_files.get(folder_id, ())),
        )

    def iter_ancestors(self, folder_id: uuid.UUID) -> Iterator[LibraryFolder]:
        """
        Yield the ancestors of a folder, nearest first.

        The walk is bounded by the number of folders in the index; a chain
        longer than that can only come from a cycle.

        Raises:
            CorruptedTreeError: If the parent chain does not terminate
        """
        folder = self._folders.get(folder_id)
        parent_id = folder.parent_id if folder is not None else None
        steps = 0

        while parent_id is not None:
            steps += 1
            if steps > len(self._folders):
                raise CorruptedTreeError(
                    f"Parent chain of folder {folder_id} does not terminate"
                )

            parent = self._folders.get(parent_id)
            if parent is None:
                # Dangling parent reference ends the chain
                return
            yield parent
            parent_id = parent.parent_id

    def ancestors(self, folder_id: uuid.UUID) -> List[LibraryFolder]:
        return list(self.iter_ancestors(folder_id))

    def is_descendant(self, candidate_id: uuid.UUID, ancestor_id: uuid.UUID) -> bool:
        """
        Check whether ``candidate_id`` lies strictly below ``ancestor_id``.

        A folder is never its own descendant; identity is checked by callers.
        """
        for folder in self.iter_ancestors(candidate_id):
            if folder.id == ancestor_id:
                return True
        return False

    def path(self, folder_id: uuid.UUID) -> List[str]:
        """Folder names from the root down to ``folder_id``."""
        folder = self._folders.get(folder_id)
        if folder is None:
            return []
        names = [a.name for a in self.iter_ancestors(folder_id)]
        names.reverse()
        names.append(folder.name)
        return names

    def subtree(self, folder_id: uuid.UUID) -> Subtree:
        """
        Collect every descendant folder and file of a folder.

        Uses an explicit stack so deep trees cannot exhaust the call stack.

        Raises:
            CorruptedTreeError: If a folder is reached twice
        """
        result = Subtree()
        stack = [folder_id]
        visited = {folder_id}

        while stack:
            current = stack.pop()
            result.file_ids.update(f.id for f in self._child_files.get(current, ()))

            for child in self._child_folders.get(current, ()):
                if child.id in visited:
                    raise CorruptedTreeError(
                        f"Folder {child.id} is reachable more than once below {folder_id}"
                    )
                visited.add(child.id)
                result.folder_ids.add(child.id)
                stack.append(child.id)

        return result

    def walk(self, start_ids: Optional[Iterable[uuid.UUID]] = None) -> Iterator[Tuple[LibraryFolder, int]]:
        """
        Yield ``(folder, depth)`` pairs root-first, depth-first.

        Args:
            start_ids: Folders to start from (defaults to the roots)
        """
        if start_ids is None:
            starts = self.roots()
        else:
            starts = [self._folders[i] for i in start_ids if i in self._folders]

        stack = [(folder, 0) for folder in reversed(starts)]
        visited: Set[uuid.UUID] = set()

        while stack:
            folder, depth = stack.pop()
            if folder.id in visited:
                raise CorruptedTreeError(f"Folder {folder.id} is reachable more than once")
            visited.add(folder.id)
            yield folder, depth

            for child in reversed(self._child_folders.get(folder.id, ())):
                stack.append((child, depth + 1))

    def blocked_destinations(self, moving_folder_ids: Iterable[uuid.UUID]) -> Set[uuid.UUID]:
        """Folders that cannot receive any of the moving folders."""
        blocked: Set[uuid.UUID] = set()
        for folder_id in moving_folder_ids:
            if folder_id not in self._folders:
                continue
            blocked.add(folder_id)
            blocked.update(self.subtree(folder_id).folder_ids)
        return blocked
