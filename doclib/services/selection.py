"""
Selection state for bulk library operations.
"""
import uuid
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Set

from doclib.core.exceptions import ValidationError


@dataclass(frozen=True)
class Selection:
    """Immutable set of selected folders and files."""
    folder_ids: FrozenSet[uuid.UUID] = field(default_factory=frozenset)
    file_ids: FrozenSet[uuid.UUID] = field(default_factory=frozenset)

    @classmethod
    def of(
        cls,
        folder_ids: Iterable[uuid.UUID] = (),
        file_ids: Iterable[uuid.UUID] = ()
    ) -> "Selection":
        return cls(frozenset(folder_ids), frozenset(file_ids))

    @property
    def count(self) -> int:
        return len(self.folder_ids) + len(self.file_ids)

    def __bool__(self) -> bool:
        return self.count > 0


class SelectionController:
    """
    Select-mode controller.

    Entering or exiting select mode clears the selection. Toggling adds an
    item when absent and removes it when present. The library root can never
    be selected.
    """

    def __init__(self, root_id: Optional[uuid.UUID] = None):
        self.root_id = root_id
        self.is_active = False
        self._folder_ids: Set[uuid.UUID] = set()
        self._file_ids: Set[uuid.UUID] = set()

    def enter(self) -> None:
        self.is_active = True
        self.clear()

    def exit(self) -> None:
        self.is_active = False
        self.clear()

    def clear(self) -> None:
        self._folder_ids.clear()
        self._file_ids.clear()

    def toggle_folder(self, folder_id: uuid.UUID) -> bool:
        """
        Toggle a folder's membership.

        Returns:
            bool: True if the folder is selected afterwards

        Raises:
            ValidationError: Outside select mode, or for the library root
        """
        self._require_active()
        if self.root_id is not None and folder_id == self.root_id:
            raise ValidationError("The library root cannot be selected")
        return self._toggle(self._folder_ids, folder_id)

    def toggle_file(self, file_id: uuid.UUID) -> bool:
        """Toggle a file's membership; returns True if selected afterwards."""
        self._require_active()
        return self._toggle(self._file_ids, file_id)

    def is_folder_selected(self, folder_id: uuid.UUID) -> bool:
        return folder_id in self._folder_ids

    def is_file_selected(self, file_id: uuid.UUID) -> bool:
        return file_id in self._file_ids

    @property
    def count(self) -> int:
        return len(self._folder_ids) + len(self._file_ids)

    @property
    def has_selection(self) -> bool:
        """Whether bulk operations are enabled."""
        return self.is_active and self.count > 0

    def snapshot(self) -> Selection:
        return Selection.of(self._folder_ids, self._file_ids)

    def _require_active(self) -> None:
        if not self.is_active:
            raise ValidationError("Select mode is not active")

    @staticmethod
    def _toggle(members: Set[uuid.UUID], item_id: uuid.UUID) -> bool:
        if item_id in members:
            members.remove(item_id)
            return False
        members.add(item_id)
        return True
