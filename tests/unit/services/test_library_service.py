"""
Unit tests for library service.
"""
import pytest
import uuid
from unittest.mock import AsyncMock
from sqlalchemy import select, func, update
from sqlalchemy.exc import OperationalError

from doclib.models.folder import LibraryFolder
from doclib.models.file import LibraryFile
from doclib.models.node import NodeKind
from doclib.schemas.folder import FolderUpdate
from doclib.services.dragdrop import DragItem
from doclib.services.selection import Selection
from doclib.core.config import settings
from doclib.core.exceptions import (
    NotFoundError, ValidationError, InvalidNameError, RootDeletionForbiddenError,
    SelfMoveError, CycleDetectedError, DestinationNotFoundError, CommitFailedError,
    CorruptedTreeError
)

PDF_BYTES = b"%PDF-1.4\n%test\n"


async def count_rows(db, model) -> int:
    return (await db.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.unit
class TestFolderCreation:
    """Test cases for folder creation."""

    async def test_create_folder(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "  Math  ", "#3b82f6")

        assert folder.name == "Math"
        assert folder.parent_id == root_folder.id
        assert folder.color_hex == "#3B82F6"
        assert folder.created_at is not None

    async def test_create_folder_default_name(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id)

        assert folder.name == settings.DEFAULT_FOLDER_NAME
        assert folder.color_hex is None

    async def test_create_folder_missing_parent(self, library_service, root_folder):
        with pytest.raises(DestinationNotFoundError):
            await library_service.create_folder(uuid.uuid4(), "Orphan")

    async def test_create_folder_blank_name(self, library_service, root_folder):
        with pytest.raises(InvalidNameError):
            await library_service.create_folder(root_folder.id, "   ")

    async def test_create_folder_invalid_color(self, library_service, root_folder):
        with pytest.raises(ValidationError):
            await library_service.create_folder(root_folder.id, "Math", "blue")


@pytest.mark.unit
class TestFileCreation:
    """Test cases for file import."""

    async def test_create_file(self, library_service, root_folder):
        subject_id, unit_id = uuid.uuid4(), uuid.uuid4()

        file = await library_service.create_file(
            root_folder.id, "Worksheet", PDF_BYTES, subject_id=subject_id, unit_id=unit_id
        )

        assert file.name == "Worksheet"
        assert file.parent_folder_id == root_folder.id
        assert file.file_size == len(PDF_BYTES)
        assert file.linked_subject_id == subject_id
        assert file.linked_unit_id == unit_id

    async def test_create_file_sanitizes_name(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "quiz: week/1", PDF_BYTES)
        assert file.name == "quiz week1"

    async def test_create_file_unusable_name_falls_back(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "???", PDF_BYTES)
        assert file.name == "Untitled"

    async def test_create_file_too_large(self, library_service, root_folder, monkeypatch):
        monkeypatch.setattr(settings, "MAX_FILE_SIZE", 4)

        with pytest.raises(ValidationError):
            await library_service.create_file(root_folder.id, "big", PDF_BYTES)

    async def test_create_file_unit_requires_subject(self, library_service, root_folder):
        with pytest.raises(ValidationError):
            await library_service.create_file(root_folder.id, "x", PDF_BYTES, unit_id=uuid.uuid4())

    async def test_create_file_missing_folder(self, library_service, root_folder):
        with pytest.raises(DestinationNotFoundError):
            await library_service.create_file(uuid.uuid4(), "x", PDF_BYTES)

    async def test_get_file_with_payload(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "x", PDF_BYTES)

        loaded = await library_service.get_file(file.id, with_payload=True)

        assert loaded.payload == PDF_BYTES

    async def test_get_file_not_found(self, library_service, root_folder):
        with pytest.raises(NotFoundError):
            await library_service.get_file(uuid.uuid4())


@pytest.mark.unit
class TestRenameAndRecolor:
    """Test cases for rename and recolor."""

    async def test_rename_folder(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Math")

        renamed = await library_service.rename_folder(folder.id, " Mathematics ")

        assert renamed.name == "Mathematics"

    async def test_rename_folder_blank_keeps_old_name(self, library_service, root_folder, test_db):
        folder = await library_service.create_folder(root_folder.id, "Reports")

        with pytest.raises(InvalidNameError):
            await library_service.rename_folder(folder.id, "   ")

        await test_db.refresh(folder)
        assert folder.name == "Reports"

    async def test_rename_folder_too_long(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Math")

        with pytest.raises(InvalidNameError):
            await library_service.rename_folder(folder.id, "m" * (settings.MAX_NAME_LENGTH + 1))

    async def test_rename_missing_folder(self, library_service, root_folder):
        with pytest.raises(NotFoundError):
            await library_service.rename_folder(uuid.uuid4(), "Math")

    async def test_rename_file(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "draft", PDF_BYTES)

        renamed = await library_service.rename_file(file.id, "final")

        assert renamed.name == "final"

    async def test_rename_file_blank(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "draft", PDF_BYTES)

        with pytest.raises(InvalidNameError):
            await library_service.rename_file(file.id, "")

    async def test_rename_file_follows_filename_rules(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "draft", PDF_BYTES)

        renamed = await library_service.rename_file(file.id, 'a/b"c')

        assert renamed.name == "abc"

    async def test_rename_file_only_reserved_characters(self, library_service, root_folder, test_db):
        file = await library_service.create_file(root_folder.id, "draft", PDF_BYTES)

        with pytest.raises(InvalidNameError):
            await library_service.rename_file(file.id, '/:*?"<>|')

        await test_db.refresh(file)
        assert file.name == "draft"

    async def test_update_folder_name_and_color(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Reports")

        updated = await library_service.update_folder(
            folder.id, FolderUpdate(name=" Archive ", color_hex="#ef4444")
        )

        assert updated.name == "Archive"
        assert updated.color_hex == "#EF4444"

    async def test_update_folder_only_set_fields(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Reports", "#10B981")

        updated = await library_service.update_folder(folder.id, FolderUpdate(color_hex=None))

        assert updated.name == "Reports"
        assert updated.color_hex is None

    async def test_update_folder_rejected_name_applies_nothing(self, library_service, root_folder, test_db):
        folder = await library_service.create_folder(root_folder.id, "Reports", "#10B981")

        with pytest.raises(InvalidNameError):
            await library_service.update_folder(
                folder.id, FolderUpdate(name="   ", color_hex="#EF4444")
            )

        await test_db.refresh(folder)
        assert folder.name == "Reports"
        assert folder.color_hex == "#10B981"

    async def test_recolor_and_reset(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Math")

        recolored = await library_service.recolor_folder(folder.id, "#ef4444")
        assert recolored.color_hex == "#EF4444"

        reset = await library_service.recolor_folder(folder.id, None)
        assert reset.color_hex is None

    async def test_recolor_invalid(self, library_service, root_folder):
        folder = await library_service.create_folder(root_folder.id, "Math")

        with pytest.raises(ValidationError):
            await library_service.recolor_folder(folder.id, "#12345")


@pytest.mark.unit
class TestDeletion:
    """Test cases for folder and file deletion."""

    async def test_delete_folder_removes_subtree_only(self, library_service, root_folder, test_db):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(a.id, "B")
        c = await library_service.create_folder(b.id, "C")
        keep = await library_service.create_folder(root_folder.id, "Keep")
        await library_service.create_file(a.id, "a-file", PDF_BYTES)
        await library_service.create_file(c.id, "c-file", PDF_BYTES)
        kept_file = await library_service.create_file(keep.id, "kept", PDF_BYTES)

        result = await library_service.delete_folder(a.id)

        assert result.folders_deleted == 3
        assert result.files_deleted == 2
        remaining_folders = set((await test_db.execute(select(LibraryFolder.id))).scalars())
        remaining_files = set((await test_db.execute(select(LibraryFile.id))).scalars())
        assert remaining_folders == {root_folder.id, keep.id}
        assert remaining_files == {kept_file.id}

    async def test_delete_root_forbidden(self, library_service, root_folder, test_db):
        await library_service.create_folder(root_folder.id, "A")

        with pytest.raises(RootDeletionForbiddenError):
            await library_service.delete_folder(root_folder.id)

        assert await count_rows(test_db, LibraryFolder) == 2

    async def test_delete_missing_folder(self, library_service, root_folder):
        with pytest.raises(NotFoundError):
            await library_service.delete_folder(uuid.uuid4())

    async def test_delete_file_leaves_folder(self, library_service, root_folder, test_db):
        folder = await library_service.create_folder(root_folder.id, "A")
        file = await library_service.create_file(folder.id, "x", PDF_BYTES)

        await library_service.delete_file(file.id)

        assert await count_rows(test_db, LibraryFile) == 0
        assert (await library_service.get_folder(folder.id)).name == "A"


@pytest.mark.unit
class TestMoves:
    """Test cases for moving folders and files."""

    async def test_move_folder(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(root_folder.id, "B")

        moved = await library_service.move_folder(b.id, a.id)

        assert moved.parent_id == a.id

    async def test_move_folder_into_itself(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")

        with pytest.raises(SelfMoveError):
            await library_service.move_folder(a.id, a.id)

        assert (await library_service.get_folder(a.id)).parent_id == root_folder.id

    async def test_move_folder_into_descendant(self, library_service, root_folder, test_db):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(a.id, "B")

        with pytest.raises(CycleDetectedError):
            await library_service.move_folder(a.id, b.id)

        await test_db.refresh(a)
        await test_db.refresh(b)
        assert a.parent_id == root_folder.id
        assert b.parent_id == a.id

    async def test_move_root_is_rejected(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")

        with pytest.raises(CycleDetectedError):
            await library_service.move_folder(root_folder.id, a.id)

    async def test_move_folder_missing_destination(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")

        with pytest.raises(DestinationNotFoundError):
            await library_service.move_folder(a.id, uuid.uuid4())

    async def test_move_missing_folder(self, library_service, root_folder):
        with pytest.raises(NotFoundError):
            await library_service.move_folder(uuid.uuid4(), root_folder.id)

    async def test_move_file(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(root_folder.id, "B")
        file = await library_service.create_file(a.id, "x", PDF_BYTES)

        await library_service.move_file(file.id, b.id)

        assert (await library_service.list_children(a.id)).files == []
        assert [f.name for f in (await library_service.list_children(b.id)).files] == ["x"]

    async def test_move_file_missing_destination(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "x", PDF_BYTES)

        with pytest.raises(DestinationNotFoundError):
            await library_service.move_file(file.id, uuid.uuid4())

    async def test_drop_dispatches_by_kind(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(root_folder.id, "B")
        file = await library_service.create_file(root_folder.id, "x", PDF_BYTES)

        await library_service.drop(DragItem(NodeKind.FOLDER, b.id), a.id)
        await library_service.drop(DragItem(NodeKind.FILE, file.id), a.id)

        children = await library_service.list_children(a.id)
        assert [f.id for f in children.folders] == [b.id]
        assert [f.id for f in children.files] == [file.id]


@pytest.mark.unit
class TestBulkOperations:
    """Test cases for bulk move and delete."""

    async def test_bulk_delete_cascades(self, library_service, root_folder, test_db):
        f1 = await library_service.create_folder(root_folder.id, "F1")
        await library_service.create_folder(f1.id, "F2")
        f3 = await library_service.create_folder(root_folder.id, "F3")
        g1 = await library_service.create_file(f1.id, "g1", PDF_BYTES)
        await library_service.create_file(f3.id, "g2", PDF_BYTES)

        result = await library_service.bulk_delete(Selection.of([f1.id], [g1.id]))

        assert result.skipped == []
        assert len(result.succeeded) == 2
        remaining = set((await test_db.execute(select(LibraryFolder.name))).scalars())
        assert remaining == {"Library", "F3"}
        assert [f.name for f in (await test_db.execute(select(LibraryFile))).scalars()] == ["g2"]

    async def test_bulk_delete_skips_root(self, library_service, root_folder, test_db):
        a = await library_service.create_folder(root_folder.id, "A")

        result = await library_service.bulk_delete(Selection.of([root_folder.id, a.id]))

        assert [s.code for s in result.skipped] == ["ROOT_DELETION_FORBIDDEN"]
        assert result.succeeded == [DragItem(NodeKind.FOLDER, a.id)]
        assert await count_rows(test_db, LibraryFolder) == 1

    async def test_bulk_delete_nested_selection(self, library_service, root_folder, test_db):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(a.id, "B")

        result = await library_service.bulk_delete(Selection.of([a.id, b.id]))

        assert len(result.succeeded) == 2
        assert result.skipped == []
        assert await count_rows(test_db, LibraryFolder) == 1

    async def test_bulk_move_reports_skips(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(a.id, "B")
        c = await library_service.create_folder(root_folder.id, "C")
        file = await library_service.create_file(c.id, "x", PDF_BYTES)
        missing = uuid.uuid4()

        result = await library_service.bulk_move(
            Selection.of([a.id, b.id, c.id, missing], [file.id]), b.id
        )

        skipped = {s.id: s.code for s in result.skipped}
        assert skipped == {a.id: "CYCLE_DETECTED", b.id: "SELF_MOVE", missing: "NOT_FOUND"}
        assert set(result.succeeded) == {
            DragItem(NodeKind.FOLDER, c.id), DragItem(NodeKind.FILE, file.id)
        }
        assert (await library_service.get_folder(c.id)).parent_id == b.id
        assert (await library_service.get_file(file.id)).parent_folder_id == b.id
        assert (await library_service.get_folder(a.id)).parent_id == root_folder.id

    async def test_bulk_move_missing_destination(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")

        with pytest.raises(DestinationNotFoundError):
            await library_service.bulk_move(Selection.of([a.id]), uuid.uuid4())

    async def test_bulk_move_keeps_tree_acyclic(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(root_folder.id, "B")
        await library_service.move_folder(b.id, a.id)

        result = await library_service.bulk_move(Selection.of([a.id]), b.id)

        assert [s.code for s in result.skipped] == ["CYCLE_DETECTED"]
        index = await library_service.load_index()
        assert index.path(b.id) == ["Library", "A", "B"]

    async def test_failed_bulk_move_leaves_nothing_pending(self, library_service, root_folder, test_db):
        x = await library_service.create_folder(root_folder.id, "X")
        y = await library_service.create_folder(root_folder.id, "Y")
        a = await library_service.create_folder(root_folder.id, "A")
        file = await library_service.create_file(a.id, "f", PDF_BYTES)
        await test_db.execute(
            update(LibraryFolder).where(LibraryFolder.id == x.id).values(parent_id=y.id)
        )
        await test_db.execute(
            update(LibraryFolder).where(LibraryFolder.id == y.id).values(parent_id=x.id)
        )
        await test_db.commit()
        root_id, a_id, file_id = root_folder.id, a.id, file.id

        with pytest.raises(CorruptedTreeError):
            await library_service.bulk_move(Selection.of([a.id], [file.id]), x.id)

        # A later commit on the same session must not carry the failed move
        await library_service.recolor_folder(root_id, "#EF4444")

        parent_id = (await test_db.execute(
            select(LibraryFile.parent_folder_id).where(LibraryFile.id == file_id)
        )).scalar_one()
        assert parent_id == a_id


@pytest.mark.unit
class TestFolderQueries:
    """Test cases for folder info, children and move destinations."""

    async def test_list_children_sorted(self, library_service, root_folder):
        await library_service.create_folder(root_folder.id, "beta")
        await library_service.create_folder(root_folder.id, "Alpha")

        children = await library_service.list_children(root_folder.id)

        assert [f.name for f in children.folders] == ["Alpha", "beta"]

    async def test_list_children_missing_folder(self, library_service, root_folder):
        with pytest.raises(NotFoundError):
            await library_service.list_children(uuid.uuid4())

    async def test_folder_info(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A", "#10B981")
        await library_service.create_folder(a.id, "B")
        await library_service.create_file(a.id, "x", PDF_BYTES)
        await library_service.create_file(a.id, "y", PDF_BYTES)

        info = await library_service.folder_info(a.id)

        assert info.file_count == 2
        assert info.subfolder_count == 1
        assert info.color_name == "Green"
        assert info.parent_name == "Library"
        assert info.path == ["Library", "A"]

    async def test_root_folder_info(self, library_service, root_folder):
        info = await library_service.folder_info(root_folder.id)

        assert info.parent_name == "Root"
        assert info.color_name == "Blue (Default)"

    async def test_move_destinations(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "A")
        b = await library_service.create_folder(a.id, "B")
        c = await library_service.create_folder(root_folder.id, "C")

        destinations = await library_service.move_destinations([a.id])

        assert [(d.name, d.depth, d.disabled) for d in destinations] == [
            ("Library", 0, False),
            ("A", 1, True),
            ("B", 2, True),
            ("C", 1, False),
        ]
        assert {d.id for d in destinations} == {root_folder.id, a.id, b.id, c.id}

    async def test_duplicate_folder(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "Unit 1", "#A855F7")
        await library_service.create_folder(a.id, "Inner")

        duplicate = await library_service.duplicate_folder(a.id)

        assert duplicate.name == "Unit 1 Copy"
        assert duplicate.parent_id == root_folder.id
        assert duplicate.color_hex == "#A855F7"
        assert (await library_service.list_children(duplicate.id)).folders == []

    async def test_duplicate_long_name_fits(self, library_service, root_folder):
        a = await library_service.create_folder(root_folder.id, "n" * settings.MAX_NAME_LENGTH)

        duplicate = await library_service.duplicate_folder(a.id)

        assert len(duplicate.name) <= settings.MAX_NAME_LENGTH
        assert duplicate.name.endswith(" Copy")

    async def test_duplicate_root_rejected(self, library_service, root_folder):
        with pytest.raises(ValidationError):
            await library_service.duplicate_folder(root_folder.id)


@pytest.mark.unit
class TestLinks:
    """Test cases for subject and unit links."""

    async def test_link_file(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "x", PDF_BYTES)
        subject_id = uuid.uuid4()

        linked = await library_service.link_file(file.id, subject_id, None)

        assert linked.linked_subject_id == subject_id
        assert linked.linked_unit_id is None

    async def test_link_unit_without_subject(self, library_service, root_folder):
        file = await library_service.create_file(root_folder.id, "x", PDF_BYTES)

        with pytest.raises(ValidationError):
            await library_service.link_file(file.id, None, uuid.uuid4())

    async def test_unlink_references(self, library_service, root_folder, test_db):
        subject_id, unit_id = uuid.uuid4(), uuid.uuid4()
        linked = await library_service.create_file(
            root_folder.id, "a", PDF_BYTES, subject_id=subject_id, unit_id=unit_id
        )
        other = await library_service.create_file(
            root_folder.id, "b", PDF_BYTES, subject_id=uuid.uuid4()
        )

        count = await library_service.unlink_references(unit_id=unit_id)

        assert count == 1
        await test_db.refresh(linked)
        await test_db.refresh(other)
        assert linked.linked_unit_id is None
        assert linked.linked_subject_id == subject_id
        assert other.linked_subject_id is not None

    async def test_unlink_requires_reference(self, library_service, root_folder):
        with pytest.raises(ValidationError):
            await library_service.unlink_references()


@pytest.mark.unit
class TestCommitFailures:
    """Test cases for persistence failures."""

    async def test_commit_failure_rolls_back(self, library_service, root_folder, test_db, monkeypatch):
        folder = await library_service.create_folder(root_folder.id, "Reports")
        monkeypatch.setattr(
            test_db,
            "commit",
            AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))
        )

        with pytest.raises(CommitFailedError):
            await library_service.rename_folder(folder.id, "Archive")

        monkeypatch.undo()
        await test_db.refresh(folder)
        assert folder.name == "Reports"

    async def test_commit_failure_on_create(self, library_service, root_folder, test_db, monkeypatch):
        monkeypatch.setattr(
            test_db,
            "commit",
            AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))
        )

        with pytest.raises(CommitFailedError):
            await library_service.create_folder(root_folder.id, "Lost")

        monkeypatch.undo()
        assert await count_rows(test_db, LibraryFolder) == 1
