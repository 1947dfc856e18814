"""
Tests for the filesystem-backed services.

These tests exercise the stores directly against a temporary workspace:
1. Path resolution stays inside the workspace root
2. The "Lets Chat" history directory rule
3. File type classification and knowledge-base listings
"""

import io
import os
from datetime import datetime, timedelta, timezone

import pytest

from app.core.errors import (
    InvalidIdentifierError,
    ResourceNotFoundError,
    ResourceOperationError,
    filesystem_operation,
)
from app.services.assistants import AssistantStore
from app.services.chat import RANDOM_RESPONSES, pick_response
from app.services.history import HistoryStore, resolve_history_dir
from app.services.knowledge_base import KnowledgeBaseStore, classify_file_type, format_timestamp
from app.services.workspace import encode_text


class TestWorkspacePaths:
    """Tests for Workspace path composition."""

    def test_path_joins_under_root(self, workspace):
        assert workspace.path("assistants", "Helper") == workspace.root / "assistants" / "Helper"

    def test_names_with_spaces_allowed(self, workspace):
        assert workspace.path("Lets Chat").name == "Lets Chat"

    @pytest.mark.parametrize("name", ["", "   ", ".", "..", "a/b", "a\\b", "nul\x00"])
    def test_unsafe_names_rejected(self, workspace, name):
        with pytest.raises(InvalidIdentifierError):
            workspace.path(name)

    def test_relative_path_allows_nested_segments(self, workspace):
        resolved = workspace.relative_path("assistants/X/KnowledgeBase")
        assert resolved == workspace.root / "assistants" / "X" / "KnowledgeBase"

    def test_relative_path_traversal_rejected(self, workspace):
        with pytest.raises(InvalidIdentifierError):
            workspace.relative_path("../outside")
        with pytest.raises(InvalidIdentifierError):
            workspace.relative_path("assistants/../..")

    def test_relative_path_rejects_root_and_absolute(self, workspace):
        with pytest.raises(InvalidIdentifierError):
            workspace.relative_path(".")
        with pytest.raises(InvalidIdentifierError):
            workspace.relative_path(str(workspace.root / "x"))


class TestFilesystemOperation:
    """Tests for OSError translation."""

    def test_missing_file_maps_to_not_found(self):
        with pytest.raises(ResourceNotFoundError) as exc_info:
            with filesystem_operation("Failed to read roleSetting file"):
                raise FileNotFoundError("gone")
        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Failed to read roleSetting file"

    def test_other_os_errors_map_to_operation_failed(self):
        with pytest.raises(ResourceOperationError) as exc_info:
            with filesystem_operation("Failed to rename directory"):
                raise PermissionError("denied")
        assert exc_info.value.status_code == 500


class TestAssistantStore:
    """Tests for AssistantStore."""

    def test_create_writes_layout(self, workspace):
        store = AssistantStore(workspace)
        store.create("Helper", "You are helpful.")

        assistant_dir = workspace.root / "assistants" / "Helper"
        assert (assistant_dir / "KnowledgeBase").is_dir()
        assert (assistant_dir / "roleSetting.txt").read_text() == "You are helpful."

    def test_role_setting_preserved_byte_for_byte(self, workspace):
        store = AssistantStore(workspace)
        store.create("Helper", "line one\r\nline two\n")
        assert store.get_role_setting("Helper").roleSetting == "line one\r\nline two\n"

    def test_update_requires_existing_assistant(self, workspace):
        store = AssistantStore(workspace)
        with pytest.raises(ResourceNotFoundError):
            store.update_role_setting("Ghost", "text")

    def test_rename_onto_existing_fails(self, workspace):
        store = AssistantStore(workspace)
        store.create("A", "")
        store.create("B", "")
        with pytest.raises(ResourceOperationError):
            store.rename("A", "B")
        assert (workspace.root / "assistants" / "A").is_dir()

    def test_list_skips_plain_files(self, workspace):
        store = AssistantStore(workspace)
        store.create("A", "")
        (workspace.root / "assistants" / "notes.txt").write_text("x")

        assert [a.title for a in store.list_assistants()] == ["A"]

    def test_list_without_assistants_dir_is_empty(self, workspace):
        assert AssistantStore(workspace).list_assistants() == []

    def test_save_upload_uses_basename_and_overwrites(self, workspace):
        store = AssistantStore(workspace)
        store.save_upload("X", "../../photo.jpg", io.BytesIO(b"first"))
        destination = store.save_upload("X", "photo.jpg", io.BytesIO(b"second"))

        assert destination == workspace.root / "assistants" / "X" / "KnowledgeBase" / "photo.jpg"
        assert destination.read_bytes() == b"second"


class TestHistoryDirRule:
    """Tests for resolve_history_dir."""

    def test_lets_chat_uses_root_history(self, workspace):
        assert resolve_history_dir(workspace, "Lets Chat") == workspace.root / "History"

    def test_other_titles_use_assistant_history(self, workspace):
        assert resolve_history_dir(workspace, "Helper") == workspace.root / "assistants" / "Helper" / "History"

    def test_sentinel_is_exact_match(self, workspace):
        assert resolve_history_dir(workspace, "lets chat") == workspace.root / "assistants" / "lets chat" / "History"


class TestHistoryStore:
    """Tests for HistoryStore."""

    def test_create_then_fetch_returns_empty_object(self, workspace):
        store = HistoryStore(workspace)
        file_id = store.create("Lets Chat")

        assert (workspace.root / "History" / f"{file_id}.json").is_file()
        assert store.fetch("Lets Chat", file_id) == "{}"

    def test_update_stores_non_json_verbatim(self, workspace):
        store = HistoryStore(workspace)
        file_id = store.create("Helper")
        store.update_context("Helper", file_id, "hello")

        assert store.fetch("Helper", file_id) == "hello"

    def test_list_root_only_json_files(self, workspace):
        store = HistoryStore(workspace)
        file_id = store.create("Lets Chat")
        (workspace.root / "History" / "readme.txt").write_text("x")
        (workspace.root / "History" / "nested.json").mkdir()

        assert store.list_root() == [f"{file_id}.json"]

    def test_list_root_without_directory_is_empty(self, workspace):
        assert HistoryStore(workspace).list_root() == []

    def test_delete_missing_record_fails(self, workspace):
        store = HistoryStore(workspace)
        store.create("Lets Chat")
        with pytest.raises(ResourceNotFoundError):
            store.delete("Lets Chat", "does-not-exist")

    def test_history_id_cannot_escape(self, workspace):
        with pytest.raises(InvalidIdentifierError):
            HistoryStore(workspace).fetch("Lets Chat", "../secret")


class TestKnowledgeBaseStore:
    """Tests for KnowledgeBaseStore and classify_file_type."""

    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("photo.jpg", "image"),
            ("clip.mkv", "video"),
            ("song.aac", "audio"),
            ("report.docx", "document"),
            ("archive.zip", "unknown"),
            ("noextension", "unknown"),
            ("PHOTO.JPG", "unknown"),
        ],
    )
    def test_classify_file_type(self, filename, expected):
        assert classify_file_type(filename) == expected

    def test_list_directories_excludes_assistants(self, workspace):
        store = KnowledgeBaseStore(workspace)
        AssistantStore(workspace).create("Helper", "")
        store.create_directory("Research")
        (workspace.root / "loose.txt").write_text("x")

        assert store.list_directories() == ["Research"]

    def test_create_existing_directory_fails(self, workspace):
        store = KnowledgeBaseStore(workspace)
        store.create_directory("Research")
        with pytest.raises(ResourceOperationError):
            store.create_directory("Research")

    def test_list_files_skips_directories_and_reuses_mtime(self, workspace):
        store = KnowledgeBaseStore(workspace)
        store.create_directory("Research")
        (workspace.root / "Research" / "paper.pdf").write_bytes(b"%PDF")
        (workspace.root / "Research" / "sub").mkdir()

        files = store.list_files("Research")

        assert len(files) == 1
        assert files[0].name == "paper.pdf"
        assert files[0].type == "document"
        assert files[0].creationTime == files[0].updatedTime

    def test_list_files_missing_directory(self, workspace):
        with pytest.raises(ResourceNotFoundError):
            KnowledgeBaseStore(workspace).list_files("Nope")

    def test_delete_missing_directory_is_noop(self, workspace):
        KnowledgeBaseStore(workspace).delete_directory("Nope")

    def test_rename_directory(self, workspace):
        store = KnowledgeBaseStore(workspace)
        store.create_directory("Old")
        store.rename_directory("Old", "New")

        assert store.list_directories() == ["New"]
        assert not os.path.exists(workspace.root / "Old")


class TestChat:
    def test_pick_response_from_fixed_list(self):
        for _ in range(20):
            assert pick_response("anything") in RANDOM_RESPONSES


class TestStoredText:
    """Tests for encode_text and format_timestamp."""

    def test_encode_text_plain(self):
        assert encode_text("héllo\r\n") == "héllo\r\n".encode("utf-8")

    def test_encode_text_replaces_unpaired_surrogates(self):
        assert encode_text("a\ud800b\udfff") == "a\ufffdb\ufffd".encode("utf-8")

    def test_role_setting_with_surrogate_written(self, workspace):
        store = AssistantStore(workspace)
        store.create("A", "\ud800")
        assert store.get_role_setting("A").roleSetting == "\ufffd"

    def test_context_with_surrogate_written(self, workspace):
        store = HistoryStore(workspace)
        file_id = store.create("Lets Chat")
        store.update_context("Lets Chat", file_id, "ok\udc00")
        assert store.fetch("Lets Chat", file_id) == "ok\ufffd"

    def test_surrogate_in_name_rejected(self, workspace):
        with pytest.raises(InvalidIdentifierError):
            workspace.path("bad\ud800")

    def test_utc_timestamp_uses_z_suffix(self):
        ts = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc).timestamp()
        assert format_timestamp(ts, timezone.utc) == "2024-05-01T12:30:15Z"

    def test_offset_timestamp_keeps_offset(self):
        ts = datetime(2024, 5, 1, 12, 30, 15, tzinfo=timezone.utc).timestamp()
        assert format_timestamp(ts, timezone(timedelta(hours=2))) == "2024-05-01T14:30:15+02:00"
