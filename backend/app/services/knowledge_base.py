"""Top-level knowledge-base directories and their file listings."""

import logging
import os
import shutil
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from pydantic import BaseModel

from app.core.errors import filesystem_operation
from app.services.workspace import ASSISTANTS_DIR, Workspace

logger = logging.getLogger(__name__)

FILE_TYPES = {
    ".jpg": "image",
    ".jpeg": "image",
    ".png": "image",
    ".gif": "image",
    ".mp4": "video",
    ".mkv": "video",
    ".avi": "video",
    ".mp3": "audio",
    ".wav": "audio",
    ".aac": "audio",
    ".pdf": "document",
    ".doc": "document",
    ".docx": "document",
    ".txt": "document",
}


class KnowledgeBaseFile(BaseModel):
    name: str
    type: str
    creationTime: str
    updatedTime: str


def classify_file_type(filename: str) -> str:
    """Infer image/video/audio/document from the extension (case-sensitive)."""
    return FILE_TYPES.get(os.path.splitext(filename)[1], "unknown")


def format_timestamp(ts: float, tz: Optional[tzinfo] = None) -> str:
    """RFC 3339 in ``tz`` (local zone by default), seconds precision, ``Z`` for UTC."""
    formatted = datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(tz).isoformat(timespec="seconds")
    if formatted.endswith("+00:00"):
        return formatted[:-6] + "Z"
    return formatted


class KnowledgeBaseStore:
    """Directories directly under the workspace root, other than ``assistants``."""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def create_directory(self, name: str) -> None:
        directory = self.workspace.path(name)
        with filesystem_operation("Failed to create directory"):
            directory.mkdir()
        logger.info("Created knowledge base %s", name)

    def list_directories(self) -> List[str]:
        with filesystem_operation("Failed to read root directory"):
            entries = list(self.workspace.root.iterdir())
        return [
            entry.name
            for entry in entries
            if entry.is_dir() and entry.name != ASSISTANTS_DIR
        ]

    def delete_directory(self, knowledge_base_name: str) -> None:
        """Recursively remove a root-relative directory; absent paths are a no-op."""
        directory = self.workspace.relative_path(knowledge_base_name)
        if not directory.exists():
            return

        with filesystem_operation("Failed to delete directory"):
            if directory.is_dir():
                shutil.rmtree(directory)
            else:
                directory.unlink()
        logger.info("Deleted knowledge base %s", knowledge_base_name)

    def rename_directory(self, current_name: str, new_name: str) -> None:
        current_dir = self.workspace.path(current_name)
        new_dir = self.workspace.path(new_name)

        with filesystem_operation("Failed to rename directory"):
            if new_dir.exists():
                raise FileExistsError(f"Directory already exists: {new_name}")
            os.rename(current_dir, new_dir)
        logger.info("Renamed knowledge base %s -> %s", current_name, new_name)

    def list_files(self, knowledge_base_name: str) -> List[KnowledgeBaseFile]:
        """List regular files in a root-relative directory.

        Sub-directories are skipped, as are entries whose metadata cannot be
        read (e.g. removed while the listing is in progress). Filesystems do
        not portably keep a creation time, so the modification time fills
        both timestamp fields.
        """
        directory = self.workspace.relative_path(knowledge_base_name)
        with filesystem_operation("Failed to read directory"):
            with os.scandir(directory) as it:
                entries = list(it)

        files = []
        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                modified = format_timestamp(entry.stat().st_mtime)
            except OSError:
                continue

            files.append(
                KnowledgeBaseFile(
                    name=entry.name,
                    type=classify_file_type(entry.name),
                    creationTime=modified,
                    updatedTime=modified,
                )
            )

        return files
