"""Assistant store: one directory per assistant under ``assistants/``.

Layout::

    assistants/<title>/roleSetting.txt
    assistants/<title>/KnowledgeBase/
    assistants/<title>/History/
"""

import logging
import os
import shutil
from pathlib import Path
from typing import BinaryIO, List

from pydantic import BaseModel

from app.core.errors import filesystem_operation
from app.services.workspace import (
    KNOWLEDGE_BASE_DIR,
    ROLE_SETTING_FILE,
    Workspace,
    encode_text,
)

logger = logging.getLogger(__name__)

DEFAULT_AVATAR = "🤖"
UPLOAD_CHUNK_SIZE = 1024 * 1024


class AssistantSummary(BaseModel):
    title: str
    avatar: str = DEFAULT_AVATAR


class RoleSetting(BaseModel):
    title: str
    roleSetting: str


class AssistantStore:
    """Filesystem-backed assistant operations."""

    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def create(self, title: str, role_setting: str) -> None:
        assistant_dir = self.workspace.assistant_dir(title)

        with filesystem_operation("Failed to create assistant directory"):
            (assistant_dir / KNOWLEDGE_BASE_DIR).mkdir(parents=True, exist_ok=True)

        # A failure here leaves the directory in place; nothing is rolled back.
        with filesystem_operation("Failed to create roleSetting file"):
            (assistant_dir / ROLE_SETTING_FILE).write_bytes(encode_text(role_setting))

        logger.info("Created assistant %s", title)

    def update_role_setting(self, title: str, role_setting: str) -> None:
        """Overwrite the role setting; the assistant directory must already exist."""
        role_file = self.workspace.assistant_dir(title) / ROLE_SETTING_FILE
        with filesystem_operation("Failed to update roleSetting file"):
            role_file.write_bytes(encode_text(role_setting))
        logger.info("Updated role setting for %s", title)

    def rename(self, current_title: str, new_title: str) -> None:
        current_dir = self.workspace.assistant_dir(current_title)
        new_dir = self.workspace.assistant_dir(new_title)

        with filesystem_operation("Failed to rename assistant directory"):
            if new_dir.exists():
                raise FileExistsError(f"Assistant already exists: {new_title}")
            os.rename(current_dir, new_dir)

        logger.info("Renamed assistant %s -> %s", current_title, new_title)

    def delete(self, title: str) -> None:
        """Remove the assistant directory tree. Absent assistants are a no-op."""
        assistant_dir = self.workspace.assistant_dir(title)
        if not assistant_dir.exists():
            return

        with filesystem_operation("Failed to delete assistant directory"):
            shutil.rmtree(assistant_dir)
        logger.info("Deleted assistant %s", title)

    def list_assistants(self) -> List[AssistantSummary]:
        assistants_dir = self.workspace.assistants_dir
        if not assistants_dir.is_dir():
            return []

        with filesystem_operation("Failed to read assistants directory"):
            entries = list(assistants_dir.iterdir())

        return [AssistantSummary(title=entry.name) for entry in entries if entry.is_dir()]

    def get_role_setting(self, title: str) -> RoleSetting:
        role_file = self.workspace.assistant_dir(title) / ROLE_SETTING_FILE
        with filesystem_operation("Failed to read roleSetting file"):
            content = role_file.read_bytes().decode("utf-8", errors="replace")
        return RoleSetting(title=title, roleSetting=content)

    def save_upload(self, title: str, filename: str, source: BinaryIO) -> Path:
        """Stream an uploaded file into the assistant's knowledge base.

        The knowledge-base directory is created if missing and an existing
        file of the same name is overwritten. Bytes are copied in chunks so
        the payload is never held in memory; an interrupted copy leaves a
        partial file behind.

        Args:
            title: Assistant title.
            filename: Client-supplied file name. Only its final component is used.
            source: Readable binary stream positioned at the start of the upload.

        Returns:
            Path of the written file.
        """
        knowledge_base_dir = self.workspace.assistant_dir(title) / KNOWLEDGE_BASE_DIR
        safe_name = self.workspace.validate_name(Path(filename or "").name, "File name")

        with filesystem_operation("Failed to create KnowledgeBase directory"):
            knowledge_base_dir.mkdir(parents=True, exist_ok=True)

        destination = knowledge_base_dir / safe_name
        with filesystem_operation("Failed to save file"):
            with open(destination, "wb") as dst:
                shutil.copyfileobj(source, dst, UPLOAD_CHUNK_SIZE)

        logger.info("Upload saved: assistant=%s filename=%s", title, safe_name)
        return destination
