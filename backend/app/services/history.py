"""Chat history records stored as ``<id>.json`` files.

Records for the "Lets Chat" pseudo-assistant live in the root ``History/``
directory; every other assistant keeps them in ``assistants/<title>/History/``.
Record content is opaque text and is stored and returned verbatim.
"""

import logging
import uuid
from pathlib import Path
from typing import List

from app.core.errors import filesystem_operation
from app.services.workspace import HISTORY_DIR, Workspace, encode_text

logger = logging.getLogger(__name__)

LETS_CHAT_TITLE = "Lets Chat"
EMPTY_CONTEXT = "{}"
HISTORY_SUFFIX = ".json"


def resolve_history_dir(workspace: Workspace, assistant_title: str) -> Path:
    """Directory holding the history records for an assistant title."""
    if assistant_title == LETS_CHAT_TITLE:
        return workspace.path(HISTORY_DIR)
    return workspace.assistant_dir(assistant_title) / HISTORY_DIR


class HistoryStore:
    def __init__(self, workspace: Workspace):
        self.workspace = workspace

    def _record_path(self, assistant_title: str, history_id: str) -> Path:
        self.workspace.validate_name(history_id, "History ID")
        return resolve_history_dir(self.workspace, assistant_title) / f"{history_id}{HISTORY_SUFFIX}"

    def list_root(self) -> List[str]:
        """File names of the ``.json`` records in the root ``History/`` directory."""
        history_dir = self.workspace.path(HISTORY_DIR)
        if not history_dir.is_dir():
            return []

        with filesystem_operation("Failed to read History directory"):
            entries = list(history_dir.iterdir())

        return [
            entry.name
            for entry in entries
            if entry.suffix == HISTORY_SUFFIX and not entry.is_dir()
        ]

    def create(self, assistant_title: str) -> str:
        """Create an empty ``{}`` record and return its generated id."""
        history_dir = resolve_history_dir(self.workspace, assistant_title)
        with filesystem_operation("Failed to create History directory"):
            history_dir.mkdir(parents=True, exist_ok=True)

        file_id = str(uuid.uuid4())
        with filesystem_operation("Failed to create JSON file"):
            (history_dir / f"{file_id}{HISTORY_SUFFIX}").write_bytes(encode_text(EMPTY_CONTEXT))

        logger.info("Created history %s for %s", file_id, assistant_title)
        return file_id

    def update_context(self, assistant_title: str, history_id: str, context: str) -> None:
        # Content is not validated as JSON.
        record = self._record_path(assistant_title, history_id)
        with filesystem_operation("Failed to update chat context"):
            record.write_bytes(encode_text(context))
        logger.info("Updated history %s for %s", history_id, assistant_title)

    def delete(self, assistant_title: str, history_id: str) -> None:
        record = self._record_path(assistant_title, history_id)
        with filesystem_operation("Failed to delete history file"):
            record.unlink()
        logger.info("Deleted history %s for %s", history_id, assistant_title)

    def fetch(self, assistant_title: str, history_id: str) -> str:
        record = self._record_path(assistant_title, history_id)
        with filesystem_operation("Failed to read history file"):
            return record.read_bytes().decode("utf-8", errors="replace")
