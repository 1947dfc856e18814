import re
from pathlib import Path

from app.core.errors import InvalidIdentifierError

ASSISTANTS_DIR = "assistants"
KNOWLEDGE_BASE_DIR = "KnowledgeBase"
HISTORY_DIR = "History"
ROLE_SETTING_FILE = "roleSetting.txt"

_LONE_SURROGATE = re.compile("[\ud800-\udfff]")


def encode_text(text: str) -> bytes:
    """UTF-8 bytes for stored text; unpaired surrogates become U+FFFD."""
    return _LONE_SURROGATE.sub("\ufffd", text).encode("utf-8")


class Workspace:
    """Maps logical resource names onto paths under a fixed root directory."""

    def __init__(self, root: Path):
        self.root = Path(root).resolve()
        if not self.root.exists():
            self.root.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def validate_name(name: str, kind: str = "name") -> str:
        """Check that a single path segment is safe to join onto a directory."""
        if not name or not name.strip():
            raise InvalidIdentifierError(f"{kind} is required")
        if name in (".", "..") or "/" in name or "\\" in name or "\x00" in name or _LONE_SURROGATE.search(name):
            raise InvalidIdentifierError(f"Invalid {kind}: {name!r}")
        return name

    def _validate_path_within_root(self, path: Path) -> Path:
        """Validate that a path is within the root to prevent traversal attacks."""
        resolved = path.resolve()
        if resolved == self.root or self.root not in resolved.parents:
            raise InvalidIdentifierError("Path traversal detected")
        return resolved

    def path(self, *segments: str) -> Path:
        """Join validated single-segment names onto the root."""
        for segment in segments:
            self.validate_name(segment)
        return self._validate_path_within_root(self.root.joinpath(*segments))

    def relative_path(self, relative: str) -> Path:
        """Resolve a root-relative path that may span several segments."""
        if not relative or not relative.strip():
            raise InvalidIdentifierError("Path is required")
        if "\x00" in relative or _LONE_SURROGATE.search(relative) or Path(relative).is_absolute():
            raise InvalidIdentifierError(f"Invalid path: {relative!r}")
        return self._validate_path_within_root(self.root / relative)

    @property
    def assistants_dir(self) -> Path:
        return self.root / ASSISTANTS_DIR

    def assistant_dir(self, title: str) -> Path:
        self.validate_name(title, "Assistant title")
        return self.path(ASSISTANTS_DIR, title)
