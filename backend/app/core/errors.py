"""Error taxonomy for workspace operations.

Every filesystem failure surfaces to the caller as one of these exceptions,
rendered as a plain-text body with the matching HTTP status.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

logger = logging.getLogger(__name__)


class WorkspaceError(Exception):
    """Base class for errors raised by the workspace services."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidIdentifierError(WorkspaceError):
    """A caller-supplied name cannot be mapped to a path inside the workspace."""

    status_code = 400


class ResourceNotFoundError(WorkspaceError):
    status_code = 404


class ResourceOperationError(WorkspaceError):
    status_code = 500


@contextmanager
def filesystem_operation(message: str) -> Iterator[None]:
    """Translate OSError raised inside the block into a WorkspaceError.

    Args:
        message: Plain-text message returned to the caller on failure,
            e.g. "Failed to rename assistant directory".
    """
    try:
        yield
    except FileNotFoundError as e:
        logger.info("%s: %s", message, e)
        raise ResourceNotFoundError(message) from e
    except OSError as e:
        logger.exception("%s: %s", message, str(e))
        raise ResourceOperationError(message) from e
