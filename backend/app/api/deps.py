"""Dependency injection for API routes."""
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.core.config import settings
from app.services.workspace import Workspace

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


def get_workspace() -> Workspace:
    """Workspace rooted at the configured directory."""
    return Workspace(settings.workspace_root)
