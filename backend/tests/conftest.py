import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_workspace, limiter
from app.main import app
from app.services.workspace import Workspace


@pytest.fixture
def workspace(tmp_path):
    """Empty workspace rooted in a temporary directory."""
    return Workspace(tmp_path)


@pytest.fixture
def client(workspace):
    """TestClient whose routes resolve paths under the temporary workspace."""
    app.dependency_overrides[get_workspace] = lambda: workspace
    limiter_enabled = limiter.enabled
    limiter.enabled = False
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = limiter_enabled
