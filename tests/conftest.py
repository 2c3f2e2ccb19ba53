"""
Shared fixtures: an app built against a temporary storage root.

The TestClient is used without its context manager, so the lifespan (and
the database pool) never starts; tests stub the repository functions.
"""

import pytest
from fastapi.testclient import TestClient

from blog_api.auth import security
from blog_api.core.config import Settings
from blog_api.main import create_app

TEST_SECRET = "test-secret-with-enough-bytes-for-hs256"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        jwt_secret=TEST_SECRET,
        storage_root=tmp_path,
        graphiql=True,
        max_upload_bytes=1024,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_auth_header(settings):
    def _make(user_id: int = 7, email: str = "writer@example.com") -> dict:
        token = security.build_access_token(user_id=user_id, email=email, settings=settings)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def auth_header(make_auth_header):
    return make_auth_header()
