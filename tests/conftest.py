"""
Shared fixtures for the demo API test suite.

Applications are built through create_app() with explicit Settings so each
test chooses its own behavior variants and file base directory.
"""

from pathlib import Path
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

from api.src.config import Settings, clear_settings_cache
from api.src.main import create_app


# ============================================================================
# FILE FIXTURES
# ============================================================================


@pytest.fixture
def file_root(tmp_path: Path) -> Path:
    """
    Directory layout used by file resolution tests:

        tmp_path/
            secret.txt          (outside the base directory)
            files/              (base directory)
                readme.txt
                docs/guide.txt
    """
    base = tmp_path / "files"
    (base / "docs").mkdir(parents=True)
    (base / "readme.txt").write_text("public readme\n")
    (base / "docs" / "guide.txt").write_text("guide contents\n")
    (tmp_path / "secret.txt").write_text("top secret\n")
    return base


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def make_settings(file_root: Path) -> Callable[..., Settings]:
    """Factory for settings pointing at the temporary file tree."""

    def _make(**overrides) -> Settings:
        values = {
            "file_base_dir": file_root,
            "password_bcrypt_rounds": 4,
            "log_format": "text",
            "log_level": "WARNING",
            "user_seed_count": 50,
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def make_client(make_settings) -> Iterator[Callable[..., TestClient]]:
    """Factory for started TestClients; every client is closed at teardown."""
    clients = []

    def _make(**overrides) -> TestClient:
        app = create_app(make_settings(**overrides))
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    """Client running every component in its faithful variant."""
    return make_client(behavior_mode="faithful")


@pytest.fixture
def hardened_client(make_client) -> TestClient:
    """Client running every component in its hardened variant."""
    return make_client(behavior_mode="hardened", admin_password="s3cret-admin")
