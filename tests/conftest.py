"""Shared pytest fixtures for all tests."""

from pathlib import Path
from typing import Generator

import pytest

from cli.config import Config
from auditor.database import init_database
from auditor.repositories.site_repository import Site, SiteRepository
from auditor.repositories.user_repository import User, UserRepository
from auditor.services.auth_service import AuthService


@pytest.fixture
def test_db(tmp_path, monkeypatch) -> Generator[Path, None, None]:
    """
    Create a temporary network database for each test.
    """
    db_path = tmp_path / "network.db"
    monkeypatch.setattr("auditor.database.DATABASE_PATH", str(db_path))
    monkeypatch.setattr("auditor.config.DATABASE_PATH", str(db_path))
    init_database()
    yield db_path


@pytest.fixture
def uploads_root(tmp_path, monkeypatch) -> Path:
    """
    Temporary uploads root; the main site's files live directly in it.
    """
    root = tmp_path / "uploads"
    root.mkdir()
    monkeypatch.setattr("auditor.site_context.UPLOADS_ROOT", str(root))
    return root


@pytest.fixture
def main_site(test_db) -> Site:
    return SiteRepository.create_site("example.com", "/", "Main Site")


@pytest.fixture
def sub_site(main_site) -> Site:
    return SiteRepository.create_site("example.com", "/team/", "Team Docs")


@pytest.fixture
def admin_user(test_db) -> User:
    """
    First registered account, which is the network admin.
    """
    api_key, _ = AuthService().register_user("admin", "admin-password")
    return UserRepository.get_by_api_key(api_key)


@pytest.fixture
def regular_user(admin_user) -> User:
    api_key, _ = AuthService().register_user("editor", "editor-password")
    return UserRepository.get_by_api_key(api_key)


@pytest.fixture
def temp_config_dir(tmp_path):
    """
    Create temporary config directory.

    Returns:
        Path to temporary .pdf-auditor directory
    """
    config_dir = tmp_path / '.pdf-auditor'
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def temp_config(temp_config_dir):
    """
    Create temporary config instance.

    Returns:
        Config instance with temp config file
    """
    return Config(temp_config_dir / 'config.json')
