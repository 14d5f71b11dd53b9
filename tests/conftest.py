"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path

import pytest

from feignit import FakeManager, ScopeContext, create_fake
from feignit.config import FeignitSettings, get_settings
from tests.utils import Greeter


@pytest.fixture(autouse=True)
def isolated_configuration(tmp_path, monkeypatch):
    """Keep user and project configuration files out of the tests."""
    user_dir = tmp_path / "user-config"
    project_dir = tmp_path / "project"
    user_dir.mkdir()
    project_dir.mkdir()

    monkeypatch.setenv("FEIGNIT_CONFIG", str(user_dir))
    monkeypatch.setenv("FEIGNIT_PROJECT_DIR", str(project_dir))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def scopes():
    return ScopeContext()


@pytest.fixture
def manager(scopes):
    return FakeManager(scopes=scopes, settings=FeignitSettings())


@pytest.fixture
def greeter(scopes):
    return create_fake(Greeter, scopes=scopes, settings=FeignitSettings())


@pytest.fixture
def temp_config_dir():
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)

