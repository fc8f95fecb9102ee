"""Shared test fixtures for the account directory test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
import structlog

from accountdir.accounts.directory import AccountDirectory
from accountdir.accounts.stores.inmemory import InMemoryDocumentStore


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Temporarily set environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"ACCOUNTDIR_DEBUG": "true"}):
                ...
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from accountdir.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Restore structlog defaults and clear bound context."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def store() -> InMemoryDocumentStore:
    """Create a fresh in-memory store for each test."""
    return InMemoryDocumentStore()


@pytest.fixture
def directory(store: InMemoryDocumentStore) -> AccountDirectory:
    """AccountDirectory over the in-memory store."""
    return AccountDirectory(store)


@pytest.fixture
def acme_payload() -> dict[str, str]:
    return {
        "accountName": "Acme",
        "accountEmail": "a@acme.com",
        "phone": "555-0100",
        "externalId": "SF-1",
    }
