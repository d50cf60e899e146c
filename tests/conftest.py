"""
Shared fixtures
"""

import itertools

import pytest

from builder_server.config import get_settings


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings with storage in a temp dir and no demo seeding."""
    monkeypatch.setenv("PAGE_BUILDER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("BUILDER_SEED_DEMO_PROJECT", "false")
    monkeypatch.setenv("CACHE_ENABLED", "true")
    return get_settings()


@pytest.fixture
def id_factory():
    """Deterministic ids: n1, n2, ..."""
    counter = itertools.count(1)
    return lambda: f"n{next(counter)}"
