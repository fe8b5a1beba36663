"""
Pytest fixtures for testing
"""

import pytest

from gomi_admin.common.migrations import init_database
from gomi_admin.common.store import DocumentStore
from gomi_admin.importer.repository import create_municipality


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "ai_integration: marks tests that use real AI tokens")


def pytest_addoption(parser):
    parser.addoption(
        "--use-ai-tokens",
        action="store_true",
        default=False,
        help="Run AI integration tests that use actual tokens (expensive)",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--use-ai-tokens"):
        return
    skip_ai = pytest.mark.skip(reason="needs --use-ai-tokens")
    for item in items:
        if "ai_integration" in item.keywords:
            item.add_marker(skip_ai)


@pytest.fixture(autouse=True)
def disable_throttle_env(monkeypatch):
    monkeypatch.setenv("THROTTLE_DISABLED", "1")


@pytest.fixture
def temp_db_path(tmp_path):
    """Temporary SQLite database with all migrations applied"""
    return init_database(tmp_path / "gomi_admin.db")


@pytest.fixture
def store(temp_db_path):
    return DocumentStore(temp_db_path)


@pytest.fixture
def municipality_id(store):
    return create_municipality(store, "東京都", "Tokyo")


@pytest.fixture
def no_ai_keys(monkeypatch):
    """Every configured provider without an API key"""
    import config

    monkeypatch.setattr(
        config,
        "AI_PROVIDERS",
        [{**provider, "api_key": None} for provider in config.AI_PROVIDERS],
    )


@pytest.fixture
def fake_ai_keys(monkeypatch):
    import config

    monkeypatch.setattr(
        config,
        "AI_PROVIDERS",
        [{**provider, "api_key": f"test-{provider['name']}-key"} for provider in config.AI_PROVIDERS],
    )
