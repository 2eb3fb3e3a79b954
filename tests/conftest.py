"""Shared test fixtures."""

import pytest

from notion_tools.config import get_settings
from notion_tools.notion.client import reset_client

_ENV_VARS = (
    "NOTION_TOKEN",
    "NOTION_DATABASE_ID",
    "NOTION_DATA_SOURCE_ID",
    "NOTION_PEOPLE_DATABASE_ID",
    "NOTION_PEOPLE_DATA_SOURCE_ID",
    "NOTION_WHO_PROPERTY",
    "NOTION_RELATION_PROPERTY",
    "NOTION_PEOPLE_TITLE_PROPERTY",
    "NOTION_PAGE_SIZE",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """No real credentials, no .env file, fresh singletons for every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    reset_client()
    yield
    get_settings.cache_clear()
    reset_client()
