"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases.
"""

from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.backend.core.config_schema import (
    ApplicationSchema,
    DatabaseSchema,
    LoggingSchema,
)
from modules.backend.models.note import Note


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_service(mock_db_session: AsyncMock):
            service = NoteService(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = note
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalar_one = MagicMock(return_value=0)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    return result


# =============================================================================
# Entity Fixtures
# =============================================================================


@pytest.fixture
def make_note():
    """
    Build detached Note instances with sensible defaults.

    Usage:
        note = make_note(title="Groceries", tags={"home"})
    """

    def _make(**overrides) -> Note:
        stamp = datetime(2024, 1, 15, 10, 30, 0)
        values = {
            "id": "note-123",
            "title": "Test Note",
            "content": "Test content",
            "tags": set(),
            "pinned": False,
            "archived": False,
            "deleted": False,
            "user_id": "11111111-1111-1111-1111-111111111111",
            "created_at": stamp,
            "updated_at": stamp,
        }
        values.update(overrides)
        return Note(**values)

    return _make


# =============================================================================
# Settings Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_settings() -> MagicMock:
    """
    Mock secrets.

    Usage:
        with patch("modules.backend.core.config.get_settings", return_value=mock_settings):
            ...
    """
    settings = MagicMock()
    settings.db_password = "test_pass"
    return settings


@pytest.fixture
def mock_app_config() -> MagicMock:
    """
    Mock YAML application configuration built from the real schemas.

    Usage:
        with patch("modules.backend.core.config.get_app_config", return_value=mock_app_config):
            ...
    """
    config = MagicMock()
    config.application = ApplicationSchema(
        name="Test App",
        version="1.0.0",
        description="Test application",
        environment="test",
        debug=True,
        api_prefix="/api/v1",
        docs_enabled=False,
        default_user_id="11111111-1111-1111-1111-111111111111",
        server={"host": "127.0.0.1", "port": 8000},
        cors={"origins": []},
        pagination={"default_size": 10, "max_size": 50},
    )
    config.database = DatabaseSchema(
        driver="postgresql",
        host="localhost",
        port=5432,
        name="test_db",
        user="test_user",
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        echo=False,
    )
    config.logging = LoggingSchema(
        level="DEBUG",
        format="console",
        handlers={
            "console": {"enabled": True},
            "file": {
                "enabled": False,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    )
    return config


# =============================================================================
# Logging Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_logger() -> MagicMock:
    """
    Mock logger for testing logging calls.

    Usage:
        with patch("module.get_logger", return_value=mock_logger):
            ...
            mock_logger.info.assert_called_once()
    """
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.exception = MagicMock()
    return logger
