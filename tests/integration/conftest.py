"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.main import create_app
from modules.backend.models.note import Note
from modules.backend.repositories.note import NoteRepository


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
async def client(
    db_session: AsyncSession,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with database session override.

    The client uses the test database session, so every request in a
    test sees the same data and everything is rolled back afterwards.

    Usage:
        async def test_list_notes(client: AsyncClient):
            response = await client.get("/api/v1/notes")
            assert response.status_code == 200
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
async def client_no_db() -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client without database dependency override.

    Use this for endpoints that don't touch the session dependency
    (e.g., health checks).
    """
    app = create_app()

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# Data Fixtures
# =============================================================================


@pytest.fixture
def create_note(db_session: AsyncSession, owner_id: str) -> Callable[..., Awaitable[Note]]:
    """
    Persist a note directly through the repository.

    Pass ``updated_at`` to pin the ordering timestamp after the save.

    Usage:
        async def test_listing(client, create_note):
            await create_note("Groceries", tags={"home"})
    """
    async def _create(
        title: str = "Note",
        *,
        content: str | None = None,
        tags: set[str] | None = None,
        pinned: bool = False,
        archived: bool = False,
        deleted: bool = False,
        user_id: str | None = None,
        updated_at: datetime | None = None,
    ) -> Note:
        note = Note(
            title=title,
            content=content,
            tags=tags or set(),
            pinned=pinned,
            archived=archived,
            deleted=deleted,
            user_id=user_id or owner_id,
        )
        await NoteRepository(db_session).save(note)
        if updated_at is not None:
            note.updated_at = updated_at
            await db_session.flush()
        return note

    return _create


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code

        Returns:
            Response JSON data

        Raises:
            AssertionError: If response is not successful
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data

        Raises:
            AssertionError: If response is not an error or codes don't match
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a validation error (422).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)

        Returns:
            Response JSON data
        """
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
