"""Pytest configuration and shared fixtures for the Hotel Ops API tests."""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from hotelops.auth.tokens import AuthContext, create_access_token
from hotelops.config import get_settings
from hotelops.db.executor import QueryExecutor, RowSet
from hotelops.main import create_app


# Disable logging for cleaner test output
logging.getLogger("asyncio").setLevel(logging.WARNING)
logging.getLogger("httpx").setLevel(logging.WARNING)


TEST_USER_ID = "11111111-1111-1111-1111-111111111111"
TEST_ACCOUNT_ID = "22222222-2222-2222-2222-222222222222"
TEST_PROPERTY_ID = "33333333-3333-3333-3333-333333333333"

Responder = Callable[[str, List[Any]], Union[RowSet, Exception]]


class FakeExecutor(QueryExecutor):
    """In-memory executor recording every statement it is asked to run.

    ``responses`` are consumed in call order; once exhausted every further
    call returns ``default``. A response may be an exception to raise, or a
    callable receiving (statement, params).
    """

    mode = "fake"

    def __init__(self, responses: Optional[Sequence[Any]] = None, default: Optional[RowSet] = None):
        self.responses = list(responses or [])
        self.default = default or []
        self.calls: List[tuple] = []

    async def execute(self, statement: str, params: Optional[Sequence[Any]] = None) -> RowSet:
        params = list(params or [])
        self.calls.append((statement, params))

        response = self.responses.pop(0) if self.responses else self.default
        if callable(response):
            response = response(statement, params)
        if isinstance(response, Exception):
            raise response
        return [dict(row) for row in response]


@pytest.fixture
def fake_executor() -> FakeExecutor:
    """Executor returning no rows unless a test scripts responses."""
    return FakeExecutor()


@pytest.fixture
def auth_context() -> AuthContext:
    """Auth context of the default test user."""
    return AuthContext(
        user_id=TEST_USER_ID,
        account_id=TEST_ACCOUNT_ID,
        property_id=TEST_PROPERTY_ID,
        role="manager",
    )


@pytest.fixture
def auth_token(auth_context: AuthContext) -> str:
    """Access token signed with the configured secret."""
    token, _ = create_access_token(auth_context, get_settings().jwt_secret)
    return token


@pytest.fixture
def auth_headers(auth_token: str) -> Dict[str, str]:
    """Standard authorization headers for API testing."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def app(fake_executor: FakeExecutor) -> FastAPI:
    """Create FastAPI application with the fake executor attached.

    The lifespan is not run by a bare TestClient, so the executor is set
    on app.state directly.
    """
    application = create_app()
    application.state.executor = fake_executor
    return application


@pytest.fixture
def test_client(app: FastAPI) -> TestClient:
    """Create test client for API testing."""
    return TestClient(app, raise_server_exceptions=False)


# Pytest markers for test categorization
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, mocked)")
    config.addinivalue_line("markers", "integration: Integration tests (slower, real database)")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
