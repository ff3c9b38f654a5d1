"""Tests for token handling and the authentication middleware."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from conftest import TEST_ACCOUNT_ID, TEST_PROPERTY_ID, TEST_USER_ID, FakeExecutor
from hotelops.auth.middleware import PROPERTY_ACCESS_QUERY, extract_bearer_token
from hotelops.auth.tokens import JWT_ALGORITHM, AuthContext, create_access_token, decode_access_token
from hotelops.config import get_settings
from hotelops.db.errors import QueryError
from hotelops.errors.problem_details import UnauthorizedError


SECRET = "unit-test-secret"
OTHER_PROPERTY_ID = "44444444-4444-4444-4444-444444444444"


class TestTokens:
    """Test signing and verification of access tokens."""

    def test_round_trip(self, auth_context):
        token, expires_at = create_access_token(auth_context, SECRET)

        assert decode_access_token(token, SECRET) == auth_context
        assert expires_at > datetime.now(timezone.utc)

    def test_claims(self, auth_context):
        token, _ = create_access_token(auth_context, SECRET)
        claims = jwt.decode(token, SECRET, algorithms=[JWT_ALGORITHM])

        assert claims["sub"] == TEST_USER_ID
        assert claims["account_id"] == TEST_ACCOUNT_ID
        assert claims["property_id"] == TEST_PROPERTY_ID
        assert claims["role"] == "manager"

    def test_wrong_secret(self, auth_context):
        token, _ = create_access_token(auth_context, SECRET)

        with pytest.raises(UnauthorizedError):
            decode_access_token(token, "another-secret")

    def test_expired(self, auth_context):
        token, _ = create_access_token(auth_context, SECRET, ttl_hours=-1)

        with pytest.raises(UnauthorizedError):
            decode_access_token(token, SECRET)

    def test_missing_claims(self):
        token = jwt.encode(
            {"sub": TEST_USER_ID, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
            SECRET,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(UnauthorizedError) as exc_info:
            decode_access_token(token, SECRET)

        assert "claims" in exc_info.value.detail

    def test_unknown_role(self):
        token = jwt.encode(
            {"sub": "u", "account_id": "a", "property_id": "p", "role": "superuser"},
            SECRET,
            algorithm=JWT_ALGORITHM,
        )

        with pytest.raises(UnauthorizedError):
            decode_access_token(token, SECRET)


class TestExtractBearerToken:
    """Test Authorization header parsing."""

    def test_valid(self):
        assert extract_bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"

    @pytest.mark.parametrize("header", [None, "", "Bearer", "Bearer ", "Basic abc", "bearer abc"])
    def test_invalid(self, header):
        with pytest.raises(UnauthorizedError):
            extract_bearer_token(header)


class TestAuthenticationMiddleware:
    """Test authentication through the application."""

    def test_public_paths_skip_auth(self, test_client):
        assert test_client.get("/live").status_code == 200
        assert test_client.get("/").status_code == 200

    def test_missing_token(self, test_client):
        response = test_client.get("/v1.0/reviews")

        assert response.status_code == 401
        assert response.headers["Content-Type"] == "application/problem+json"
        assert response.json()["detail"] == "Missing Bearer token."

    def test_invalid_token(self, test_client):
        response = test_client.get("/v1.0/reviews", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_valid_token(self, test_client, auth_headers, fake_executor):
        response = test_client.get("/v1.0/settings/integrations", headers=auth_headers)

        assert response.status_code == 200
        statement, params = fake_executor.calls[0]
        assert params[0] == TEST_PROPERTY_ID

    def test_property_override_allowed(self, test_client, auth_headers, fake_executor):
        fake_executor.responses = [[{"id": OTHER_PROPERTY_ID}]]

        response = test_client.get(
            "/v1.0/settings/integrations",
            headers={**auth_headers, "X-Property-Id": OTHER_PROPERTY_ID},
        )

        assert response.status_code == 200
        access_statement, access_params = fake_executor.calls[0]
        assert access_statement == PROPERTY_ACCESS_QUERY
        assert access_params == [TEST_USER_ID, OTHER_PROPERTY_ID]
        list_statement, list_params = fake_executor.calls[1]
        assert list_params[0] == OTHER_PROPERTY_ID

    def test_property_override_denied(self, test_client, auth_headers, fake_executor):
        fake_executor.responses = [[]]

        response = test_client.get(
            "/v1.0/settings/integrations",
            headers={**auth_headers, "X-Property-Id": OTHER_PROPERTY_ID},
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "No access to requested property."
        assert len(fake_executor.calls) == 1

    def test_same_property_header_needs_no_check(self, test_client, auth_headers, fake_executor):
        response = test_client.get(
            "/v1.0/settings/integrations",
            headers={**auth_headers, "X-Property-Id": TEST_PROPERTY_ID},
        )

        assert response.status_code == 200
        assert len(fake_executor.calls) == 1

    def test_property_check_failure(self, test_client, auth_headers, fake_executor):
        fake_executor.responses = [QueryError("connection refused")]

        response = test_client.get(
            "/v1.0/settings/integrations",
            headers={**auth_headers, "X-Property-Id": OTHER_PROPERTY_ID},
        )

        assert response.status_code == 503


def test_configured_secret_signs_fixture_tokens(auth_token):
    context = decode_access_token(auth_token, get_settings().jwt_secret)
    assert isinstance(context, AuthContext)
