import base64
import hmac
from datetime import datetime, timedelta, UTC

import pytest

from taskboard.auth import (
    AuthorizationGate,
    Identity,
    extract_bearer_token,
    generate_access_token,
    verify_access_token,
)
from taskboard.errors import Forbidden, Unauthenticated


TTL = timedelta(hours=1)


@pytest.fixture
def secret_key():
    return b"test-secret-key-123!"


@pytest.fixture
def sample_user_id():
    return 42


class TestAccessTokenFlow:
    def test_generate_and_verify_valid_token(self, secret_key, sample_user_id):
        token = generate_access_token(sample_user_id, secret_key)
        assert verify_access_token(token, secret_key, TTL) == sample_user_id

    def test_expired_token_fails(self, secret_key, sample_user_id):
        issued_at = datetime(2024, 1, 1, tzinfo=UTC)
        token = generate_access_token(sample_user_id, secret_key, issued_at)
        assert verify_access_token(token, secret_key, TTL, now=issued_at + TTL - timedelta(seconds=1)) == sample_user_id
        assert verify_access_token(token, secret_key, TTL, now=issued_at + TTL + timedelta(seconds=1)) is None

    def test_token_from_the_future_fails(self, secret_key, sample_user_id):
        issued_at = datetime.now(UTC) + timedelta(hours=1)
        token = generate_access_token(sample_user_id, secret_key, issued_at)
        assert verify_access_token(token, secret_key, TTL) is None

    def test_naive_timestamp_fails(self, secret_key, sample_user_id):
        timestamp = datetime.now().isoformat()
        signature = hmac.new(
            secret_key,
            sample_user_id.to_bytes(8, "big") + timestamp.encode(),
            "sha256"
        ).hexdigest()
        token = base64.urlsafe_b64encode(
            sample_user_id.to_bytes(8, "big") + timestamp.encode() + signature.encode()
        ).decode()
        assert verify_access_token(token, secret_key, TTL) is None

    def test_tampered_user_id_fails(self, secret_key, sample_user_id):
        token = generate_access_token(sample_user_id, secret_key)
        decoded = base64.urlsafe_b64decode(token)
        # Tamper with user ID bytes
        tampered = bytes([decoded[0] ^ 0xFF]) + decoded[1:]
        tampered_token = base64.urlsafe_b64encode(tampered).decode()
        assert verify_access_token(tampered_token, secret_key, TTL) is None

    def test_wrong_secret_fails(self, secret_key, sample_user_id):
        token = generate_access_token(sample_user_id, b"another-secret")
        assert verify_access_token(token, secret_key, TTL) is None

    @pytest.mark.parametrize("token", ["invalid.token", "", "abc", "ünïcode", "A" * 200])
    def test_invalid_tokens(self, secret_key, token):
        assert verify_access_token(token, secret_key, TTL) is None


class TestSecurityRequirements:
    def test_access_token_time_binding(self, secret_key, sample_user_id):
        token1 = generate_access_token(sample_user_id, secret_key, datetime(2024, 1, 1, tzinfo=UTC))
        token2 = generate_access_token(sample_user_id, secret_key, datetime(2024, 1, 2, tzinfo=UTC))
        assert token1 != token2

    def test_access_token_uniqueness(self, secret_key):
        token1 = generate_access_token(1, secret_key)
        token2 = generate_access_token(2, secret_key)
        assert token1 != token2


class TestBearerExtraction:
    @pytest.mark.parametrize("header, expected", [
        ("Bearer abc", "abc"),
        ("Bearer   abc  ", "abc"),
        ("Bearer", None),
        ("", None),
        (None, None),
    ])
    def test_extract_bearer_token(self, header, expected):
        assert extract_bearer_token(header) == expected


class TestAuthorizationGate:
    def test_missing_credential_is_unauthenticated(self, gate):
        for header in (None, "", "Bearer", "   "):
            with pytest.raises(Unauthenticated) as exc_info:
                gate.authorize(header)
            assert exc_info.value.status_code == 401
            assert exc_info.value.message == "Authentication token is required"

    def test_invalid_credential_is_forbidden(self, gate):
        with pytest.raises(Forbidden) as exc_info:
            gate.authorize("Bearer not-a-token")
        assert exc_info.value.status_code == 403
        assert exc_info.value.message == "Invalid or expired token"

    def test_expired_credential_is_forbidden(self, gate):
        token = gate.issue_token(7, issued_at=datetime.now(UTC) - timedelta(hours=2))
        with pytest.raises(Forbidden):
            gate.authorize(f"Bearer {token}")

    def test_valid_credential_yields_identity(self, gate):
        token = gate.issue_token(7)
        assert gate.authorize(f"Bearer {token}") == Identity(user_id=7)
        # Repeated calls are deterministic
        assert gate.authorize(f"Bearer {token}") == Identity(user_id=7)

    def test_str_and_bytes_secrets_are_equivalent(self):
        token = AuthorizationGate("secret", 60).issue_token(3)
        assert AuthorizationGate(b"secret", 60).authorize(f"Bearer {token}").user_id == 3
