"""
Authentication utilities for the Taskboard application.

This module provides the access token format shared by the login flow and the
API, and the authorization gate that turns an `Authorization` header into a
verified identity.
"""

import base64
import hmac
from contextlib import suppress
from dataclasses import dataclass
from datetime import datetime, timedelta, UTC

from taskboard.configs import Settings
from taskboard.errors import Forbidden, Unauthenticated


SIGNATURE_LENGTH = 64
USER_ID_LENGTH = 8
# Tolerated clock difference for tokens issued by another process.
MAX_CLOCK_SKEW = timedelta(seconds=30)


@dataclass(frozen=True)
class Identity:
    """
    The verified requester of a single request.

    Attributes:
        user_id: The ID of the user the access token was issued to
    """
    user_id: int


def generate_access_token(user_id: int, secret_key: bytes, issued_at: datetime | None = None) -> str:
    """
    Generate a HMAC-signed access token for a user.

    The token contains the user ID and the issue timestamp, signed with HMAC
    using the secret key, and encoded in base64.

    Args:
        user_id: The ID of the user to generate a token for
        secret_key: The key used to sign the token
        issued_at: The issue time, defaults to now

    Returns:
        A base64-encoded access token
    """
    timestamp = (issued_at or datetime.now(UTC)).isoformat()
    signature = generate_access_token_signature(user_id, timestamp, secret_key)
    payload = user_id.to_bytes(USER_ID_LENGTH, "big") + timestamp.encode() + signature.encode()
    return base64.urlsafe_b64encode(payload).decode()


def generate_access_token_signature(user_id: int, timestamp: str, secret_key: bytes) -> str:
    body = user_id.to_bytes(USER_ID_LENGTH, "big") + timestamp.encode()
    return hmac.new(secret_key, body, "sha256").hexdigest()


def verify_access_token(
    token: str,
    secret_key: bytes,
    ttl: timedelta,
    now: datetime | None = None,
) -> int | None:
    """
    Verify an access token and extract the user ID.

    Args:
        token: The access token to verify
        secret_key: The key the token must be signed with
        ttl: How long a token is valid after it was issued
        now: The current time, defaults to now

    Returns:
        The user ID if the token is authentic and not expired, or None otherwise
    """
    with suppress(ValueError, TypeError):
        payload = base64.urlsafe_b64decode(token)
        if len(payload) <= USER_ID_LENGTH + SIGNATURE_LENGTH:
            return None

        user_id_bytes = payload[:USER_ID_LENGTH]
        timestamp_bytes = payload[USER_ID_LENGTH:-SIGNATURE_LENGTH]
        signature_bytes = payload[-SIGNATURE_LENGTH:]
        user_id = int.from_bytes(user_id_bytes, "big")
        timestamp = timestamp_bytes.decode()
        expected_signature = generate_access_token_signature(user_id, timestamp, secret_key)
        if not hmac.compare_digest(signature_bytes, expected_signature.encode()):
            return None

        issued_at = datetime.fromisoformat(timestamp)
        if issued_at.tzinfo is None:
            return None

        now = now or datetime.now(UTC)
        if issued_at - now > MAX_CLOCK_SKEW or now - issued_at > ttl:
            return None

        return user_id

    return None


def extract_bearer_token(header_value: str | None) -> str | None:
    """Return the credential that follows the scheme in an `Authorization` header value."""
    if not header_value:
        return None

    parts = header_value.split()
    return parts[1] if len(parts) > 1 else None


class AuthorizationGate:
    """
    Turns the raw `Authorization` header of a request into an `Identity`.

    A missing credential is rejected with `Unauthenticated` (401) while a
    credential that fails verification is rejected with `Forbidden` (403).
    The gate keeps no state between calls.
    """
    def __init__(self, secret_key: str | bytes, token_ttl_seconds: int):
        self.secret_key = secret_key.encode() if isinstance(secret_key, str) else secret_key
        self.ttl = timedelta(seconds=token_ttl_seconds)

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthorizationGate":
        return cls(settings.secret_key, settings.token_ttl_seconds)

    def authorize(self, header_value: str | None, now: datetime | None = None) -> Identity:
        token = extract_bearer_token(header_value)
        if not token:
            raise Unauthenticated("Authentication token is required")

        user_id = verify_access_token(token, self.secret_key, self.ttl, now=now)
        if user_id is None:
            raise Forbidden("Invalid or expired token")

        return Identity(user_id=user_id)

    def issue_token(self, user_id: int, issued_at: datetime | None = None) -> str:
        """Issue a token this gate accepts; the stand-in for the login flow."""
        return generate_access_token(user_id, self.secret_key, issued_at)
