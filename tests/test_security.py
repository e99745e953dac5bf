"""
Security Service Tests

Tests for password hashing, login tokens and current-user resolution.
"""

from types import SimpleNamespace

import pytest
from jose import jwt
from sqlalchemy.orm import Session

from library_api.config import Settings, get_settings
from library_api.errors import AuthenticationError
from library_api.models import User
from library_api.services.security import (
    hash_password,
    issue_token,
    parse_authorization_header,
    resolve_current_user,
    verify_password,
    verify_token,
)

OTHER_SECRET = "another-secret-key-that-is-also-at-least-32-chars"


class TestPasswordHashing:
    """Tests for per-account password hashes."""

    def test_hash_and_verify(self):
        """Test that a password verifies against its own hash."""
        hashed = hash_password("secret")

        assert hashed != "secret"
        assert verify_password("secret", hashed)
        assert not verify_password("wrong", hashed)

    def test_hashes_are_salted(self):
        """Test that hashing the same password twice gives different hashes."""
        assert hash_password("secret") != hash_password("secret")


class TestTokens:
    """Tests for issuing and verifying login tokens."""

    def test_issue_and_verify(self, sample_user: User):
        """Test that a token round-trips the user's identity."""
        claims = verify_token(issue_token(sample_user))

        assert claims["username"] == "alice"
        assert claims["id"] == sample_user.id

    def test_no_expiry_by_default(self, sample_user: User):
        """Test that tokens carry no exp claim unless configured."""
        claims = verify_token(issue_token(sample_user))

        assert "exp" not in claims

    def test_expiry_when_configured(self, sample_user: User):
        """Test that a configured lifetime adds an exp claim."""
        settings = Settings(access_token_expire_minutes=5)
        claims = verify_token(issue_token(sample_user, settings), settings)

        assert "exp" in claims

    def test_expired_token_rejected(self, sample_user: User):
        """Test that an expired token fails verification."""
        settings = Settings(access_token_expire_minutes=-1)
        token = issue_token(sample_user, settings)

        with pytest.raises(AuthenticationError):
            verify_token(token, settings)

    def test_malformed_token_rejected(self):
        """Test that garbage fails verification."""
        with pytest.raises(AuthenticationError):
            verify_token("not-a-token")

    def test_wrong_secret_rejected(self, sample_user: User):
        """Test that a token signed with another secret fails verification."""
        token = issue_token(sample_user, Settings(secret_key=OTHER_SECRET))

        with pytest.raises(AuthenticationError):
            verify_token(token)

    def test_token_without_id_rejected(self):
        """Test that claims must carry a user id."""
        settings = get_settings()
        token = jwt.encode({"username": "alice"}, settings.secret_key, algorithm="HS256")

        with pytest.raises(AuthenticationError):
            verify_token(token)


class TestAuthorizationHeader:
    """Tests for bearer header parsing."""

    @pytest.mark.parametrize(
        "header,expected",
        [
            ("Bearer abc.def.ghi", "abc.def.ghi"),
            ("bearer abc.def.ghi", "abc.def.ghi"),
            ("BEARER abc", "abc"),
            ("Basic dXNlcjpwYXNz", None),
            ("Bearer ", None),
            ("", None),
            (None, None),
        ],
    )
    def test_parse(self, header, expected):
        """Test extracting the token from the header value."""
        assert parse_authorization_header(header) == expected


class TestResolveCurrentUser:
    """Tests for resolving the caller from a token."""

    def test_no_token_is_anonymous(self, db_session: Session):
        """Test that a missing token resolves to no user."""
        assert resolve_current_user(db_session, None) is None

    def test_valid_token(self, db_session: Session, sample_user: User, auth_token: str):
        """Test that a valid token resolves to its user."""
        user = resolve_current_user(db_session, auth_token)

        assert user is not None
        assert user.id == sample_user.id

    def test_invalid_token_raises(self, db_session: Session):
        """Test that an invalid token is an error, not an anonymous caller."""
        with pytest.raises(AuthenticationError):
            resolve_current_user(db_session, "invalid.token.value")

    def test_unknown_user_is_anonymous(self, db_session: Session):
        """Test that a valid token for a missing account resolves to no user."""
        token = issue_token(SimpleNamespace(username="ghost", id=9999))

        assert resolve_current_user(db_session, token) is None
