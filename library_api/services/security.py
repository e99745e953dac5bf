"""
Security Service

Handles password hashing and login tokens.

Security Features:
==================
1. Per-account salted password hashes (passlib)
2. Signed JWT login tokens carrying {username, id}
3. Resolution of the current caller from an Authorization header

Usage:
    from library_api.services.security import issue_token, verify_token

    token = issue_token(user)
    claims = verify_token(token)
    claims["username"]
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.orm import Session

from library_api.config import Settings, get_settings
from library_api.errors import AuthenticationError
from library_api.services.catalog import UserStore

if TYPE_CHECKING:
    from library_api.models.user import User

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "

# -------------------------------------------------------------------------
# Password Hashing Configuration
# -------------------------------------------------------------------------
# pbkdf2_sha256 is salted per hash and implemented by passlib itself.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """
    Hash a plain text password.

    Example:
        >>> hashed = hash_password("secret")
        >>> hashed.startswith("$pbkdf2-sha256$")
        True
    """
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a stored hash.

    Returns:
        True if password matches, False otherwise
    """
    return pwd_context.verify(plain_password, hashed_password)


# -------------------------------------------------------------------------
# Login Tokens
# -------------------------------------------------------------------------


def issue_token(user: "User", settings: Settings | None = None) -> str:
    """
    Create a signed login token for a user.

    The token embeds the user's username and id. An ``exp`` claim is only
    added when ACCESS_TOKEN_EXPIRE_MINUTES is configured; otherwise the
    token stays valid until the signing secret is rotated.

    Args:
        user: The authenticated user
        settings: Settings to sign with (defaults to the cached settings)

    Returns:
        Encoded JWT token string
    """
    settings = settings or get_settings()
    to_encode: dict[str, Any] = {"username": user.username, "id": user.id}

    if settings.access_token_expire_minutes is not None:
        expire = datetime.now(UTC) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
        to_encode["exp"] = expire

    return jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )


def verify_token(token: str, settings: Settings | None = None) -> dict[str, Any]:
    """
    Decode and validate a login token.

    Args:
        token: The JWT token string
        settings: Settings to verify with (defaults to the cached settings)

    Returns:
        Decoded claims

    Raises:
        AuthenticationError: If the signature is invalid, the token is
            malformed or expired, or the claims carry no user id
    """
    settings = settings or get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.warning(f"JWT decode error: {e}")
        raise AuthenticationError("invalid token") from e

    if payload.get("id") is None:
        logger.warning("Token carries no user id")
        raise AuthenticationError("invalid token")

    return payload


def parse_authorization_header(value: str | None) -> str | None:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header.

    The scheme is matched case-insensitively. Any other scheme, or a
    missing header, yields None.
    """
    if not value or not value.lower().startswith(BEARER_PREFIX):
        return None
    token = value[len(BEARER_PREFIX):].strip()
    return token or None


def resolve_current_user(
    db: Session,
    token: str | None,
    settings: Settings | None = None,
) -> "User | None":
    """
    Resolve the caller behind a bearer token.

    No token is a valid anonymous state and returns None. A token that
    fails verification raises, so the request never reaches a resolver.
    A valid token whose account no longer exists resolves to None.

    Raises:
        AuthenticationError: If the token is present but invalid
    """
    if not token:
        return None

    payload = verify_token(token, settings)
    try:
        user_id = int(payload["id"])
    except (TypeError, ValueError) as e:
        raise AuthenticationError("invalid token") from e

    return UserStore(db).find_by_id(user_id)
