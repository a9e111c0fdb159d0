"""Authentication helpers for the API.

This module provides an email/password authentication layer backed by the
users table and issues HS256 bearer tokens. Passwords are stored as salted
PBKDF2 hashes.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import os
import uuid
from datetime import UTC, datetime, timedelta

import jwt

from cvfast import clock
from cvfast.config import get_settings
from cvfast.data.db import get_session
from cvfast.data.models import User

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 100_000
_SALT_BYTES = 16
_JWT_ALGORITHM = "HS256"


def _hash_password(password: str) -> str:
    """Return a salted PBKDF2 hash for the given password.

    The result is stored as ``<salt_hex>:<hash_hex>``.
    """
    salt = os.urandom(_SALT_BYTES)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ITERATIONS)
    return f"{salt.hex()}:{derived.hex()}"


def _verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored ``salt:hash`` string."""
    try:
        salt_hex, hash_hex = stored_hash.split(":", 1)
    except ValueError:
        return False

    try:
        salt = bytes.fromhex(salt_hex)
        expected = bytes.fromhex(hash_hex)
    except ValueError:
        return False

    candidate = hashlib.pbkdf2_hmac(
        "sha256",
        password.encode("utf-8"),
        salt,
        _PBKDF2_ITERATIONS,
    )
    return hmac.compare_digest(candidate, expected)


def _user_to_dict(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "name": user.name,
        "created_at": user.created_at,
    }


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(email: str, name: str, password: str) -> tuple[dict | None, str | None]:
    """Create a new user account.

    Returns:
        Tuple of (user dict, error message). On success, error is None.
    """
    email_clean = _normalize_email(email)
    name_clean = name.strip()
    if not email_clean:
        return None, "Email cannot be empty."
    if not name_clean:
        return None, "Name cannot be empty."
    if not password:
        return None, "Password cannot be empty."

    with get_session() as session:
        existing = session.query(User).filter(User.email == email_clean).first()
        if existing is not None:
            return None, "Email already in use."

        user = User(
            email=email_clean,
            name=name_clean,
            password_hash=_hash_password(password),
            created_at=clock.now(),
        )
        session.add(user)
        session.flush()
        logger.info("User %s registered", user.id)
        return _user_to_dict(user), None


def authenticate_user(email: str, password: str) -> dict | None:
    """Authenticate a user by email and password.

    Returns:
        User dict on success, None for unknown email or wrong password.
    """
    email_clean = _normalize_email(email)
    if not email_clean or not password:
        return None

    with get_session() as session:
        user = session.query(User).filter(User.email == email_clean).first()
        if user is None or not _verify_password(password, user.password_hash):
            return None
        return _user_to_dict(user)


def get_user(user_id: uuid.UUID) -> dict | None:
    """Get a user by ID."""
    with get_session() as session:
        user = session.get(User, user_id)
        return _user_to_dict(user) if user else None


def update_user(
    user_id: uuid.UUID,
    *,
    name: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
) -> tuple[dict | None, str | None]:
    """Change a user's display name and/or password.

    A new password is only accepted together with the correct current one.

    Returns:
        Tuple of (user dict, error message). Both are None if the user is gone.
    """
    name_clean = name.strip() if name is not None else None
    if name_clean == "":
        return None, "Name cannot be empty."
    if new_password and not current_password:
        return None, "Current password is required."

    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return None, None

        if new_password:
            if not _verify_password(current_password, user.password_hash):
                return None, "Current password is incorrect."
            user.password_hash = _hash_password(new_password)
        if name_clean:
            user.name = name_clean

        logger.info("User %s updated", user_id)
        return _user_to_dict(user), None


def delete_user(user_id: uuid.UUID) -> bool:
    """Delete a user with their curricula, sections, short links and access logs."""
    with get_session() as session:
        user = session.get(User, user_id)
        if user is None:
            return False
        session.delete(user)

    logger.info("User %s deleted", user_id)
    return True


def create_access_token(user: dict) -> tuple[str, datetime]:
    """Issue a signed bearer token for ``user``.

    Returns:
        Tuple of (encoded token, expiration timestamp).
    """
    settings = get_settings()
    # PyJWT checks exp against the wall clock, not the injectable one
    issued_at = datetime.now(UTC)
    expiration = issued_at + timedelta(minutes=settings.jwt_expiration_minutes)
    claims = {
        "sub": str(user["id"]),
        "email": user["email"],
        "name": user["name"],
        "jti": str(uuid.uuid4()),
        "iss": settings.jwt_issuer,
        "aud": settings.jwt_audience,
        "iat": issued_at,
        "exp": expiration,
    }
    token = jwt.encode(claims, settings.jwt_secret_key, algorithm=_JWT_ALGORITHM)
    return token, expiration


def decode_access_token(token: str) -> uuid.UUID | None:
    """Validate a bearer token and return its user ID.

    Returns:
        The ``sub`` claim as a UUID, or None if the token is invalid or expired.
    """
    settings = get_settings()
    try:
        claims = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[_JWT_ALGORITHM],
            audience=settings.jwt_audience,
            issuer=settings.jwt_issuer,
            options={"require": ["sub", "exp"]},
        )
        return uuid.UUID(claims["sub"])
    except (jwt.InvalidTokenError, ValueError) as exc:
        logger.debug("Rejected bearer token: %s", exc)
        return None
