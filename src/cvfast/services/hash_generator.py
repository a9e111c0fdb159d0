"""Short link hash generation.

Hashes are 8 characters from the URL-safe base64 alphabet
(``A-Z a-z 0-9 - _``) with padding stripped. They carry 48 bits, so
uniqueness is ultimately enforced by the registry's unique index.
"""

from __future__ import annotations

import base64
import hashlib
import re
import time
import uuid

HASH_LENGTH = 8

_HASH_PATTERN = re.compile(rf"[A-Za-z0-9_-]{{{HASH_LENGTH}}}")


def _encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")[:HASH_LENGTH]


def generate_hash(curriculum_id: uuid.UUID | None = None) -> str:
    """Return a hash derived from the curriculum id, a timestamp and a random UUID.

    The seed is hashed with SHA-256 before encoding, so the output does not
    reveal the curriculum id or the time.

    Args:
        curriculum_id: Owning curriculum, mixed into the seed when provided.

    Returns:
        8-character URL-safe token.
    """
    seed = f"{curriculum_id}_{time.time_ns()}_{uuid.uuid4()}"
    digest = hashlib.sha256(seed.encode("utf-8")).digest()
    return _encode(digest)


def generate_random_hash(curriculum_id: uuid.UUID | None = None) -> str:  # noqa: ARG001
    """Return a hash taken directly from the bytes of a fresh random UUID."""
    return _encode(uuid.uuid4().bytes)


def is_valid_hash(value: str) -> bool:
    """Whether ``value`` has the shape of a generated hash."""
    return _HASH_PATTERN.fullmatch(value) is not None
