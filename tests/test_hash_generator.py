"""Tests for short link hash generation."""

from __future__ import annotations

import uuid

import pytest

from cvfast.services.hash_generator import (
    HASH_LENGTH,
    generate_hash,
    generate_random_hash,
    is_valid_hash,
)


@pytest.mark.parametrize("factory", [generate_hash, generate_random_hash])
def test_hashes_are_eight_url_safe_characters(factory):
    """Generated hashes use the base64url alphabet with no padding."""
    for _ in range(200):
        value = factory(uuid.uuid4())
        assert len(value) == HASH_LENGTH == 8
        assert "=" not in value
        assert is_valid_hash(value)


def test_generate_hash_varies_for_same_curriculum():
    """The random component makes repeated calls for one curriculum differ."""
    curriculum_id = uuid.uuid4()
    values = {generate_hash(curriculum_id) for _ in range(500)}
    assert len(values) == 500


def test_generate_hash_without_curriculum_id():
    assert is_valid_hash(generate_hash())
    assert is_valid_hash(generate_random_hash())


@pytest.mark.parametrize(
    "value",
    [
        "",
        "abc",
        "abcdefghi",
        "abc/efgh",
        "abc+efgh",
        "abcd=fgh",
        "abcdefg\n",
        "abcdefg ",
    ],
)
def test_is_valid_hash_rejects_malformed_values(value):
    assert is_valid_hash(value) is False


@pytest.mark.parametrize("value", ["AbCd1234", "a-b_c-d_", "________", "00000000"])
def test_is_valid_hash_accepts_alphabet(value):
    assert is_valid_hash(value) is True
