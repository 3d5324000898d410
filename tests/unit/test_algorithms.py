"""Tests for the algorithm registry."""

from __future__ import annotations

import hashlib
import hmac

import pytest

from toki import algorithms
from toki.algorithms import (
    HS256,
    HS384,
    HS512,
    NONE,
    compute_keyed_digest,
    encode_digest,
    get_algorithm,
    supported_algorithms,
)
from toki.errors import AlgorithmError, AlgorithmUnknownError


def test_registry_is_closed_set() -> None:
    assert supported_algorithms() == ("none", "HS256", "HS384", "HS512")


@pytest.mark.parametrize(
    ("name", "expected"), [("none", NONE), ("HS256", HS256), ("HS384", HS384), ("HS512", HS512)]
)
def test_get_algorithm_returns_constants(name: str, expected: algorithms.Algorithm) -> None:
    assert get_algorithm(name) is expected


def test_named_constructors() -> None:
    assert algorithms.none() is NONE
    assert algorithms.hs256() is HS256
    assert algorithms.hs384() is HS384
    assert algorithms.hs512() is HS512


@pytest.mark.parametrize("name", ["hs256", "RS256", "", "HS1024"])
def test_unknown_algorithm(name: str) -> None:
    with pytest.raises(AlgorithmUnknownError):
        get_algorithm(name)


def test_algorithm_is_immutable() -> None:
    with pytest.raises(AttributeError):
        HS256.name = "HS512"  # type: ignore[misc]


def test_hs256_known_vector() -> None:
    digest = compute_keyed_digest(HS256, "key", "The quick brown fox jumps over the lazy dog")

    assert digest.hex() == "f7bc83f430538424b13298e6aa6fb143ef4d59a14946175997479dbc2d1a3cd8"


@pytest.mark.parametrize(
    ("algorithm", "hash_factory", "size"),
    [(HS256, hashlib.sha256, 32), (HS384, hashlib.sha384, 48), (HS512, hashlib.sha512, 64)],
)
def test_digest_matches_hmac(algorithm, hash_factory, size: int) -> None:
    digest = compute_keyed_digest(algorithm, b"k\x00ey", b"message")

    assert digest == hmac.new(b"k\x00ey", b"message", hash_factory).digest()
    assert len(digest) == size


def test_none_has_no_keyed_digest() -> None:
    assert NONE.is_unsecured
    with pytest.raises(AlgorithmError):
        compute_keyed_digest(NONE, "secret", "message")


def test_encode_digest_has_no_padding() -> None:
    encoded = encode_digest(compute_keyed_digest(HS256, "secret", "message"))

    assert "=" not in encoded
    assert len(encoded) == 43
