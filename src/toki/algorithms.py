"""Registry of the HMAC signing algorithms a token may use."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

from .codec import b64url_encode
from .constants import UNSECURED_ALGORITHM
from .errors import AlgorithmError, AlgorithmUnknownError

HashFactory = Callable[..., Any]


@dataclass(frozen=True)
class Algorithm:
    """A named JWA algorithm and the hash backing its keyed digest."""

    name: str
    signature_hash: Optional[HashFactory] = None
    # Reserved for JWE; no registered algorithm sets it.
    encryption_hash: Optional[HashFactory] = None

    @property
    def is_unsecured(self) -> bool:
        return self.signature_hash is None

    @property
    def is_encryption(self) -> bool:
        return self.encryption_hash is not None


NONE = Algorithm(name=UNSECURED_ALGORITHM)
HS256 = Algorithm(name="HS256", signature_hash=hashlib.sha256)
HS384 = Algorithm(name="HS384", signature_hash=hashlib.sha384)
HS512 = Algorithm(name="HS512", signature_hash=hashlib.sha512)

_REGISTRY: Mapping[str, Algorithm] = MappingProxyType(
    {algorithm.name: algorithm for algorithm in (NONE, HS256, HS384, HS512)}
)


def none() -> Algorithm:
    return NONE


def hs256() -> Algorithm:
    return HS256


def hs384() -> Algorithm:
    return HS384


def hs512() -> Algorithm:
    return HS512


def supported_algorithms() -> tuple[str, ...]:
    return tuple(_REGISTRY)


def get_algorithm(name: str) -> Algorithm:
    """Return the registered algorithm called ``name`` (case-sensitive)."""
    try:
        return _REGISTRY[name]
    except (KeyError, TypeError):
        raise AlgorithmUnknownError(
            f"Unsupported algorithm '{name}'",
            details={"supported": ", ".join(_REGISTRY)},
        ) from None


def _key_bytes(secret: str | bytes) -> bytes:
    if isinstance(secret, bytes):
        return secret
    return secret.encode("utf-8")


def compute_keyed_digest(algorithm: Algorithm, secret: str | bytes, message: str | bytes) -> bytes:
    """HMAC ``message`` with ``secret`` using the algorithm's hash."""
    if algorithm.signature_hash is None:
        raise AlgorithmError(f"Algorithm '{algorithm.name}' has no keyed hash")
    if isinstance(message, str):
        message = message.encode("ascii")
    return hmac.new(_key_bytes(secret), message, algorithm.signature_hash).digest()


def encode_digest(digest: bytes) -> str:
    return b64url_encode(digest)


__all__ = [
    "Algorithm",
    "HS256",
    "HS384",
    "HS512",
    "NONE",
    "compute_keyed_digest",
    "encode_digest",
    "get_algorithm",
    "hs256",
    "hs384",
    "hs512",
    "none",
    "supported_algorithms",
]
