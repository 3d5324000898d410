"""Token engine: assembles, signs, renders, parses and verifies JWTs."""

from __future__ import annotations

import hmac
import re
from enum import Enum
from typing import Any, Mapping, Optional

from .algorithms import Algorithm, compute_keyed_digest, encode_digest, get_algorithm
from .claims import Claims, Instant
from .codec import b64url_decode
from .config import TokenConfig
from .constants import DEFAULT_ALGORITHM, SEGMENT_SEPARATOR, TOKEN_TYPE_JWE, TOKEN_TYPE_JWT
from .errors import FormatError, SignatureMismatchError, TokenError, UnsignedTokenError
from .header import Header
from .logging import get_logger

logger = get_logger(__name__)

# The signature segment may be empty; only the unsecured algorithm accepts that.
_TOKEN_PATTERN = re.compile(r"[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*")


class TokenState(str, Enum):
    UNSIGNED = "unsigned"
    SIGNED = "signed"
    PARSED = "parsed"
    VERIFIED = "verified"
    REJECTED = "rejected"


class JsonWebToken:
    """A JWT being built for signing or ingested for verification.

    Construction path: ``UNSIGNED`` -> ``SIGNED`` via :meth:`sign`.
    Ingestion path: ``PARSED`` -> ``VERIFIED`` or ``REJECTED`` via
    :meth:`verify`. A parsed token keeps the segments it was parsed from;
    verification and rendering use them until the token is signed again.
    """

    def __init__(
        self,
        *,
        algorithm: Algorithm | str = DEFAULT_ALGORITHM,
        header: Header | None = None,
        claims: Claims | None = None,
        leeway: int = 0,
    ) -> None:
        self._algorithm = _resolve(algorithm)
        self.header = header if header is not None else Header.default()
        self.claims = claims if claims is not None else Claims()
        self.signature: Optional[str] = None
        self.state = TokenState.UNSIGNED
        self.leeway = leeway
        self._received: Optional[str] = None

    @classmethod
    def new(
        cls,
        algorithm: Algorithm | str | None = None,
        *,
        config: TokenConfig | None = None,
    ) -> JsonWebToken:
        if algorithm is None:
            algorithm = config.default_algorithm if config else DEFAULT_ALGORITHM
        leeway = config.clock_skew_seconds if config else 0
        return cls(algorithm=algorithm, leeway=leeway)

    @classmethod
    def from_string(
        cls,
        token_string: str,
        *,
        now: Instant | None = None,
        leeway: int | None = None,
        config: TokenConfig | None = None,
    ) -> JsonWebToken:
        token = cls.new(config=config)
        token.parse(token_string, now=now, leeway=leeway)
        return token

    # Algorithm ------------------------------------------------------------
    @property
    def algorithm(self) -> Algorithm:
        return self._algorithm

    @algorithm.setter
    def algorithm(self, value: Algorithm | str) -> None:
        self._algorithm = _resolve(value)

    def update_header_from_algorithm(self) -> None:
        self.header.type = TOKEN_TYPE_JWE if self._algorithm.is_encryption else TOKEN_TYPE_JWT
        self.header.algorithm = self._algorithm.name

    # Construction ---------------------------------------------------------
    def signing_input(self) -> str:
        return SEGMENT_SEPARATOR.join((self.header.encode_segment(), self.claims.encode_segment()))

    def _compute_signature(self, secret: str | bytes, signing_input: str) -> str:
        if self._algorithm.is_unsecured:
            return ""
        return encode_digest(compute_keyed_digest(self._algorithm, secret, signing_input))

    def sign(self, secret: str | bytes) -> None:
        self.update_header_from_algorithm()
        self.signature = self._compute_signature(secret, self.signing_input())
        self._received = None
        self.state = TokenState.SIGNED
        logger.debug(
            "token.signed",
            algorithm=self._algorithm.name,
            tokenId=self.claims.token_id,
            unsecured=self._algorithm.is_unsecured,
        )

    def render(self) -> str:
        if self.signature is None:
            if not self._algorithm.is_unsecured:
                raise UnsignedTokenError(
                    "Token must be signed before it can be rendered",
                    details={"algorithm": self._algorithm.name},
                )
            self.update_header_from_algorithm()
            signature = ""
        else:
            signature = self.signature
        content = self._received if self._received is not None else self.signing_input()
        return f"{content}{SEGMENT_SEPARATOR}{signature}"

    # Ingestion ------------------------------------------------------------
    def parse(
        self,
        token_string: str,
        *,
        now: Instant | None = None,
        leeway: int | None = None,
    ) -> None:
        """Load ``token_string`` into this token without verifying it.

        Nothing on the token changes unless every segment decodes and
        validates.
        """
        skew = self.leeway if leeway is None else leeway
        try:
            header, algorithm, claims, signature = _decode(token_string, now=now, leeway=skew)
        except TokenError as exc:
            logger.warning("token.parse_failed", code=exc.code.value, reason=exc.message)
            raise

        header_segment, claims_segment, _ = token_string.split(SEGMENT_SEPARATOR)
        self.header = header
        self._algorithm = algorithm
        self.claims = claims
        self.signature = signature
        self._received = f"{header_segment}{SEGMENT_SEPARATOR}{claims_segment}"
        self.state = TokenState.PARSED
        logger.debug("token.parsed", algorithm=algorithm.name, tokenId=claims.token_id)

    def verify(self, secret: str | bytes) -> bool:
        """Return ``True`` when the stored signature matches ``secret``.

        Raises :class:`SignatureMismatchError` otherwise.
        """
        if self.signature is None:
            raise UnsignedTokenError("Token carries no signature to verify")
        content = self._received if self._received is not None else self.signing_input()
        expected = self._compute_signature(secret, content)
        if hmac.compare_digest(expected.encode("ascii"), self.signature.encode("ascii")):
            self.state = TokenState.VERIFIED
            logger.debug("token.verified", algorithm=self._algorithm.name, tokenId=self.claims.token_id)
            return True
        self.state = TokenState.REJECTED
        logger.warning("token.verify_failed", algorithm=self._algorithm.name, tokenId=self.claims.token_id)
        raise SignatureMismatchError("Signature mismatch", details={"algorithm": self._algorithm.name})

    def is_valid(self, secret: str | bytes) -> bool:
        try:
            return self.verify(secret)
        except SignatureMismatchError:
            return False

    # One-shot helpers -----------------------------------------------------
    @classmethod
    def encode(
        cls,
        claims: Claims | Mapping[str, Any],
        secret: str | bytes,
        *,
        algorithm: Algorithm | str = DEFAULT_ALGORITHM,
        key_id: str | None = None,
    ) -> str:
        if not isinstance(claims, Claims):
            claims = Claims.from_dict(claims)
        token = cls(algorithm=algorithm, claims=claims)
        if key_id is not None:
            token.header.key_id = key_id
        token.sign(secret)
        return token.render()

    @classmethod
    def decode(
        cls,
        token_string: str,
        secret: str | bytes,
        *,
        now: Instant | None = None,
        leeway: int = 0,
    ) -> Claims:
        """Parse and verify ``token_string``, returning its claims."""
        token = cls()
        token.parse(token_string, now=now, leeway=leeway)
        token.verify(secret)
        return token.claims

    def __repr__(self) -> str:
        return (
            f"JsonWebToken(algorithm={self._algorithm.name!r}, state={self.state.value!r}, "
            f"token_id={self.claims.token_id!r})"
        )


def _resolve(algorithm: Algorithm | str) -> Algorithm:
    if isinstance(algorithm, Algorithm):
        return algorithm
    return get_algorithm(algorithm)


def _decode(
    token_string: str, *, now: Instant | None, leeway: int
) -> tuple[Header, Algorithm, Claims, str]:
    if not isinstance(token_string, str) or _TOKEN_PATTERN.fullmatch(token_string) is None:
        raise FormatError(
            "Invalid token format: expected three dot-separated base64url segments",
            details={"length": len(token_string) if isinstance(token_string, str) else 0},
        )
    header_segment, claims_segment, signature = token_string.split(SEGMENT_SEPARATOR)

    header = Header.parse(b64url_decode(header_segment))
    algorithm = get_algorithm(header.algorithm or "")
    if not signature and not algorithm.is_unsecured:
        raise FormatError(
            "Invalid token format: empty signature segment",
            details={"algorithm": algorithm.name},
        )
    claims = Claims.parse(b64url_decode(claims_segment), now=now, leeway=leeway)
    return header, algorithm, claims, signature


__all__ = ["JsonWebToken", "TokenState"]
