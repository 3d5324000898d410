"""Error types raised while building, parsing and verifying tokens."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    INVALID_FORMAT = "InvalidFormat"
    DECODE_FAILED = "DecodeFailed"
    VALIDATION_FAILED = "ValidationFailed"
    TOKEN_EXPIRED = "TokenExpired"
    TOKEN_NOT_YET_ACTIVE = "TokenNotYetActive"
    ALGORITHM_ERROR = "AlgorithmError"
    ALGORITHM_UNKNOWN = "AlgorithmUnknown"
    UNSIGNED_TOKEN = "UnsignedToken"
    SIGNATURE_MISMATCH = "SignatureMismatch"


class TokenError(ValueError):
    """Base error for token failures.

    Callers should treat any ``TokenError`` as "do not trust this token".
    """

    code: ErrorCode = ErrorCode.VALIDATION_FAILED

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        if code is not None:
            self.code = code
        self.details = details or {}

    @property
    def message(self) -> str:
        return str(self.args[0]) if self.args else ""

    def __str__(self) -> str:
        base = f"{self.code.value}: {self.message}"
        if self.details:
            return f"{base} ({self.details})"
        return base


class FormatError(TokenError):
    """The token string is not three dot-separated base64url segments."""

    code = ErrorCode.INVALID_FORMAT


class DecodeError(TokenError):
    """A segment is not valid base64url or does not hold a JSON object."""

    code = ErrorCode.DECODE_FAILED


class ValidationError(TokenError):
    """Decoded header or claims violate a structural or temporal rule."""

    code = ErrorCode.VALIDATION_FAILED


class ExpiredTokenError(ValidationError):
    code = ErrorCode.TOKEN_EXPIRED


class NotYetActiveError(ValidationError):
    code = ErrorCode.TOKEN_NOT_YET_ACTIVE


class AlgorithmError(TokenError):
    """The held algorithm cannot perform the requested operation."""

    code = ErrorCode.ALGORITHM_ERROR


class AlgorithmUnknownError(AlgorithmError):
    code = ErrorCode.ALGORITHM_UNKNOWN


class UnsignedTokenError(TokenError):
    code = ErrorCode.UNSIGNED_TOKEN


class SignatureMismatchError(TokenError):
    code = ErrorCode.SIGNATURE_MISMATCH


__all__ = [
    "AlgorithmError",
    "AlgorithmUnknownError",
    "DecodeError",
    "ErrorCode",
    "ExpiredTokenError",
    "FormatError",
    "NotYetActiveError",
    "SignatureMismatchError",
    "TokenError",
    "UnsignedTokenError",
    "ValidationError",
]
