"""base64url and JSON helpers shared by the header, claims and signature."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping

from .errors import DecodeError


def b64url_encode(data: bytes) -> str:
    """Encode ``data`` with the URL-safe alphabet and no ``=`` padding."""
    return strip_padding(base64.urlsafe_b64encode(data).decode("ascii"))


def strip_padding(value: str) -> str:
    return value.rstrip("=")


def pad(value: str) -> str:
    """Restore the padding an unpadded base64 string needs to decode."""
    return value + "=" * (-len(value) % 4)


def b64url_decode(segment: str) -> bytes:
    try:
        return base64.urlsafe_b64decode(pad(segment).encode("ascii"))
    except (binascii.Error, UnicodeEncodeError, ValueError) as exc:
        raise DecodeError("Segment is not valid base64url", details={"reason": str(exc)}) from exc


def _reject_constant(name: str) -> Any:
    raise DecodeError(f"Invalid JSON constant '{name}'", details={"constant": name})


def dumps(data: Mapping[str, Any]) -> bytes:
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def loads_object(data: bytes, *, segment: str) -> dict[str, Any]:
    """Decode ``data`` as a JSON object, naming ``segment`` on failure.

    Integers decode as Python ``int`` so timestamps keep full precision.
    """
    try:
        decoded = json.loads(data, parse_constant=_reject_constant)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DecodeError(f"Invalid {segment}: not valid JSON", details={"reason": str(exc)}) from exc
    if not isinstance(decoded, dict):
        raise DecodeError(
            f"Invalid {segment}: expected a JSON object",
            details={"type": type(decoded).__name__},
        )
    return decoded
