"""Global test fixtures and environment setup."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable

import pytest


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("TOKI_LOG_LEVEL", "TOKI_DEFAULT_ALGORITHM", "TOKI_CLOCK_SKEW_SECONDS"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def secret() -> str:
    return "test-suite-secret"


@pytest.fixture
def segment() -> Callable[[Any], str]:
    """Encode a JSON value (or raw bytes) as an unpadded base64url segment."""

    def _encode(value: Any) -> str:
        raw = value if isinstance(value, bytes) else json.dumps(value).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    return _encode
