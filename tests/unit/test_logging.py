"""Tests for structured logging helpers."""

from __future__ import annotations

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from toki import JsonWebToken
from toki.errors import FormatError
from toki.logging import (
    bind_token_context,
    clear_context,
    coerce_log_level,
    redact_secrets,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    clear_context()
    structlog.reset_defaults()


def test_redact_secrets_masks_sensitive_keys() -> None:
    event = redact_secrets(
        None, "info", {"event": "x", "secret": "s3cr3t", "Signature": "abc", "alg": "HS256"}
    )

    assert event == {"event": "x", "secret": "***", "Signature": "***", "alg": "HS256"}


def test_coerce_log_level() -> None:
    assert coerce_log_level("debug") == logging.DEBUG
    assert coerce_log_level("bogus") == logging.INFO


def test_setup_logging_installs_redaction() -> None:
    setup_logging("debug")

    processors = structlog.get_config()["processors"]
    assert redact_secrets in processors
    assert isinstance(processors[-1], structlog.processors.JSONRenderer)


def test_bind_token_context_skips_missing_values() -> None:
    bind_token_context(token_id="jti-1")

    assert structlog.contextvars.get_contextvars() == {"tokenId": "jti-1"}
    clear_context("tokenId")
    assert structlog.contextvars.get_contextvars() == {}


def test_failed_parse_is_logged() -> None:
    with capture_logs() as logs:
        with pytest.raises(FormatError):
            JsonWebToken.from_string("abc.def")

    failure = next(entry for entry in logs if entry["event"] == "token.parse_failed")
    assert failure["code"] == "InvalidFormat"
    assert failure["log_level"] == "warning"


def test_signing_never_logs_the_secret(secret: str) -> None:
    with capture_logs() as logs:
        token = JsonWebToken.new()
        token.sign(secret)

    signed = next(entry for entry in logs if entry["event"] == "token.signed")
    assert signed["algorithm"] == "HS256"
    assert secret not in repr(logs)
