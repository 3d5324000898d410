"""Compact JSON Web Token construction, signing, parsing and verification."""

from importlib import metadata

from .algorithms import (
    HS256,
    HS384,
    HS512,
    NONE,
    Algorithm,
    compute_keyed_digest,
    encode_digest,
    get_algorithm,
    hs256,
    hs384,
    hs512,
    none,
    supported_algorithms,
)
from .claims import Claims
from .config import ConfigError, TokenConfig, load_config
from .errors import (
    AlgorithmError,
    AlgorithmUnknownError,
    DecodeError,
    ErrorCode,
    ExpiredTokenError,
    FormatError,
    NotYetActiveError,
    SignatureMismatchError,
    TokenError,
    UnsignedTokenError,
    ValidationError,
)
from .header import Header
from .logging import get_logger, setup_logging
from .token import JsonWebToken, TokenState

__all__ = [
    "__version__",
    "Algorithm",
    "AlgorithmError",
    "AlgorithmUnknownError",
    "Claims",
    "ConfigError",
    "DecodeError",
    "ErrorCode",
    "ExpiredTokenError",
    "FormatError",
    "HS256",
    "HS384",
    "HS512",
    "Header",
    "JsonWebToken",
    "NONE",
    "NotYetActiveError",
    "SignatureMismatchError",
    "TokenConfig",
    "TokenError",
    "TokenState",
    "UnsignedTokenError",
    "ValidationError",
    "compute_keyed_digest",
    "encode_digest",
    "get_algorithm",
    "get_logger",
    "hs256",
    "hs384",
    "hs512",
    "load_config",
    "none",
    "setup_logging",
    "supported_algorithms",
]


try:
    __version__ = metadata.version("toki")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"
