"""Shared constants for JWT handling."""

TOKEN_TYPE_JWT = "JWT"
TOKEN_TYPE_JWE = "JWE"
DEFAULT_ALGORITHM = "HS256"
UNSECURED_ALGORITHM = "none"
SEGMENT_SEPARATOR = "."
REGISTERED_CLAIMS = ("iss", "sub", "aud", "exp", "nbf", "iat", "jti")
