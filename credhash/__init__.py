"""Credhash - Argon2 password hashing in PHC format."""

__description__ = "Argon2 password hashing in PHC format."
__version__ = "0.3.0"

from credhash.exceptions import (
    ConfigError,
    CredhashError,
    EngineError,
    ParseError,
    ValidationError,
)
from credhash.hasher import (
    VerifyResult,
    check_password,
    hash_password,
    hash_password_async,
    needs_rehash,
    verify_password,
    verify_password_async,
)
from credhash.params import DEFAULTS, LIMITS, HashOptions, HashParams, Variant

__all__ = [
    "ConfigError",
    "CredhashError",
    "EngineError",
    "ParseError",
    "ValidationError",
    "VerifyResult",
    "check_password",
    "hash_password",
    "hash_password_async",
    "needs_rehash",
    "verify_password",
    "verify_password_async",
    "DEFAULTS",
    "LIMITS",
    "HashOptions",
    "HashParams",
    "Variant",
]
