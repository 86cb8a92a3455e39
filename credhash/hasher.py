"""Hash, verify and rehash-check Argon2 password digests."""

import hmac
import logging
from enum import Enum
from typing import Optional, Union

from credhash import engine, phc
from credhash.exceptions import ParseError
from credhash.params import (
    LEGACY_VERSION,
    HashOptions,
    HashParams,
    merge_options,
    validate,
)
from credhash.salt import generate_salt, generate_salt_async

logger = logging.getLogger("credhash")

Password = Union[str, bytes]


class VerifyResult(Enum):
    """Outcome of checking a password against a decoded digest."""
    MATCH = "match"
    MISMATCH = "mismatch"
    UNKNOWN_SCHEME = "unknown_scheme"


def _to_bytes(password: Password) -> bytes:
    if isinstance(password, str):
        return password.encode("utf-8")
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytes(password)
    raise TypeError(f"Password must be str or bytes, got {type(password).__name__}")


def _prepare(options: Optional[HashOptions]):
    params, salt_length = merge_options(options)
    validate(params)
    return params, salt_length


def _serialize(params: HashParams, salt: bytes, raw_hash: bytes) -> str:
    values = {
        "m": params.memory_cost,
        "t": params.time_cost,
        "p": params.parallelism,
    }
    if params.associated_data is not None:
        values["data"] = params.associated_data

    return phc.encode(phc.Digest(
        id=params.variant.phc_name,
        version=params.version,
        params=values,
        salt=salt,
        hash=raw_hash,
    ))


def hash_password(
    password: Password, options: Optional[HashOptions] = None
) -> Union[str, bytes]:
    """Hash a password with Argon2.

    Args:
        password: The plaintext password; str is UTF-8 encoded.
        options: Overrides merged over the defaults. ``options.salt`` skips
            salt generation, ``options.raw`` skips PHC encoding.

    Returns:
        A PHC digest string, or the raw hash bytes when ``raw`` is set.

    Raises:
        ValidationError: If a merged parameter is out of bounds.
        EngineError: If the Argon2 computation fails.
    """
    params, salt_length = _prepare(options)
    salt = options.salt if options is not None else None
    if salt is None:
        salt = generate_salt(salt_length)

    raw_hash = engine.compute(_to_bytes(password), salt, params)
    logger.debug(
        f"Hashed password with {params.variant.phc_name} "
        f"m={params.memory_cost} t={params.time_cost} p={params.parallelism}"
    )

    if options is not None and options.raw:
        return raw_hash
    return _serialize(params, salt, raw_hash)


async def hash_password_async(
    password: Password, options: Optional[HashOptions] = None
) -> Union[str, bytes]:
    """Async form of :func:`hash_password`; salt and engine run off-loop."""
    params, salt_length = _prepare(options)
    salt = options.salt if options is not None else None
    if salt is None:
        salt = await generate_salt_async(salt_length)

    raw_hash = await engine.compute_async(_to_bytes(password), salt, params)
    logger.debug(
        f"Hashed password with {params.variant.phc_name} "
        f"m={params.memory_cost} t={params.time_cost} p={params.parallelism}"
    )

    if options is not None and options.raw:
        return raw_hash
    return _serialize(params, salt, raw_hash)


def _require_int(digest: phc.Digest, name: str) -> int:
    value = digest.params.get(name)
    if not isinstance(value, int):
        raise ParseError(f"{digest.id} digest is missing integer parameter {name!r}")
    return value


def params_from_digest(
    digest: phc.Digest, options: Optional[HashOptions] = None
) -> Optional[HashParams]:
    """Rebuild the parameters a digest was created with.

    Cost parameters, version and hash length always come from the digest.
    ``options`` only supplies associated data the digest does not carry.

    Returns:
        The parameters, or None if the digest is not an Argon2 digest.

    Raises:
        ParseError: If an Argon2 digest lacks ``m``, ``t`` or ``p``.
    """
    variant = digest.variant
    if variant is None:
        return None

    associated_data = digest.params.get("data")
    if associated_data is None and options is not None:
        associated_data = options.associated_data

    return HashParams(
        variant=variant,
        version=LEGACY_VERSION if digest.version is None else digest.version,
        memory_cost=_require_int(digest, "m"),
        time_cost=_require_int(digest, "t"),
        parallelism=_require_int(digest, "p"),
        hash_length=len(digest.hash),
        associated_data=associated_data,
    )


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings without leaking where they differ."""
    if len(a) != len(b):
        return False
    return hmac.compare_digest(a, b)


def _outcome(expected: bytes, computed: bytes) -> VerifyResult:
    if constant_time_equal(computed, expected):
        return VerifyResult.MATCH
    return VerifyResult.MISMATCH


def check_password(
    digest: phc.Digest, password: Password, options: Optional[HashOptions] = None
) -> VerifyResult:
    """Check a password against an already decoded digest."""
    params = params_from_digest(digest, options)
    if params is None:
        logger.debug(f"Refusing to verify digest with unknown scheme {digest.id!r}")
        return VerifyResult.UNKNOWN_SCHEME

    computed = engine.compute(_to_bytes(password), digest.salt, params)
    return _outcome(digest.hash, computed)


def verify_password(
    digest: str, password: Password, options: Optional[HashOptions] = None
) -> bool:
    """Verify a password against a stored PHC digest.

    Args:
        digest: The stored digest string.
        password: The candidate password.
        options: Only ``associated_data`` is honoured, and only when the
            digest does not carry its own.

    Returns:
        True on an exact match. False on mismatch or a non-Argon2 scheme.

    Raises:
        ParseError: If ``digest`` is not a well-formed PHC string.
        EngineError: If the Argon2 computation fails.
    """
    return check_password(phc.decode(digest), password, options) is VerifyResult.MATCH


async def verify_password_async(
    digest: str, password: Password, options: Optional[HashOptions] = None
) -> bool:
    """Async form of :func:`verify_password`."""
    decoded = phc.decode(digest)
    params = params_from_digest(decoded, options)
    if params is None:
        return False

    computed = await engine.compute_async(_to_bytes(password), decoded.salt, params)
    return _outcome(decoded.hash, computed) is VerifyResult.MATCH


def needs_rehash(digest: str, policy: Optional[HashOptions] = None) -> bool:
    """Tell whether a digest was made with outdated cost settings.

    Only version, memory cost and time cost are compared; parallelism and
    hash length changes never force a rehash. A digest from another scheme
    always needs rehashing.

    Raises:
        ParseError: If ``digest`` is not a well-formed PHC string.
    """
    current, _ = merge_options(policy)
    decoded = phc.decode(digest)
    if decoded.variant is None:
        return True

    version = LEGACY_VERSION if decoded.version is None else decoded.version
    memory_cost = _require_int(decoded, "m")
    time_cost = _require_int(decoded, "t")

    stale = (
        version != current.version
        or memory_cost != current.memory_cost
        or time_cost != current.time_cost
    )
    if stale:
        logger.debug(f"Digest is stale: v={version} m={memory_cost} t={time_cost}")
    return stale
