"""Argon2 engine adapter.

Wraps ``argon2.low_level.core`` so associated data can be passed through to
the reference implementation; ``hash_secret_raw`` has no slot for it.
"""

import asyncio
import logging

from argon2.low_level import core, error_to_str, ffi, lib

from credhash.exceptions import EngineError
from credhash.params import HashParams

logger = logging.getLogger("credhash")


def compute(password: bytes, salt: bytes, params: HashParams) -> bytes:
    """Derive a raw Argon2 hash.

    Args:
        password: The secret to hash.
        salt: Salt bytes (the engine requires at least 8).
        params: Resolved hashing parameters.

    Returns:
        ``params.hash_length`` bytes of output.

    Raises:
        EngineError: If the engine rejects the inputs or cannot allocate.
    """
    ad = params.associated_data

    # cffi buffers must stay referenced until core() returns
    try:
        cout = ffi.new("uint8_t[]", params.hash_length)
        cpwd = ffi.new("uint8_t[]", password)
        csalt = ffi.new("uint8_t[]", salt)
        cad = ffi.new("uint8_t[]", ad) if ad else ffi.NULL
        ctx = ffi.new(
            "argon2_context *",
            dict(
                version=params.version,
                out=cout,
                outlen=params.hash_length,
                pwd=cpwd,
                pwdlen=len(password),
                salt=csalt,
                saltlen=len(salt),
                secret=ffi.NULL,
                secretlen=0,
                ad=cad,
                adlen=len(ad) if ad else 0,
                t_cost=params.time_cost,
                m_cost=params.memory_cost,
                lanes=params.parallelism,
                threads=params.parallelism,
                allocate_cbk=ffi.NULL,
                free_cbk=ffi.NULL,
                flags=lib.ARGON2_DEFAULT_FLAGS,
            ),
        )
    except (MemoryError, OverflowError) as e:
        raise EngineError(f"Could not prepare Argon2 context: {e}") from e

    rv = core(ctx, params.variant.value)
    if rv != lib.ARGON2_OK:
        message = error_to_str(rv)
        logger.debug(f"Argon2 engine failed with code {rv}: {message}")
        raise EngineError(message, code=rv)

    return bytes(ffi.buffer(ctx.out, ctx.outlen))


async def compute_async(password: bytes, salt: bytes, params: HashParams) -> bytes:
    """Run :func:`compute` in the default executor."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, compute, password, salt, params)
