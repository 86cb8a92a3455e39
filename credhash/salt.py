"""Random salt generation."""

import asyncio
import secrets

from credhash.params import DEFAULTS


def generate_salt(length: int = DEFAULTS["salt_length"]) -> bytes:
    """Return `length` bytes from the OS CSPRNG."""
    return secrets.token_bytes(length)


async def generate_salt_async(length: int = DEFAULTS["salt_length"]) -> bytes:
    """Generate a salt without blocking the event loop on entropy."""
    loop = asyncio.get_event_loop()
    return await loop.run_in_executor(None, generate_salt, length)
