"""Shared test fixtures for credhash tests."""

import pytest

from credhash.params import HashOptions, Variant


@pytest.fixture
def fast_options():
    """Cheapest parameters the validator accepts."""
    return HashOptions(memory_cost=1024, time_cost=2, parallelism=1, hash_length=32)


@pytest.fixture
def fixed_salt():
    """Deterministic 16-byte salt."""
    return bytes(range(16))


@pytest.fixture
def fast_digest(fast_options):
    """A digest of 'correct-password' made with fast_options."""
    from credhash.hasher import hash_password
    return hash_password("correct-password", fast_options)


@pytest.fixture
def fast_policy():
    """Policy matching fast_options' cost settings."""
    return HashOptions(
        variant=Variant.ID,
        memory_cost=1024,
        time_cost=2,
        parallelism=1,
    )
