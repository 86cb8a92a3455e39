"""Tests for the Argon2 engine adapter."""

import asyncio
import base64

import pytest
from argon2.low_level import Type, hash_secret_raw

from credhash.engine import compute, compute_async
from credhash.exceptions import EngineError
from credhash.params import HashParams, Variant

FAST = dict(memory_cost=1024, time_cost=2, parallelism=1)


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


class TestCompute:
    """Tests for compute function."""

    def test_reference_vector_v13(self):
        """argon2i v=19 m=65536 t=2 p=1 'password'/'somesalt'."""
        params = HashParams(
            variant=Variant.I, version=0x13,
            memory_cost=65536, time_cost=2, parallelism=1, hash_length=32,
        )

        out = compute(b"password", b"somesalt", params)

        assert out.hex() == (
            "c1628832147d9720c5bd1cfd61367078729f6dfb6f8fea9ff98158e0d7816ed0"
        )

    def test_reference_vector_v10(self):
        params = HashParams(
            variant=Variant.I, version=0x10,
            memory_cost=65536, time_cost=2, parallelism=1, hash_length=32,
        )

        out = compute(b"password", b"somesalt", params)

        assert out == base64.b64decode("9sTbSlTio3Biev89thdrlKKiCaYsjjYVJxGAL3swxpQ=")

    @pytest.mark.parametrize("variant,argon_type", [
        (Variant.D, Type.D),
        (Variant.I, Type.I),
        (Variant.ID, Type.ID),
    ])
    def test_matches_hash_secret_raw(self, variant, argon_type):
        params = HashParams(variant=variant, hash_length=24, **FAST)

        out = compute(b"hunter2", b"0123456789abcdef", params)

        assert out == hash_secret_raw(
            secret=b"hunter2",
            salt=b"0123456789abcdef",
            time_cost=2,
            memory_cost=1024,
            parallelism=1,
            hash_len=24,
            type=argon_type,
            version=0x13,
        )

    def test_output_length_follows_params(self):
        out = compute(b"pw", b"0123456789abcdef", HashParams(hash_length=4, **FAST))
        assert len(out) == 4

    def test_associated_data_changes_output(self):
        salt = b"0123456789abcdef"
        plain = compute(b"pw", salt, HashParams(**FAST))
        with_ad = compute(b"pw", salt, HashParams(associated_data=b"ctx", **FAST))

        assert plain != with_ad

    def test_empty_associated_data_same_as_none(self):
        salt = b"0123456789abcdef"
        assert compute(b"pw", salt, HashParams(**FAST)) == compute(
            b"pw", salt, HashParams(associated_data=b"", **FAST)
        )

    def test_empty_password(self):
        out = compute(b"", b"0123456789abcdef", HashParams(**FAST))
        assert len(out) == 32

    def test_short_salt_raises_engine_error(self):
        with pytest.raises(EngineError) as exc_info:
            compute(b"pw", b"short", HashParams(**FAST))

        assert exc_info.value.code is not None
        assert "salt" in str(exc_info.value).lower()

    def test_memory_below_lane_minimum_raises(self):
        params = HashParams(memory_cost=1024, time_cost=2, parallelism=256)

        with pytest.raises(EngineError):
            compute(b"pw", b"0123456789abcdef", params)

    def test_out_of_range_values_raise_engine_error(self):
        params = HashParams(memory_cost=2**40, time_cost=2, parallelism=1)

        with pytest.raises(EngineError):
            compute(b"pw", b"0123456789abcdef", params)


class TestComputeAsync:
    """Tests for compute_async function."""

    def test_same_result_as_sync(self):
        params = HashParams(**FAST)
        salt = b"0123456789abcdef"

        out = run_async(compute_async(b"pw", salt, params))

        assert out == compute(b"pw", salt, params)
