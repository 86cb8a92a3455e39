"""Tests for salt generation."""

import asyncio

from credhash.salt import generate_salt, generate_salt_async


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


class TestGenerateSalt:
    """Tests for generate_salt function."""

    def test_default_length(self):
        assert len(generate_salt()) == 16

    def test_custom_length(self):
        assert len(generate_salt(32)) == 32

    def test_salts_are_unique(self):
        assert generate_salt() != generate_salt()

    def test_uses_secrets(self, mocker):
        token = mocker.patch("credhash.salt.secrets.token_bytes", return_value=b"x" * 16)

        assert generate_salt(16) == b"x" * 16
        token.assert_called_once_with(16)


class TestGenerateSaltAsync:
    """Tests for generate_salt_async function."""

    def test_returns_requested_length(self):
        assert len(run_async(generate_salt_async(24))) == 24
