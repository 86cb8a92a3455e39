"""Credhash exception hierarchy."""

from __future__ import annotations

from typing import Optional


class CredhashError(Exception):
    """Base exception for all credhash errors."""


class ValidationError(CredhashError, ValueError):
    """A hashing parameter is outside its legal bounds."""

    def __init__(
        self,
        field: str,
        minimum: Optional[int] = None,
        maximum: Optional[int] = None,
        value=None,
    ):
        self.field = field
        self.minimum = minimum
        self.maximum = maximum
        self.value = value
        if minimum is None:
            message = f"Invalid {field}: {value!r}."
        else:
            message = f"Invalid {field}, must be between {minimum} and {maximum}."
        super().__init__(message)


class ParseError(CredhashError, ValueError):
    """A digest string does not have the PHC structure."""


class EngineError(CredhashError):
    """The Argon2 computation itself failed."""

    def __init__(self, message: str, code: Optional[int] = None):
        self.code = code
        super().__init__(message)


class ConfigError(CredhashError):
    """Invalid configuration or missing keys."""
