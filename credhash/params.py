"""Hashing parameters, defaults, limits and validation."""

from dataclasses import dataclass
from enum import IntEnum
from types import MappingProxyType
from typing import Mapping, NamedTuple, Optional, Tuple

from credhash.exceptions import ValidationError

ARGON2_VERSION_10 = 0x10
ARGON2_VERSION_13 = 0x13

# Digests written before the version field existed
LEGACY_VERSION = ARGON2_VERSION_10

U32_MAX = 2**32 - 1


class Variant(IntEnum):
    """Argon2 flavours, valued as the engine expects them."""

    D = 0
    I = 1  # noqa: E741
    ID = 2

    @property
    def phc_name(self) -> str:
        return _NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "Optional[Variant]":
        """Look up a variant by PHC id, or None if the id is foreign."""
        return _BY_NAME.get(name)


_NAMES = MappingProxyType({
    Variant.D: "argon2d",
    Variant.I: "argon2i",
    Variant.ID: "argon2id",
})
_BY_NAME = MappingProxyType({name: variant for variant, name in _NAMES.items()})


class Limit(NamedTuple):
    min: int
    max: int


DEFAULTS = MappingProxyType({
    "variant": Variant.ID,
    "version": ARGON2_VERSION_13,
    "memory_cost": 1 << 16,
    "time_cost": 3,
    "parallelism": 4,
    "hash_length": 32,
    "salt_length": 16,
})

LIMITS: Mapping[str, Limit] = MappingProxyType({
    "hash_length": Limit(4, U32_MAX),
    "memory_cost": Limit(1 << 10, U32_MAX),
    "time_cost": Limit(2, U32_MAX),
    "parallelism": Limit(1, 2**24 - 1),
})


@dataclass(frozen=True)
class HashParams:
    """Fully resolved parameters for one engine invocation."""
    variant: Variant = DEFAULTS["variant"]
    version: int = DEFAULTS["version"]
    memory_cost: int = DEFAULTS["memory_cost"]
    time_cost: int = DEFAULTS["time_cost"]
    parallelism: int = DEFAULTS["parallelism"]
    hash_length: int = DEFAULTS["hash_length"]
    associated_data: Optional[bytes] = None


@dataclass(frozen=True)
class HashOptions:
    """Caller overrides. Unset fields fall back to DEFAULTS."""
    variant: Optional[Variant] = None
    version: Optional[int] = None
    memory_cost: Optional[int] = None
    time_cost: Optional[int] = None
    parallelism: Optional[int] = None
    hash_length: Optional[int] = None
    salt_length: Optional[int] = None
    associated_data: Optional[bytes] = None
    salt: Optional[bytes] = None
    raw: bool = False


def _pick(value, name: str):
    return DEFAULTS[name] if value is None else value


def merge_options(options: Optional[HashOptions] = None) -> Tuple[HashParams, int]:
    """Merge caller options over the defaults.

    Args:
        options: Overrides, or None to use the defaults as-is.

    Returns:
        A tuple of (params, salt_length).

    Raises:
        ValidationError: If the variant is not an Argon2 variant.
    """
    if options is None:
        options = HashOptions()

    variant = _pick(options.variant, "variant")
    try:
        variant = Variant(variant)
    except ValueError as e:
        raise ValidationError("variant", value=variant) from e

    params = HashParams(
        variant=variant,
        version=_pick(options.version, "version"),
        memory_cost=_pick(options.memory_cost, "memory_cost"),
        time_cost=_pick(options.time_cost, "time_cost"),
        parallelism=_pick(options.parallelism, "parallelism"),
        hash_length=_pick(options.hash_length, "hash_length"),
        associated_data=options.associated_data,
    )
    return params, _pick(options.salt_length, "salt_length")


def validate(params: HashParams, limits: Mapping[str, Limit] = LIMITS) -> None:
    """Check every bounded field of params, stopping at the first violation.

    Raises:
        ValidationError: Naming the offending field and its bounds.
    """
    for name, (minimum, maximum) in limits.items():
        value = getattr(params, name)
        # bool is an int subclass but never a valid cost
        if not isinstance(value, int) or isinstance(value, bool):
            raise ValidationError(name, minimum, maximum, value)
        if minimum > value or value > maximum:
            raise ValidationError(name, minimum, maximum, value)
