"""Configuration data classes."""

from dataclasses import dataclass, field
from typing import Optional

from credhash.params import DEFAULTS, HashOptions, Variant


@dataclass
class PolicyConfig:
    """Current hashing policy."""
    variant: str = DEFAULTS["variant"].phc_name
    version: int = DEFAULTS["version"]
    memory_cost: int = DEFAULTS["memory_cost"]
    time_cost: int = DEFAULTS["time_cost"]
    parallelism: int = DEFAULTS["parallelism"]
    hash_length: int = DEFAULTS["hash_length"]
    salt_length: int = DEFAULTS["salt_length"]

    def to_options(self) -> HashOptions:
        """Build the HashOptions this policy describes."""
        return HashOptions(
            variant=Variant.from_name(self.variant),
            version=self.version,
            memory_cost=self.memory_cost,
            time_cost=self.time_cost,
            parallelism=self.parallelism,
            hash_length=self.hash_length,
            salt_length=self.salt_length,
        )


@dataclass
class LoggingConfig:
    """Logger settings."""
    level: str = "INFO"
    path: Optional[str] = None


@dataclass
class Config:
    """Top-level configuration."""
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
