"""YAML configuration loader with env var interpolation."""

import os
import re
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from credhash.config_schema import Config, LoggingConfig, PolicyConfig
from credhash.exceptions import ConfigError, ValidationError
from credhash.params import Variant, merge_options, validate

_INT_FIELDS = (
    "version",
    "memory_cost",
    "time_cost",
    "parallelism",
    "hash_length",
    "salt_length",
)


def load_config(cli_path: "Optional[str]" = None) -> Config:
    """Load configuration from YAML file.

    Search order:
    1. Explicit path
    2. ./credhash.yaml
    3. ~/.config/credhash/config.yaml
    4. /etc/credhash/config.yaml
    """
    search_paths = [
        Path("./credhash.yaml"),
        Path.home() / ".config" / "credhash" / "config.yaml",
        Path("/etc/credhash/config.yaml"),
    ]

    if cli_path:
        config_path = Path(cli_path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {cli_path}")
    else:
        config_path = None
        for path in search_paths:
            if path.exists():
                config_path = path
                break

        if config_path is None:
            searched = "\n  ".join(str(p) for p in search_paths)
            raise ConfigError(
                f"No config file found. Searched:\n  {searched}\n\n"
                "Create credhash.yaml or pass an explicit path"
            )

    load_dotenv()
    return _parse_config(config_path)


def _parse_config(path: Path) -> Config:
    """Parse YAML config file."""
    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    return Config(
        policy=_parse_policy(raw.get("policy") or {}),
        logging=_parse_logging(raw.get("logging") or {}),
    )


def _parse_policy(raw: dict) -> PolicyConfig:
    """Parse the policy section, falling back to defaults per key."""
    if not isinstance(raw, dict):
        raise ConfigError("'policy' must be a mapping")

    defaults = PolicyConfig()

    variant = _interpolate(raw.get("variant", defaults.variant))
    if Variant.from_name(variant) is None:
        raise ConfigError(f"Unknown Argon2 variant: {variant}")

    values = {}
    for name in _INT_FIELDS:
        values[name] = _to_int(name, raw.get(name, getattr(defaults, name)))

    policy = PolicyConfig(variant=variant, **values)

    params, _ = merge_options(policy.to_options())
    try:
        validate(params)
    except ValidationError as e:
        raise ConfigError(f"Invalid policy: {e}") from e
    if policy.salt_length < 1:
        raise ConfigError("Invalid policy: salt_length must be positive")

    return policy


def _parse_logging(raw: dict) -> LoggingConfig:
    """Parse the logging section."""
    if not isinstance(raw, dict):
        raise ConfigError("'logging' must be a mapping")

    return LoggingConfig(
        level=_interpolate(raw.get("level", "INFO")),
        path=_interpolate(raw.get("path")),
    )


def _to_int(name: str, value) -> int:
    """Coerce an integer setting that may have come from an env var."""
    value = _interpolate(value)
    if isinstance(value, bool):
        raise ConfigError(f"Policy field {name} must be an integer, got {value!r}")
    try:
        return int(value, 0) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Policy field {name} must be an integer, got {value!r}")


def _interpolate(value: "Optional[str]") -> "Optional[str]":
    """Expand ${VAR} references in a string value."""
    if value is None:
        return None
    if not isinstance(value, str):
        return value

    pattern = re.compile(r'\$\{([^}]+)\}')

    def replacer(match):
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise ConfigError(f"Environment variable not set: {var_name}")
        return env_value

    return pattern.sub(replacer, value)
