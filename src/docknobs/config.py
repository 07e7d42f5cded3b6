"""Configuration loading with environment variable substitution."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class VariableSubstitution:
    """Handles environment variable substitution in configuration values.

    Supports patterns:
    - ${VAR} - Replace with environment variable VAR, error if not found
    - ${VAR:default} - Replace with VAR or use default if not found
    - ${VAR:-default} - Same as above (bash-style)
    """

    VAR_PATTERN = re.compile(r'\$\{([^}:]+)(?::(-)?([^}]*))?\}')

    def substitute(self, value: Any) -> Any:
        """Recursively substitute environment variables in a value.

        Raises:
            ConfigurationError: If a required environment variable is not found
        """
        if isinstance(value, str):
            return self._substitute_string(value)
        elif isinstance(value, dict):
            return {key: self.substitute(item) for key, item in value.items()}
        elif isinstance(value, list):
            return [self.substitute(item) for item in value]
        return value

    def _lookup(self, match: re.Match) -> str:
        var_name = match.group(1)
        has_default = match.group(2) is not None or match.group(3) is not None
        if var_name in os.environ:
            return os.environ[var_name]
        if has_default:
            return match.group(3) or ""
        raise ConfigurationError(
            f"Environment variable '{var_name}' not found",
            context={"variable": var_name},
        )

    def _substitute_string(self, text: str) -> Any:
        # A value that is exactly one reference may become a non-string type
        match = self.VAR_PATTERN.fullmatch(text)
        if match:
            return self._convert_type(self._lookup(match))
        return self.VAR_PATTERN.sub(self._lookup, text)

    def _convert_type(self, value: str) -> str | int | float | bool:
        if value.lower() in ('true', 'yes'):
            return True
        elif value.lower() in ('false', 'no'):
            return False

        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        return value


def load_config(source: str | Path | dict[str, Any]) -> dict[str, Any]:
    """Load a configuration dictionary and substitute environment variables.

    Args:
        source: A dictionary, or the path of a ``.yaml``/``.yml``/``.json`` file

    Returns:
        The substituted configuration

    Raises:
        ConfigurationError: If the file is missing, has an unsupported
            format, or does not hold a mapping
    """
    if isinstance(source, dict):
        data: Any = source
    else:
        path = Path(source)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}", context={"path": str(path)}
            )
        suffix = path.suffix.lower()
        with open(path) as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f) or {}
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported configuration format: {suffix}",
                    context={"path": str(path)},
                )
        logger.debug(f"Loaded configuration from {path}")

    if not isinstance(data, dict):
        raise ConfigurationError("Configuration must be a mapping")
    return VariableSubstitution().substitute(data)


@dataclass
class PipelineConfig:
    """Settings for one mutation run.

    Example Configuration:
        location: ${COUCHDB_URL}/customers
        store:
          backend: couchdb
          timeout: 60
        page_size: 50
        report_frequency: 100
        verify_idempotent: true
    """

    location: str
    store: dict[str, Any] = field(default_factory=lambda: {"backend": "couchdb"})
    page_size: int = 10
    report_frequency: int = 1
    verify_idempotent: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if not self.location:
            raise ConfigurationError("location is required")
        if self.page_size <= 0:
            raise ValueError("page_size must be positive")
        if self.report_frequency <= 0:
            raise ValueError("report_frequency must be positive")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PipelineConfig:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration keys: {', '.join(unknown)}",
                context={"unknown": unknown},
            )
        if "location" not in data:
            raise ConfigurationError("location is required")
        return cls(**data)

    @classmethod
    def load(cls, source: str | Path | dict[str, Any]) -> PipelineConfig:
        """Load from a file or dictionary, substituting environment variables."""
        return cls.from_dict(load_config(source))
