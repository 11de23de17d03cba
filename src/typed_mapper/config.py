"""Defaults for statement building."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

DEFAULT_PARAMETER_PREFIX = "@"

# Length tag attached to string parameters for type binding
DEFAULT_STRING_LENGTH = 4


@dataclass(frozen=True)
class BuilderConfig:
    """Settings shared by statement builders."""

    parameter_prefix: str = DEFAULT_PARAMETER_PREFIX
    default_string_length: int = DEFAULT_STRING_LENGTH

    def __post_init__(self) -> None:
        if not self.parameter_prefix:
            raise ValueError("parameter_prefix must not be empty")
        if self.default_string_length < 0:
            raise ValueError("default_string_length must not be negative")

    @classmethod
    def from_mapping(cls, values: dict[str, Any]) -> BuilderConfig:
        """Create a config from a plain dict, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in values.items() if k in known})
