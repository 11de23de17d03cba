"""Mapping records binding domain types to relations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from typed_mapper.types import TypeDescriptor

DEFAULT_ORDER = 10


def config_name(database_config: Hashable) -> str:
    """Return a display name for a database configuration key."""
    if isinstance(database_config, type):
        return database_config.__name__
    return str(database_config)


@dataclass(frozen=True)
class Mapping:
    """Binding of one domain type to its relation under one database configuration.

    Identity is the (object_type, database_config) pair; the remaining fields
    describe how the relation is named.
    """

    object_type: TypeDescriptor
    database_config: Hashable
    table_name: str | None = None
    prefix: str = ""
    suffix: str = ""
    order: int = DEFAULT_ORDER

    def __post_init__(self) -> None:
        if self.object_type is None:
            raise ValueError("Mapping requires an object type")
        if self.database_config is None:
            raise ValueError("Mapping requires a database configuration")
        if not self.table_name:
            object.__setattr__(
                self, "table_name", f"{self.prefix}{self.object_type.name}{self.suffix}"
            )

    def __str__(self) -> str:
        return f"{self.object_type.name} -> {self.table_name} ({config_name(self.database_config)})"


@dataclass(frozen=True)
class SourceInfo:
    """A configured data source."""

    name: str
    database_config: Hashable
