"""Parsing module for the mapping definition DSL."""

from typed_mapper.parsing.mapping_parser import (
    MappingDefinitions,
    MappingParser,
    load_manager,
)

__all__ = [
    "MappingDefinitions",
    "MappingParser",
    "load_manager",
]
