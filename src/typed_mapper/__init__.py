"""Typed Mapper - object/relation mapping metadata and statement building."""

from typed_mapper.config import BuilderConfig
from typed_mapper.errors import (
    BuilderMisuseError,
    FrozenGraphError,
    InvalidInputError,
    MapperError,
)
from typed_mapper.graph import Edge, Graph, Vertex
from typed_mapper.manager import MappingManager
from typed_mapper.mapping import Mapping, SourceInfo
from typed_mapper.parsing import MappingParser, load_manager
from typed_mapper.reflection import describe_class
from typed_mapper.sql import Parameter, Statement, StatementBuilder, ValueKind, select
from typed_mapper.types import TypeDescriptor, TypeRegistry

__all__ = [
    # Main API
    "MappingManager",
    "Mapping",
    "SourceInfo",
    "MappingParser",
    "load_manager",
    # Types
    "TypeDescriptor",
    "TypeRegistry",
    "describe_class",
    # Graph
    "Graph",
    "Vertex",
    "Edge",
    # Statements
    "select",
    "StatementBuilder",
    "Statement",
    "Parameter",
    "ValueKind",
    "BuilderConfig",
    # Errors
    "MapperError",
    "InvalidInputError",
    "BuilderMisuseError",
    "FrozenGraphError",
]

__version__ = "0.1.0"
