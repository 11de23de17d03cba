"""Parameterized statement building."""

from typed_mapper.sql.command import Statement, StatementBuilder, select
from typed_mapper.sql.parameters import Parameter, ValueKind, infer_kind

__all__ = [
    "Parameter",
    "Statement",
    "StatementBuilder",
    "ValueKind",
    "infer_kind",
    "select",
]
