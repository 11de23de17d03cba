"""Fluent builder for parameterized SELECT statements."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from typed_mapper.config import BuilderConfig
from typed_mapper.errors import BuilderMisuseError
from typed_mapper.sql.parameters import Parameter


@dataclass(frozen=True)
class Statement:
    """Final statement text and its parameters in placeholder order."""

    text: str
    parameters: tuple[Parameter, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        return self.text


class StatementBuilder:
    """Accumulates clauses and parameters for one SELECT statement.

    Every mutator returns the builder so calls can be chained. A builder is
    single use: once build() has been called, any further call raises
    BuilderMisuseError. Builders are not safe to share between threads.

    Relation names, column names and predicate text are emitted as given;
    only values passed to where() become parameters.
    """

    def __init__(self, config: BuilderConfig | None = None) -> None:
        self.config = config or BuilderConfig()
        self._relation: str | None = None
        self._columns: list[str] = []
        self._distinct = False
        self._predicates: list[str] = []
        self._order_by: list[str] = []
        self._parameters: list[Parameter] = []
        self._built = False

    def _check_open(self) -> None:
        if self._built:
            raise BuilderMisuseError("Statement has already been built")

    def select(self, relation: str) -> StatementBuilder:
        """Select all columns from relation."""
        self._check_open()
        if not relation:
            raise ValueError("Relation name must not be empty")
        self._relation = relation
        self._columns = []
        return self

    def columns(self, *names: str) -> StatementBuilder:
        """Project the given columns instead of *."""
        self._check_open()
        self._columns = list(names)
        return self

    def distinct(self) -> StatementBuilder:
        self._check_open()
        self._distinct = True
        return self

    def where(self, predicate: str, prefix: str | None = None, *values: Any) -> StatementBuilder:
        """Add a filter predicate and its values.

        Placeholders in predicate are numbered from 0 within this call
        (e.g. "Value1=@0 AND Value2=@1") and are renumbered to their
        position among all parameters of the statement.

        Args:
            predicate: Predicate text containing placeholder tokens.
            prefix: Placeholder prefix; defaults to the configured prefix.
            values: One value per placeholder, in placeholder order.

        Raises:
            ValueError: If predicate refers to a placeholder with no value.
        """
        self._check_open()
        prefix = prefix or self.config.parameter_prefix
        offset = len(self._parameters)
        parameters = [
            Parameter.for_value(
                value, f"{prefix}{offset + i}", self.config.default_string_length
            )
            for i, value in enumerate(values)
        ]

        pattern = re.compile(re.escape(prefix) + r"(\d+)")
        for match in pattern.finditer(predicate):
            if int(match.group(1)) >= len(values):
                raise ValueError(
                    f"Placeholder '{match.group(0)}' has no value "
                    f"({len(values)} given)"
                )

        if offset:
            predicate = pattern.sub(
                lambda m: f"{prefix}{int(m.group(1)) + offset}", predicate
            )
        self._predicates.append(predicate)
        self._parameters.extend(parameters)
        return self

    def order_by(self, *terms: str) -> StatementBuilder:
        """Append ordering terms, e.g. "Name" or "Created DESC"."""
        self._check_open()
        self._order_by.extend(terms)
        return self

    def build(self) -> Statement:
        """Assemble the statement. The builder cannot be used afterwards."""
        self._check_open()
        if self._relation is None:
            raise BuilderMisuseError("select() must be called before build()")
        self._built = True

        parts = ["SELECT"]
        if self._distinct:
            parts.append("DISTINCT")
        parts.append(", ".join(self._columns) if self._columns else "*")
        parts.append(f"FROM {self._relation}")
        if len(self._predicates) == 1:
            parts.append(f"WHERE {self._predicates[0]}")
        elif self._predicates:
            parts.append("WHERE " + " AND ".join(f"({p})" for p in self._predicates))
        if self._order_by:
            parts.append("ORDER BY " + ", ".join(self._order_by))

        return Statement(text=" ".join(parts), parameters=tuple(self._parameters))


def select(relation: str, config: BuilderConfig | None = None) -> StatementBuilder:
    """Start a new SELECT statement against relation."""
    return StatementBuilder(config).select(relation)
