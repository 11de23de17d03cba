"""Mapping manager: lookup indexes and per-configuration hierarchy graphs."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Hashable, Iterable, Iterator

from typed_mapper.errors import InvalidInputError
from typed_mapper.graph import Graph, Vertex
from typed_mapper.mapping import Mapping, SourceInfo, config_name
from typed_mapper.types import TypeDescriptor

logger = logging.getLogger(__name__)


def _type_key(object_type: TypeDescriptor | str) -> str:
    if isinstance(object_type, TypeDescriptor):
        return object_type.name
    return object_type


class MappingManager:
    """Holds every mapping record and the hierarchy graph of each configuration.

    The manager is built once from the full set of mappings and is read-only
    afterwards. Lookups for unmapped types or unknown configurations return
    empty results instead of raising.
    """

    def __init__(self, mappings: Iterable[Mapping] | None) -> None:
        """Build the indexes and graphs.

        Args:
            mappings: Every mapping record known to the process.

        Raises:
            InvalidInputError: If mappings is None.
        """
        if mappings is None:
            raise InvalidInputError("Mappings are required")
        records = list(mappings)

        by_type: dict[str, list[Mapping]] = {}
        for record in records:
            by_type.setdefault(record.object_type.name, []).append(record)

        partitions: dict[Hashable, list[Mapping]] = {}
        for record in records:
            partitions.setdefault(record.database_config, []).append(record)

        structures: dict[Hashable, Graph[Mapping]] = {}
        for database_config, partition in partitions.items():
            structures[database_config] = self._build_graph(partition)
            logger.debug(
                "Built mapping graph for %s: %d vertices, %d edges",
                config_name(database_config),
                len(structures[database_config]),
                len(structures[database_config].edges),
            )

        self._mappings = MappingProxyType({k: tuple(v) for k, v in by_type.items()})
        self._structures = MappingProxyType(structures)

    @staticmethod
    def _build_graph(partition: list[Mapping]) -> Graph[Mapping]:
        """Build the hierarchy graph for the mappings of one configuration."""
        graph: Graph[Mapping] = Graph()
        vertices = [graph.add_vertex(record) for record in partition]

        # First record for a type wins when a type is mapped more than once.
        by_name: dict[str, Vertex[Mapping]] = {}
        for record, vertex in zip(partition, vertices):
            by_name.setdefault(record.object_type.name, vertex)

        for record, vertex in zip(partition, vertices):
            object_type = record.object_type
            for ancestor in object_type.ancestors():
                sink = by_name.get(ancestor.name)
                if sink is not None:
                    vertex.add_outgoing_edge(sink)
            for interface in object_type.interfaces:
                sink = by_name.get(interface.name)
                if sink is not None:
                    vertex.add_outgoing_edge(sink)
        return graph.freeze()

    def structure(self, database_config: Hashable) -> Graph[Mapping]:
        """Return the hierarchy graph of a configuration, or an empty graph."""
        graph = self._structures.get(database_config)
        if graph is None:
            return Graph().freeze()
        return graph

    def mappings(self, object_type: TypeDescriptor | str) -> tuple[Mapping, ...]:
        """Return the mappings of a type across all configurations."""
        return self._mappings.get(_type_key(object_type), ())

    def mapping(
        self, object_type: TypeDescriptor | str, source: SourceInfo
    ) -> Mapping | None:
        """Return the mapping of a type for the configuration of source."""
        for record in self.mappings(object_type):
            if record.database_config == source.database_config:
                return record
        return None

    @property
    def configurations(self) -> tuple[Hashable, ...]:
        """Configuration keys that have at least one mapping."""
        return tuple(self._structures.keys())

    def enumerate(self) -> list[Mapping]:
        """Return every mapping, grouped by type in first-seen order."""
        return list(self)

    def __iter__(self) -> Iterator[Mapping]:
        for records in self._mappings.values():
            yield from records

    def __len__(self) -> int:
        return sum(len(records) for records in self._mappings.values())

    def __contains__(self, object_type: object) -> bool:
        if not isinstance(object_type, (TypeDescriptor, str)):
            return False
        return _type_key(object_type) in self._mappings

    def __str__(self) -> str:
        groups = [
            ", ".join(sorted(str(record) for record in records))
            for records in self._mappings.values()
        ]
        return "Mappers: " + "; ".join(groups)
