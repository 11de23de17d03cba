"""Tests for the mapping manager."""

import logging

import pytest

from typed_mapper.errors import FrozenGraphError, InvalidInputError
from typed_mapper.graph import Graph
from typed_mapper.manager import MappingManager
from typed_mapper.mapping import Mapping, SourceInfo
from typed_mapper.types import TypeDescriptor


class PrimaryDatabase:
    pass


class ReportingDatabase:
    pass


@pytest.fixture
def types():
    named = TypeDescriptor(name="Named", is_interface=True)
    root = TypeDescriptor(name="Root")
    middle = TypeDescriptor(name="Middle", supertype=root)
    leaf = TypeDescriptor(name="Leaf", supertype=middle, declared_interfaces=[named])
    return {"Named": named, "Root": root, "Middle": middle, "Leaf": leaf}


def edges_of(graph):
    return {(e.source.data.object_type.name, e.sink.data.object_type.name) for e in graph.edges}


class TestConstruction:
    """Tests for building a MappingManager."""

    def test_none_input(self):
        """Test that a missing mapping source is rejected."""
        with pytest.raises(InvalidInputError):
            MappingManager(None)

    def test_invalid_input_is_value_error(self):
        """Test that InvalidInputError can be caught as ValueError."""
        with pytest.raises(ValueError):
            MappingManager(None)

    def test_empty_input(self):
        """Test that an empty mapping source gives an empty manager."""
        manager = MappingManager([])
        assert list(manager) == []
        assert manager.configurations == ()
        assert len(manager) == 0

    def test_accepts_generator(self, types):
        """Test that any iterable is consumed once."""
        records = (Mapping(t, PrimaryDatabase) for t in types.values())
        manager = MappingManager(records)

        assert len(manager) == 4
        assert len(manager.structure(PrimaryDatabase)) == 4

    def test_logs_graph_construction(self, types, caplog):
        """Test that each configuration graph is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="typed_mapper.manager"):
            MappingManager([Mapping(types["Root"], PrimaryDatabase)])

        assert "PrimaryDatabase: 1 vertices, 0 edges" in caplog.text


class TestEnumeration:
    """Tests for iterating over mappings."""

    def test_grouped_by_type(self, types):
        """Test that enumeration groups records by type, keeping order."""
        a1 = Mapping(types["Root"], PrimaryDatabase)
        b1 = Mapping(types["Middle"], PrimaryDatabase)
        a2 = Mapping(types["Root"], ReportingDatabase)
        b2 = Mapping(types["Middle"], ReportingDatabase)
        manager = MappingManager([a1, b1, a2, b2])

        assert list(manager) == [a1, a2, b1, b2]
        assert manager.enumerate() == [a1, a2, b1, b2]

    def test_restartable(self, types):
        """Test that enumeration can be repeated."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])
        assert list(manager) == list(manager)


class TestLookups:
    """Tests for mappings(), mapping() and structure()."""

    def test_mappings_by_type(self, types):
        """Test that every configuration's mapping of a type is returned."""
        primary = Mapping(types["Root"], PrimaryDatabase)
        reporting = Mapping(types["Root"], ReportingDatabase)
        manager = MappingManager([primary, reporting])

        assert manager.mappings(types["Root"]) == (primary, reporting)
        assert manager.mappings("Root") == (primary, reporting)
        assert types["Root"] in manager

    def test_mappings_unmapped(self, types):
        """Test that an unmapped type yields an empty result."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])

        assert manager.mappings(types["Leaf"]) == ()
        assert types["Leaf"] not in manager

    def test_mapping_by_source(self, types):
        """Test choosing a mapping by the configuration of a source."""
        primary = Mapping(types["Root"], PrimaryDatabase)
        reporting = Mapping(types["Root"], ReportingDatabase)
        manager = MappingManager([primary, reporting])

        source = SourceInfo(name="reports", database_config=ReportingDatabase)
        assert manager.mapping(types["Root"], source) is reporting

    def test_mapping_no_match(self, types):
        """Test that a missing configuration gives None."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])
        source = SourceInfo(name="reports", database_config=ReportingDatabase)

        assert manager.mapping(types["Root"], source) is None
        assert manager.mapping(types["Leaf"], source) is None

    def test_structure_unknown_config(self, types):
        """Test that an unknown configuration gives an empty graph."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])
        graph = manager.structure(ReportingDatabase)

        assert isinstance(graph, Graph)
        assert len(graph) == 0
        assert ReportingDatabase not in manager.configurations

    def test_indexes_are_read_only(self, types):
        """Test that the by-type index cannot be mutated from outside."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])

        with pytest.raises(TypeError):
            manager._mappings["Root"] = ()

    def test_structure_is_read_only(self, types):
        """Test that a returned graph cannot be changed by its readers."""
        manager = MappingManager([Mapping(types["Root"], PrimaryDatabase)])
        graph = manager.structure(PrimaryDatabase)
        vertex = graph.vertices[0]

        with pytest.raises(FrozenGraphError):
            graph.add_vertex("junk")
        with pytest.raises(FrozenGraphError):
            vertex.add_outgoing_edge(vertex)
        with pytest.raises(AttributeError):
            vertex.outgoing.append(None)

        again = manager.structure(PrimaryDatabase)
        assert len(again) == 1
        assert again.edges == ()

    def test_empty_structure_is_read_only(self, types):
        """Test that the empty graph for an unknown configuration is frozen too."""
        manager = MappingManager([])

        with pytest.raises(FrozenGraphError):
            manager.structure(PrimaryDatabase).add_vertex("junk")


class TestStructure:
    """Tests for the per-configuration hierarchy graphs."""

    def test_vertices_follow_partition_order(self, types):
        """Test one vertex per mapping of the configuration, in input order."""
        records = [
            Mapping(types["Leaf"], PrimaryDatabase),
            Mapping(types["Root"], ReportingDatabase),
            Mapping(types["Root"], PrimaryDatabase),
        ]
        manager = MappingManager(records)

        graph = manager.structure(PrimaryDatabase)
        assert [v.data for v in graph.vertices] == [records[0], records[2]]

    def test_edge_to_mapped_supertype(self, types):
        """Test an edge from a type to its mapped direct supertype."""
        manager = MappingManager([
            Mapping(types["Middle"], PrimaryDatabase),
            Mapping(types["Root"], PrimaryDatabase),
        ])

        assert edges_of(manager.structure(PrimaryDatabase)) == {("Middle", "Root")}

    def test_edges_at_every_mapped_level(self, types):
        """Test that every mapped ancestor gets an edge, not just the nearest."""
        manager = MappingManager([
            Mapping(types["Leaf"], PrimaryDatabase),
            Mapping(types["Middle"], PrimaryDatabase),
            Mapping(types["Root"], PrimaryDatabase),
        ])

        assert edges_of(manager.structure(PrimaryDatabase)) == {
            ("Leaf", "Middle"),
            ("Leaf", "Root"),
            ("Middle", "Root"),
        }

    def test_unmapped_supertype_has_no_edge(self, types):
        """Test that an unmapped supertype gets no vertex and no edge."""
        manager = MappingManager([Mapping(types["Middle"], PrimaryDatabase)])
        graph = manager.structure(PrimaryDatabase)

        assert len(graph) == 1
        assert graph.edges == ()

    def test_walk_continues_past_unmapped_level(self, types):
        """Test that a mapped grandparent is linked when the parent is unmapped."""
        manager = MappingManager([
            Mapping(types["Leaf"], PrimaryDatabase),
            Mapping(types["Root"], PrimaryDatabase),
        ])

        assert edges_of(manager.structure(PrimaryDatabase)) == {("Leaf", "Root")}

    def test_edge_to_mapped_interface(self, types):
        """Test an interface edge alongside inheritance edges."""
        manager = MappingManager([
            Mapping(types["Leaf"], PrimaryDatabase),
            Mapping(types["Middle"], PrimaryDatabase),
            Mapping(types["Named"], PrimaryDatabase),
        ])

        assert edges_of(manager.structure(PrimaryDatabase)) == {
            ("Leaf", "Middle"),
            ("Leaf", "Named"),
        }

    def test_no_edges_across_configurations(self, types):
        """Test that a supertype mapped elsewhere is not linked."""
        manager = MappingManager([
            Mapping(types["Middle"], PrimaryDatabase),
            Mapping(types["Root"], ReportingDatabase),
        ])

        assert manager.structure(PrimaryDatabase).edges == ()
        assert manager.structure(ReportingDatabase).edges == ()

    def test_first_duplicate_wins(self, types):
        """Test that the first mapping of a type in a configuration is the edge target."""
        first = Mapping(types["Root"], PrimaryDatabase, table_name="RootA")
        second = Mapping(types["Root"], PrimaryDatabase, table_name="RootB")
        child = Mapping(types["Middle"], PrimaryDatabase)
        manager = MappingManager([child, first, second])

        graph = manager.structure(PrimaryDatabase)
        assert len(graph) == 3
        (edge,) = graph.edges
        assert edge.source.data is child
        assert edge.sink.data is first

    def test_rebuild_is_equivalent(self, types):
        """Test that building twice from the same input gives the same structure."""
        records = [
            Mapping(types["Leaf"], PrimaryDatabase),
            Mapping(types["Middle"], PrimaryDatabase),
            Mapping(types["Named"], PrimaryDatabase),
            Mapping(types["Root"], ReportingDatabase),
        ]
        first = MappingManager(records)
        second = MappingManager(records)

        assert list(first) == list(second)
        for config in (PrimaryDatabase, ReportingDatabase):
            g1 = first.structure(config)
            g2 = second.structure(config)
            assert [v.data for v in g1.vertices] == [v.data for v in g2.vertices]
            assert edges_of(g1) == edges_of(g2)


class TestDisplay:
    """Tests for the string form of a manager."""

    def test_str(self, types):
        """Test that records are listed per type, sorted."""
        manager = MappingManager([
            Mapping(types["Root"], "Primary"),
            Mapping(types["Root"], "Archive", prefix="old_"),
            Mapping(types["Middle"], "Primary"),
        ])

        assert str(manager) == (
            "Mappers: Root -> Root (Primary), Root -> old_Root (Archive); "
            "Middle -> Middle (Primary)"
        )
