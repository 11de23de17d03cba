"""Parser for the mapping definition DSL.

Example::

    interface Named
    interface Audited : Named
    type Person : Named
    type Employee extends Person : Audited
    map Person in Primary
    map Employee in Primary as "Employees"
    map Person in Reporting prefix "rpt_" order 20
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import ply.yacc as yacc

from typed_mapper.manager import MappingManager
from typed_mapper.mapping import DEFAULT_ORDER, Mapping
from typed_mapper.parsing.mapping_lexer import MappingLexer
from typed_mapper.types import TypeDescriptor, TypeRegistry


@dataclass
class TypeSpec:
    """Specification for a type or interface before resolution."""

    name: str
    is_interface: bool
    parent: str | None = None
    interfaces: list[str] = field(default_factory=list)
    lineno: int = 0


@dataclass
class MapSpec:
    """Specification for a mapping before resolution."""

    type_name: str
    database_config: str
    options: dict[str, Any] = field(default_factory=dict)
    lineno: int = 0


@dataclass
class MappingDefinitions:
    """Result of parsing: the described types and the mappings over them."""

    registry: TypeRegistry
    mappings: list[Mapping] = field(default_factory=list)

    def manager(self) -> MappingManager:
        """Build a mapping manager from the parsed mappings."""
        return MappingManager(self.mappings)


class MappingParser:
    """Parser for the mapping definition DSL."""

    tokens = MappingLexer.tokens

    def __init__(self) -> None:
        self.lexer = MappingLexer()
        self.lexer.build()
        self.parser: yacc.LRParser = None  # type: ignore
        self.registry: TypeRegistry = TypeRegistry()

    def p_definitions_empty(self, p: yacc.YaccProduction) -> None:
        """definitions : """
        p[0] = []

    def p_definitions_statement(self, p: yacc.YaccProduction) -> None:
        """definitions : definitions statement"""
        p[0] = p[1]
        p[0].append(p[2])

    def p_statement(self, p: yacc.YaccProduction) -> None:
        """statement : interface_def
                     | type_def
                     | map_def"""
        p[0] = p[1]

    def p_interface_def(self, p: yacc.YaccProduction) -> None:
        """interface_def : INTERFACE IDENTIFIER implements_clause"""
        p[0] = TypeSpec(
            name=p[2], is_interface=True, interfaces=p[3], lineno=p.lineno(1)
        )

    def p_type_def(self, p: yacc.YaccProduction) -> None:
        """type_def : TYPE IDENTIFIER extends_clause implements_clause"""
        p[0] = TypeSpec(
            name=p[2], is_interface=False, parent=p[3], interfaces=p[4], lineno=p.lineno(1)
        )

    def p_extends_clause_empty(self, p: yacc.YaccProduction) -> None:
        """extends_clause : """
        p[0] = None

    def p_extends_clause(self, p: yacc.YaccProduction) -> None:
        """extends_clause : EXTENDS IDENTIFIER"""
        p[0] = p[2]

    def p_implements_clause_empty(self, p: yacc.YaccProduction) -> None:
        """implements_clause : """
        p[0] = []

    def p_implements_clause(self, p: yacc.YaccProduction) -> None:
        """implements_clause : COLON identifier_list"""
        p[0] = p[2]

    def p_identifier_list_single(self, p: yacc.YaccProduction) -> None:
        """identifier_list : IDENTIFIER"""
        p[0] = [p[1]]

    def p_identifier_list_multiple(self, p: yacc.YaccProduction) -> None:
        """identifier_list : identifier_list COMMA IDENTIFIER"""
        p[0] = p[1] + [p[3]]

    def p_map_def(self, p: yacc.YaccProduction) -> None:
        """map_def : MAP IDENTIFIER IN IDENTIFIER map_options"""
        p[0] = MapSpec(
            type_name=p[2], database_config=p[4], options=p[5], lineno=p.lineno(1)
        )

    def p_map_options_empty(self, p: yacc.YaccProduction) -> None:
        """map_options : """
        p[0] = {}

    def p_map_options(self, p: yacc.YaccProduction) -> None:
        """map_options : map_options map_option"""
        p[0] = p[1]
        key, value = p[2]
        p[0][key] = value

    def p_map_option_table(self, p: yacc.YaccProduction) -> None:
        """map_option : AS STRING"""
        p[0] = ("table_name", p[2])

    def p_map_option_affix(self, p: yacc.YaccProduction) -> None:
        """map_option : PREFIX STRING
                      | SUFFIX STRING"""
        p[0] = (p[1], p[2])

    def p_map_option_order(self, p: yacc.YaccProduction) -> None:
        """map_option : ORDER INTEGER"""
        p[0] = ("order", p[2])

    def p_error(self, p: yacc.YaccProduction) -> None:
        if p:
            raise SyntaxError(f"Syntax error at '{p.value}' (line {p.lineno})")
        else:
            raise SyntaxError("Syntax error at end of input")

    def build(self, **kwargs: Any) -> None:
        """Build the parser."""
        self.parser = yacc.yacc(module=self, start="definitions", **kwargs)

    def parse(self, data: str) -> MappingDefinitions:
        """Parse mapping definitions into types and mapping records."""
        if self.parser is None:
            self.build(debug=False, write_tables=False)

        self.registry = TypeRegistry()
        self.lexer.lexer.lineno = 1
        specs = self.parser.parse(data, lexer=self.lexer.lexer) or []

        type_specs = [s for s in specs if isinstance(s, TypeSpec)]
        map_specs = [s for s in specs if isinstance(s, MapSpec)]
        self._resolve_types(type_specs)
        mappings = [self._resolve_mapping(spec) for spec in map_specs]
        return MappingDefinitions(registry=self.registry, mappings=mappings)

    def _lookup(self, name: str, lineno: int) -> TypeDescriptor:
        try:
            return self.registry.get_or_raise(name)
        except KeyError:
            raise ValueError(f"Unknown type '{name}' (line {lineno})") from None

    def _resolve_types(self, specs: list[TypeSpec]) -> None:
        """Resolve type specs in two phases.

        Phase 1 registers a stub for every declared name so that types may
        refer to types declared later. Phase 2 links supertypes and interfaces.
        """
        # Phase 1: stubs
        for spec in specs:
            if spec.name in self.registry:
                raise ValueError(f"Type '{spec.name}' is already defined (line {spec.lineno})")
            self.registry.register_stub(spec.name, is_interface=spec.is_interface)

        # Phase 2: link
        for spec in specs:
            descriptor = self.registry.get_or_raise(spec.name)
            if spec.parent is not None:
                parent = self._lookup(spec.parent, spec.lineno)
                if parent.is_interface:
                    raise ValueError(
                        f"Type '{spec.name}' cannot extend interface '{parent.name}' "
                        f"(line {spec.lineno})"
                    )
                descriptor.supertype = parent
            for iface_name in spec.interfaces:
                iface = self._lookup(iface_name, spec.lineno)
                if not iface.is_interface:
                    raise ValueError(
                        f"'{iface_name}' is not an interface (line {spec.lineno})"
                    )
                if iface not in descriptor.declared_interfaces:
                    descriptor.declared_interfaces.append(iface)

        for spec in specs:
            self._check_acyclic(self.registry.get_or_raise(spec.name))

    def _check_acyclic(self, descriptor: TypeDescriptor) -> None:
        seen = {descriptor.name}
        current = descriptor.supertype
        while current is not None:
            if current.name in seen:
                raise ValueError(f"Inheritance cycle involving '{descriptor.name}'")
            seen.add(current.name)
            current = current.supertype

        stack = list(descriptor.declared_interfaces)
        visited: set[str] = set()
        while stack:
            iface = stack.pop()
            if iface.name == descriptor.name:
                raise ValueError(f"Interface cycle involving '{descriptor.name}'")
            if iface.name in visited:
                continue
            visited.add(iface.name)
            stack.extend(iface.declared_interfaces)

    def _resolve_mapping(self, spec: MapSpec) -> Mapping:
        return Mapping(
            object_type=self._lookup(spec.type_name, spec.lineno),
            database_config=spec.database_config,
            table_name=spec.options.get("table_name"),
            prefix=spec.options.get("prefix", ""),
            suffix=spec.options.get("suffix", ""),
            order=spec.options.get("order", DEFAULT_ORDER),
        )


def load_manager(data: str) -> MappingManager:
    """Parse mapping definitions and build a manager from them."""
    return MappingParser().parse(data).manager()
