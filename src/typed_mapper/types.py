"""Type descriptors and the registry that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator


@dataclass(eq=False)
class TypeDescriptor:
    """Describes a mappable domain type.

    A descriptor knows its direct supertype and the interfaces it declares.
    Descriptors compare and hash by name, so two descriptors with the same
    name stand for the same type.
    """

    name: str
    supertype: TypeDescriptor | None = None
    declared_interfaces: list[TypeDescriptor] = field(default_factory=list)
    is_interface: bool = False

    def ancestors(self) -> list[TypeDescriptor]:
        """Return the supertype chain, nearest first.

        The universal root is never part of the chain.
        """
        chain: list[TypeDescriptor] = []
        current = self.supertype
        while current is not None:
            chain.append(current)
            current = current.supertype
        return chain

    @property
    def interfaces(self) -> list[TypeDescriptor]:
        """Return every interface this type implements.

        Includes the interfaces extended by declared interfaces and those
        inherited from the supertype chain. Declared order first, no duplicates.
        """
        result: list[TypeDescriptor] = []
        seen: set[str] = set()

        def visit(iface: TypeDescriptor) -> None:
            if iface.name in seen:
                return
            seen.add(iface.name)
            result.append(iface)
            for parent in iface.declared_interfaces:
                visit(parent)

        owner: TypeDescriptor | None = self
        while owner is not None:
            for iface in owner.declared_interfaces:
                visit(iface)
            owner = owner.supertype
        return result

    def is_subtype_of(self, other: TypeDescriptor) -> bool:
        """Check whether this type derives from or implements other."""
        if self == other:
            return True
        return other in self.ancestors() or other in self.interfaces

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeDescriptor):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        kind = "interface" if self.is_interface else "type"
        return f"TypeDescriptor({kind} {self.name})"

    def __str__(self) -> str:
        return self.name


class TypeRegistry:
    """Registry of all described types."""

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}

    def register(self, descriptor: TypeDescriptor) -> TypeDescriptor:
        """Register a type descriptor."""
        if descriptor.name in self._types:
            raise ValueError(f"Type '{descriptor.name}' is already defined")
        self._types[descriptor.name] = descriptor
        return descriptor

    def register_stub(self, name: str, is_interface: bool = False) -> TypeDescriptor:
        """Pre-register an empty descriptor for forward references.

        Idempotent for stubs of the same kind. Raises ValueError if the name
        is already registered as the other kind.
        """
        existing = self._types.get(name)
        if existing is not None:
            if existing.is_interface == is_interface:
                return existing
            raise ValueError(f"Type '{name}' is already defined")
        stub = TypeDescriptor(name=name, is_interface=is_interface)
        self._types[name] = stub
        return stub

    def get(self, name: str) -> TypeDescriptor | None:
        """Get a type by name."""
        return self._types.get(name)

    def get_or_raise(self, name: str) -> TypeDescriptor:
        """Get a type by name, raising if not found."""
        descriptor = self._types.get(name)
        if descriptor is None:
            raise KeyError(f"Type '{name}' not found")
        return descriptor

    def list_types(self) -> list[str]:
        """List all registered type names."""
        return list(self._types.keys())

    def find_implementing_types(self, interface_name: str) -> list[TypeDescriptor]:
        """Find all concrete types that implement the given interface."""
        return [
            td
            for td in self._types.values()
            if not td.is_interface
            and any(i.name == interface_name for i in td.interfaces)
        ]

    def find_subtypes(self, type_name: str) -> list[TypeDescriptor]:
        """Find all types whose supertype chain contains type_name."""
        return [
            td
            for td in self._types.values()
            if any(a.name == type_name for a in td.ancestors())
        ]

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)
