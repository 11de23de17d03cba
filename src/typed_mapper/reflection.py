"""Type descriptors for ordinary Python classes.

A class counts as an interface when it lists ``abc.ABC`` among its direct
bases or is a ``typing.Protocol``. Every other base except ``object`` is a
supertype; the first one found is used.
"""

from __future__ import annotations

import abc
import weakref
from typing import Any

from typed_mapper.types import TypeDescriptor

_cache: weakref.WeakKeyDictionary[type, TypeDescriptor] = weakref.WeakKeyDictionary()


def is_interface(cls: type) -> bool:
    """Check whether a class acts as an interface."""
    if abc.ABC in cls.__bases__:
        return True
    return bool(cls.__dict__.get("_is_protocol", False))


def type_name(cls: type) -> str:
    """Qualified name used as the descriptor identity."""
    return f"{cls.__module__}.{cls.__qualname__}"


def describe_class(cls: Any) -> TypeDescriptor:
    """Return the descriptor of a class, building it on first use."""
    if not isinstance(cls, type):
        raise TypeError(f"Expected a class, got {type(cls).__name__}")
    descriptor = _cache.get(cls)
    if descriptor is not None:
        return descriptor

    descriptor = TypeDescriptor(name=type_name(cls), is_interface=is_interface(cls))
    _cache[cls] = descriptor

    for base in cls.__bases__:
        if base is object or base is abc.ABC or base.__module__ == "typing":
            continue
        if is_interface(base):
            descriptor.declared_interfaces.append(describe_class(base))
        elif descriptor.supertype is None and not descriptor.is_interface:
            descriptor.supertype = describe_class(base)
    return descriptor


def clear_cache() -> None:
    """Forget every cached descriptor."""
    _cache.clear()
