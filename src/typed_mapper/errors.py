"""Exception types raised by typed_mapper."""


class MapperError(Exception):
    """Base class for typed_mapper errors."""


class InvalidInputError(MapperError, ValueError):
    """Raised when a mapping manager is constructed without a mapping source."""


class FrozenGraphError(MapperError, RuntimeError):
    """Raised when a graph is modified after it has been frozen."""


class BuilderMisuseError(MapperError, RuntimeError):
    """Raised when a statement builder is used after it has been built."""
