"""Entity-specific exceptions."""

from __future__ import annotations


class EntityError(RuntimeError):
    """Base class for entity lifecycle failures."""


class EntityDefinitionError(EntityError, TypeError):
    """Raised when an entity class declares its attributes incorrectly."""


class UnknownAttributeError(EntityError, AttributeError):
    """Raised when a write targets a name that is not a declared attribute."""


class InaccessibleMethodError(EntityError, AttributeError):
    """Raised when a member is not reachable from the calling scope."""


class ImmutableEntityError(InaccessibleMethodError):
    """Raised when an entity is mutated outside of ``create``/``update``."""


class DirectConstructionError(InaccessibleMethodError, TypeError):
    """Raised when an entity class is instantiated without its factories."""


__all__ = [
    "DirectConstructionError",
    "EntityDefinitionError",
    "EntityError",
    "ImmutableEntityError",
    "InaccessibleMethodError",
    "UnknownAttributeError",
]
