"""Immutable domain entities built only through ``create`` and ``update``."""

from .attributes import IMMUTABLE_ENTITY_MESSAGE, Attribute
from .builder import EntityBuilder
from .config import EntitySettings, get_settings, reset_settings
from .entity import Entity
from .exceptions import (
    DirectConstructionError,
    EntityDefinitionError,
    EntityError,
    ImmutableEntityError,
    InaccessibleMethodError,
    UnknownAttributeError,
)
from .logging import configure_logging

__all__ = [
    "IMMUTABLE_ENTITY_MESSAGE",
    "Attribute",
    "DirectConstructionError",
    "Entity",
    "EntityBuilder",
    "EntityDefinitionError",
    "EntityError",
    "EntitySettings",
    "ImmutableEntityError",
    "InaccessibleMethodError",
    "UnknownAttributeError",
    "configure_logging",
    "get_settings",
    "reset_settings",
]
