"""Mutation context handed to ``create``/``update`` configuration callbacks."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .attributes import IMMUTABLE_ENTITY_MESSAGE
from .exceptions import ImmutableEntityError, InaccessibleMethodError

if TYPE_CHECKING:
    from .entity import Entity

E = TypeVar("E", bound="Entity")


def _target(builder: EntityBuilder[Any]) -> Entity:
    return object.__getattribute__(builder, "_entity")


class EntityBuilder(Generic[E]):
    """Writable view over an entity that is still being built.

    ``builder.name = value`` assigns a declared attribute and ``builder.name``
    reads its in-progress value. Public members of the entity class are
    reachable and bound to the entity under construction; members whose name
    starts with an underscore are not. Once the owning ``create``/``update``
    returns, the builder is closed and rejects further writes.
    """

    __slots__ = ("_entity", "_open")

    def __init__(self, entity: E) -> None:
        object.__setattr__(self, "_entity", entity)
        object.__setattr__(self, "_open", True)

    def __getattribute__(self, name: str) -> Any:
        if name.startswith("__") and name.endswith("__"):
            return object.__getattribute__(self, name)
        entity = _target(self)
        if name in entity.declared_attributes():
            return entity._values[name]
        if name.startswith("_"):
            msg = (
                f"{type(entity).__name__}.{name} is not public and cannot be reached "
                "from a configure callback"
            )
            raise InaccessibleMethodError(msg)
        return getattr(entity, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if not object.__getattribute__(self, "_open"):
            raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)
        _target(self)._assign(name, value)

    def __delattr__(self, name: str) -> None:
        raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)

    def __dir__(self) -> list[str]:
        entity = _target(self)
        public = {name for name in dir(type(entity)) if not name.startswith("_")}
        return sorted(public | set(entity.declared_attributes()))

    def __repr__(self) -> str:
        entity = _target(self)
        state = "open" if object.__getattribute__(self, "_open") else "closed"
        return f"<EntityBuilder {type(entity).__name__} ({state})>"


def close_builder(builder: EntityBuilder[Any]) -> None:
    """End the mutation context of ``builder``."""

    object.__setattr__(builder, "_open", False)


__all__ = ["EntityBuilder", "close_builder"]
