"""Immutable entity base class."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Any, ClassVar, Self

from .attributes import (
    IMMUTABLE_ENTITY_MESSAGE,
    Attribute,
    TypeChecks,
    build_type_checks,
    collect_attributes,
)
from .builder import EntityBuilder, close_builder
from .config import get_settings
from .exceptions import (
    DirectConstructionError,
    EntityDefinitionError,
    ImmutableEntityError,
    UnknownAttributeError,
)

Configure = Callable[[EntityBuilder[Any]], object]
Values = Mapping[str, Any]

logger = logging.getLogger(__name__)


def _split_arguments(
    values: Values | Configure | None,
    configure: Configure | None,
) -> tuple[Values | None, Configure | None]:
    if callable(values) and not isinstance(values, Mapping):
        if configure is not None:
            msg = "Pass at most one configure callback"
            raise TypeError(msg)
        return None, values
    return values, configure


class Entity:
    """Base class for immutable domain entities.

    Subclasses declare attributes with class-body annotations and/or the
    ``attributes`` class keyword::

        class Person(Entity, attributes=("nickname",)):
            name: str
            age: int = 0

            def validate(self) -> None:
                if self.age < 0:
                    raise ValueError("age must be positive")

    Instances only come from :meth:`create` and :meth:`update`; both hand an
    :class:`EntityBuilder` to an optional configure callback, freeze the
    result and run :meth:`validate` before returning it.
    """

    __slots__ = ("_frozen", "_values")

    _declarations: ClassVar[Mapping[str, Attribute]] = MappingProxyType({})
    _type_checks: ClassVar[TypeChecks | None] = None

    def __init_subclass__(cls, *, attributes: Iterable[str] = (), **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "__init__" in cls.__dict__:
            msg = f"{cls.__name__} must not define __init__, entities are built by create()"
            raise EntityDefinitionError(msg)
        declared = collect_attributes(cls, cls._declarations, attributes)
        for name, attribute in declared.items():
            if getattr(cls, name, None) is not attribute:
                setattr(cls, name, attribute)
        cls._declarations = MappingProxyType(declared)
        cls._type_checks = None

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        name = type(self).__name__
        msg = f"{name} cannot be instantiated directly, use {name}.create(...) or instance.update(...)"
        raise DirectConstructionError(msg)

    @classmethod
    def declared_attributes(cls) -> tuple[str, ...]:
        """Return the attribute names of this class in declaration order."""

        return tuple(cls._declarations)

    @classmethod
    def _checks(cls) -> TypeChecks:
        checks = cls.__dict__.get("_type_checks")
        if checks is None:
            checks = build_type_checks(cls, cls._declarations, get_settings())
            cls._type_checks = checks
        return checks

    @classmethod
    def _allocate(cls, values: dict[str, Any]) -> Self:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_values", values)
        object.__setattr__(instance, "_frozen", False)
        return instance

    @classmethod
    def create(
        cls,
        values: Values | Configure | None = None,
        configure: Configure | None = None,
    ) -> Self:
        """Build a new frozen instance.

        Args:
            values: Initial attribute values, applied first. A callable passed
                here is treated as ``configure``.
            configure: Callback receiving the :class:`EntityBuilder`; its
                writes override ``values``.

        Raises:
            UnknownAttributeError: A write targets an undeclared name.
            Exception: Whatever :meth:`validate` raises, unchanged.
        """

        if cls is Entity:
            msg = "Entity is abstract, subclass it and declare attributes"
            raise EntityDefinitionError(msg)
        values, configure = _split_arguments(values, configure)
        defaults = {name: attr.make_default() for name, attr in cls._declarations.items()}
        entity = cls._allocate(defaults)._finish(values, configure)
        logger.debug("Created %s", cls.__name__)
        return entity

    def update(
        self,
        values: Values | Configure | None = None,
        configure: Configure | None = None,
    ) -> Self:
        """Return a new frozen instance derived from this one.

        Attributes not written by ``values`` or ``configure`` keep their
        current value. ``self`` is never modified, even when validation fails.
        """

        cls = type(self)
        values, configure = _split_arguments(values, configure)
        entity = cls._allocate(dict(self._values))._finish(values, configure)
        logger.debug("Updated %s", cls.__name__)
        return entity

    def validate(self) -> None:
        """Check invariants of a freshly built instance.

        Called once after every ``create``/``update`` with the instance
        already frozen. Raise anything to reject the instance.
        """

        return None

    def _finish(self, values: Values | None, configure: Configure | None) -> Self:
        builder: EntityBuilder[Self] = EntityBuilder(self)
        try:
            if values is not None:
                for name, value in values.items():
                    self._assign(name, value)
            if configure is not None:
                configure(builder)
        finally:
            close_builder(builder)

        object.__setattr__(self, "_frozen", True)
        try:
            self.validate()
        except Exception as exc:
            logger.debug("Validation rejected %s: %r", type(self).__name__, exc)
            raise
        return self

    def _assign(self, name: Any, value: Any) -> None:
        if self._frozen:
            raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)
        cls = type(self)
        if not isinstance(name, str) or name not in cls._declarations:
            msg = f"{cls.__name__} has no declared attribute {name!r}"
            raise UnknownAttributeError(msg)
        self._values[name] = cls._checks().coerce(name, value)

    def __setattr__(self, name: str, value: Any) -> None:
        cls = type(self)
        if name in cls._declarations:
            # writable only while create/update is still building this instance
            self._assign(name, value)
            return
        msg = f"{cls.__name__} has no declared attribute {name!r}"
        raise UnknownAttributeError(msg)

    def __delattr__(self, name: str) -> None:
        raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        return hash((type(self), tuple(sorted(self._values.items()))))

    def __repr__(self) -> str:
        attrs = ", ".join(f"{name}={value!r}" for name, value in self._values.items())
        return f"{type(self).__name__}({attrs})"

    def __copy__(self) -> Self:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        clone = type(self)._allocate(copy.deepcopy(self._values, memo))
        object.__setattr__(clone, "_frozen", True)
        return clone


__all__ = ["Configure", "Entity", "Values"]
