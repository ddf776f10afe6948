"""Attribute declaration and per-class type checking for entities."""

from __future__ import annotations

import copy
import inspect
import typing
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, get_origin

from pydantic import ConfigDict, PydanticUserError, TypeAdapter

from .config import EntitySettings
from .exceptions import EntityDefinitionError, ImmutableEntityError

IMMUTABLE_ENTITY_MESSAGE = (
    "This entity is immutable, please use 'instance = Type.create(configure)' "
    "or 'instance = instance.update(configure)' with a configure callback that "
    "sets 'builder.attribute = value'."
)

RESERVED_NAMES = frozenset({"create", "update", "validate", "declared_attributes"})

_ARBITRARY_TYPES = ConfigDict(arbitrary_types_allowed=True)


class Attribute:
    """Data descriptor exposing one declared attribute of an entity class.

    Reading goes to the instance's value mapping. Writing through the
    descriptor always fails; values are assigned by the entity itself while
    ``create``/``update`` is building it.
    """

    __slots__ = ("annotated", "default", "name")

    def __init__(self, name: str, *, default: Any = None, annotated: bool = False) -> None:
        self.name = name
        self.default = default
        self.annotated = annotated

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        return instance._values[self.name]

    def __set__(self, instance: Any, value: Any) -> None:
        raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)

    def __delete__(self, instance: Any) -> None:
        raise ImmutableEntityError(IMMUTABLE_ENTITY_MESSAGE)

    def make_default(self) -> Any:
        """Return a fresh copy of the default so instances never share it."""

        return copy.deepcopy(self.default)

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}, default={self.default!r})"


@dataclass(frozen=True, slots=True)
class TypeChecks:
    """Resolved pydantic adapters for the annotated attributes of one class."""

    adapters: Mapping[str, TypeAdapter[Any]] = field(default_factory=dict)
    strict: bool = False

    def coerce(self, name: str, value: Any) -> Any:
        adapter = self.adapters.get(name)
        if adapter is None:
            return value
        return adapter.validate_python(value, strict=self.strict)


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", maxsplit=1)[0].strip()
        return head in {"ClassVar", "typing.ClassVar"}
    return annotation is ClassVar or get_origin(annotation) is ClassVar


def _check_name(owner: type, name: Any) -> None:
    if not isinstance(name, str) or not name.isidentifier():
        msg = f"{owner.__name__} declares invalid attribute name {name!r}"
        raise EntityDefinitionError(msg)
    if name.startswith("_"):
        msg = f"{owner.__name__} attribute {name!r} must not start with an underscore"
        raise EntityDefinitionError(msg)
    if name in RESERVED_NAMES:
        msg = f"{owner.__name__} attribute {name!r} shadows the entity method of the same name"
        raise EntityDefinitionError(msg)


def collect_attributes(
    owner: type,
    inherited: Mapping[str, Attribute],
    names: Iterable[str],
) -> dict[str, Attribute]:
    """Merge inherited, keyword-declared and annotated attributes of ``owner``.

    Order is inherited names first, then the ``attributes=`` keyword, then the
    class-body annotations. A name declared more than once is kept once; an
    annotation upgrades a keyword declaration with its default and type.
    """

    if isinstance(names, str):
        names = (names,)
    declared = dict(inherited)
    namespace = owner.__dict__
    annotations = inspect.get_annotations(owner)

    for name in names:
        _check_name(owner, name)
        if name in declared:
            continue
        existing = namespace.get(name)
        if name in annotations and not _is_class_var(annotations[name]):
            # the annotation below takes the name over, along with its default
            existing = None
        if existing is not None and not isinstance(existing, Attribute):
            msg = f"{owner.__name__} attribute {name!r} clashes with a member of the same name"
            raise EntityDefinitionError(msg)
        declared[name] = Attribute(name)

    for name, annotation in annotations.items():
        if _is_class_var(annotation) or name.startswith("_"):
            continue
        _check_name(owner, name)
        default = namespace.get(name)
        if isinstance(default, Attribute):
            default = default.default
        declared[name] = Attribute(name, default=default, annotated=True)

    return declared


def _adapter_for(hint: Any) -> TypeAdapter[Any]:
    try:
        return TypeAdapter(hint, config=_ARBITRARY_TYPES)
    except PydanticUserError:
        # models, dataclasses and TypedDicts carry their own config
        return TypeAdapter(hint)


def build_type_checks(
    owner: type,
    declared: Mapping[str, Attribute],
    settings: EntitySettings,
) -> TypeChecks:
    """Resolve annotations of ``owner`` into pydantic adapters."""

    if not settings.validate_types or not any(attr.annotated for attr in declared.values()):
        return TypeChecks(strict=settings.strict_types)
    try:
        hints = typing.get_type_hints(owner, include_extras=True)
    except NameError as exc:
        msg = f"Cannot resolve attribute annotations of {owner.__name__}: {exc}"
        raise EntityDefinitionError(msg) from exc

    adapters: dict[str, TypeAdapter[Any]] = {}
    for name, attribute in declared.items():
        hint = hints.get(name, Any)
        if not attribute.annotated or hint is Any:
            continue
        adapters[name] = _adapter_for(hint)
    return TypeChecks(adapters=adapters, strict=settings.strict_types)


__all__ = [
    "IMMUTABLE_ENTITY_MESSAGE",
    "RESERVED_NAMES",
    "Attribute",
    "TypeChecks",
    "build_type_checks",
    "collect_attributes",
]
