from __future__ import annotations

from typing import Any, ClassVar

import pytest
from pydantic import ValidationError

from pavlov import Attribute, Entity, EntityDefinitionError, ImmutableEntityError


class Person(Entity, attributes=("nickname",)):
    kind: ClassVar[str] = "person"

    name: str
    age: int = 0
    tags: list[str] = []
    extra: Any = None


def test_declared_attributes_keep_declaration_order() -> None:
    assert Person.declared_attributes() == ("nickname", "name", "age", "tags", "extra")


def test_class_vars_are_not_attributes() -> None:
    assert "kind" not in Person.declared_attributes()
    assert Person.kind == "person"


def test_class_exposes_attribute_descriptors() -> None:
    assert isinstance(Person.name, Attribute)
    assert Person.age.default == 0


def test_annotation_defaults_apply_on_create() -> None:
    person = Person.create()

    assert person.name is None
    assert person.age == 0
    assert person.tags == []
    assert person.nickname is None


def test_mutable_defaults_are_not_shared() -> None:
    first = Person.create()
    second = Person.create()

    assert first.tags is not second.tags


def test_annotated_attributes_are_coerced() -> None:
    person = Person.create({"name": "Ada", "age": "36", "tags": ("a", "b")})

    assert person.age == 36
    assert person.tags == ["a", "b"]


def test_invalid_typed_value_aborts_create() -> None:
    with pytest.raises(ValidationError):
        Person.create({"age": "not a number"})


def test_any_and_untyped_attributes_accept_anything() -> None:
    marker = object()

    person = Person.create({"nickname": 42, "extra": marker})

    assert person.nickname == 42
    assert person.extra is marker


def test_descriptor_rejects_class_level_write_through_instance() -> None:
    person = Person.create()

    with pytest.raises(ImmutableEntityError):
        Person.age.__set__(person, 3)


def test_declarations_accumulate() -> None:
    class Base(Entity, attributes=("a",)):
        b: int = 1

    class Child(Base, attributes=("a", "c")):
        d: str = "d"

    assert Child.declared_attributes() == ("a", "b", "c", "d")
    child = Child.create({"c": 3})
    assert (child.a, child.b, child.c, child.d) == (None, 1, 3, "d")
    assert Base.declared_attributes() == ("a", "b")


def test_single_string_keyword_declares_one_attribute() -> None:
    class Single(Entity, attributes="label"):
        pass

    assert Single.declared_attributes() == ("label",)


@pytest.mark.parametrize("name", ["_hidden", "not valid", "create", "update", "validate"])
def test_invalid_attribute_names_are_rejected(name: str) -> None:
    with pytest.raises(EntityDefinitionError):

        class Broken(Entity, attributes=(name,)):
            pass


def test_attribute_clashing_with_method_is_rejected() -> None:
    with pytest.raises(EntityDefinitionError, match="clashes"):

        class Broken(Entity, attributes=("describe",)):
            def describe(self) -> str:
                return "broken"


def test_custom_init_is_rejected() -> None:
    with pytest.raises(EntityDefinitionError, match="__init__"):

        class Broken(Entity):
            def __init__(self) -> None:
                pass


def test_public_method_sees_attribute_values() -> None:
    class Greeter(Entity):
        name: str = "world"

        def greeting(self) -> str:
            return f"hello {self.name}"

    assert Greeter.create().greeting() == "hello world"
    assert Greeter.create({"name": "ada"}).greeting() == "hello ada"


def test_keyword_and_annotation_declare_one_attribute() -> None:
    class Profile(Entity, attributes=("age", "label")):
        age: int = 0

    assert Profile.declared_attributes() == ("age", "label")
    assert Profile.create().age == 0
    assert Profile.create({"age": "7"}).age == 7


def test_keyword_name_clashing_with_class_var_is_rejected() -> None:
    with pytest.raises(EntityDefinitionError, match="clashes"):

        class Broken(Entity, attributes=("kind",)):
            kind: ClassVar[str] = "broken"
