from __future__ import annotations

import pytest

from wiregen.symbols import (
    InMemorySymbolTable,
    MemberKind,
    MemberSymbol,
    Modifier,
    ParameterSymbol,
    TypeRef,
    TypeSymbol,
)


def test_parse_reads_nested_type_arguments() -> None:
    type_ref = TypeRef.parse("dict[str, list[app.Gear]]")

    assert type_ref == TypeRef(
        "dict",
        (TypeRef("str"), TypeRef("list", (TypeRef("app.Gear"),))),
    )
    assert str(type_ref) == "dict[str, list[app.Gear]]"


@pytest.mark.parametrize(
    ("text", "match"),
    [
        ("", "expected a type name"),
        ("[app.Gear]", "expected a type name"),
        ("list[app.Gear", "missing ']'"),
        ("list[app.Gear]]", "unexpected trailing tokens"),
        ("list[]", "expected a type name"),
        ("dict[str app.Gear]", "expected ',' or ']'"),
    ],
)
def test_parse_rejects_malformed_text(text: str, match: str) -> None:
    with pytest.raises(ValueError, match=match):
        TypeRef.parse(text)


def test_walk_yields_every_nested_reference_depth_first() -> None:
    type_ref = TypeRef.parse("dict[str, list[app.Gear]]")

    assert [reference.name for reference in type_ref.walk()] == ["dict", "str", "list", "app.Gear"]


def test_raw_drops_type_arguments() -> None:
    assert TypeRef.parse("list[app.Gear]").raw() == TypeRef("list")


def test_member_factories_set_kind_and_modifiers() -> None:
    field = MemberSymbol.field("registry", "app.Registry", static=True)
    constructor = MemberSymbol.constructor(ParameterSymbol.of("gear", "app.Gear"), private=True)
    method = MemberSymbol.method("start", ParameterSymbol.of("speed", "int"))

    assert field.kind is MemberKind.FIELD
    assert field.is_static
    assert constructor.kind is MemberKind.CONSTRUCTOR
    assert constructor.is_private
    assert str(constructor) == "__init__(app.Gear)"
    assert str(method) == "start(int)"
    assert all(member.marked for member in (field, constructor, method))


def test_type_symbol_splits_module_and_class_path() -> None:
    inner = TypeSymbol(qualified_name="app.widgets.Outer.Inner", module="app.widgets")

    assert inner.class_path == "Outer.Inner"
    assert inner.simple_name == "Inner"


def test_type_symbol_rejects_name_outside_its_module() -> None:
    with pytest.raises(ValueError, match="must start with its module"):
        TypeSymbol(qualified_name="other.Widget", module="app.widgets")


def test_type_symbol_lists_marked_members_and_constructors() -> None:
    marked = MemberSymbol.field("gear", "app.Gear")
    constructor = MemberSymbol.constructor(marked=False)
    widget = TypeSymbol(
        qualified_name="app.Widget",
        module="app",
        members=(marked, constructor),
        modifiers=frozenset({Modifier.ABSTRACT}),
    )

    assert widget.marked_members() == (marked,)
    assert widget.constructors() == (constructor,)
    assert widget.is_abstract


def test_symbol_table_resolves_known_external_and_builtin_names() -> None:
    symbols = InMemorySymbolTable(
        [TypeSymbol(qualified_name="app.Gear", module="app")],
        external_names=["vendor.Clock"],
    )

    assert symbols.is_resolved(TypeRef.parse("app.Gear"))
    assert symbols.is_resolved(TypeRef.parse("vendor.Clock"))
    assert symbols.is_resolved(TypeRef.parse("dict[str, list[app.Gear]]"))


def test_symbol_table_rejects_unknown_names_and_error_placeholders() -> None:
    symbols = InMemorySymbolTable([TypeSymbol(qualified_name="app.Gear", module="app")])

    assert not symbols.is_resolved(TypeRef.parse("app.Legacy"))
    assert not symbols.is_resolved(TypeRef.parse("list[app.Legacy]"))
    assert not symbols.is_resolved(TypeRef("app.Gear", is_error=True))


def test_round_defaults_to_every_known_type() -> None:
    gear = TypeSymbol(qualified_name="app.Gear", module="app")
    knob = TypeSymbol(qualified_name="app.Knob", module="app")
    symbols = InMemorySymbolTable([gear, knob])

    environment = symbols.round()
    final = symbols.round(root_types=[knob], processing_over=True)

    assert environment.root_types == (gear, knob)
    assert not environment.processing_over
    assert final.root_types == (knob,)
    assert final.processing_over


def test_define_replaces_symbol_with_same_name() -> None:
    symbols = InMemorySymbolTable([TypeSymbol(qualified_name="app.Gear", module="app")])
    replacement = TypeSymbol(qualified_name="app.Gear", module="app", singleton=True)

    symbols.define(replacement)

    assert symbols.get_type("app.Gear") is replacement
    assert symbols.get_type("app.Missing") is None
