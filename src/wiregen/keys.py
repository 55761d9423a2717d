"""Canonical binding keys shared by the processor and the runtime linker.

The linker matches bindings purely by key equality, so every function here is
deterministic and depends only on the structure of its arguments.
"""

from __future__ import annotations

from wiregen.symbols import MemberSymbol, ParameterSymbol, Qualifier, TypeRef, TypeSymbol

MEMBERS_KEY_PREFIX = "members/"


def get(type_ref: TypeRef, qualifier: Qualifier | None = None) -> str:
    """Return the value key of a type, with its full generic shape.

    Args:
        type_ref: Type of the provided value.
        qualifier: Optional qualifier distinguishing bindings of the same type.

    Examples:
        >>> get(TypeRef.parse("dict[str, app.Gear]"))
        'dict[str, app.Gear]'
        >>> get(TypeRef.parse("app.Gear"), Qualifier("app.Named", (("value", "blue"),)))
        '@app.Named(value=blue)/app.Gear'

    """
    rendered_type = _render_type(type_ref)
    if qualifier is None:
        return rendered_type
    return f"{_render_qualifier(qualifier)}/{rendered_type}"


def raw_members_key(type_ref: TypeRef) -> str:
    """Return the members key of a type; qualifiers and type arguments are dropped.

    Args:
        type_ref: Type whose members-injection binding is identified.

    """
    return f"{MEMBERS_KEY_PREFIX}{type_ref.name}"


def for_field(member: MemberSymbol) -> str:
    if member.type is None:
        msg = f"Field {member.name!r} has no declared type."
        raise ValueError(msg)
    return get(member.type, member.qualifier)


def for_parameter(parameter: ParameterSymbol) -> str:
    return get(parameter.type, parameter.qualifier)


def provide_key(type_symbol: TypeSymbol) -> str:
    """Return the value key under which a target's constructor binding is provided."""
    return get(type_symbol.as_type_ref())


def members_key(type_symbol: TypeSymbol) -> str:
    return raw_members_key(type_symbol.as_type_ref())


def _render_type(type_ref: TypeRef) -> str:
    if not type_ref.arguments:
        return type_ref.name
    arguments = ", ".join(_render_type(argument) for argument in type_ref.arguments)
    return f"{type_ref.name}[{arguments}]"


def _render_qualifier(qualifier: Qualifier) -> str:
    if not qualifier.attributes:
        return f"@{qualifier.name}"
    # Attribute order in the source must not change the key.
    attributes = ", ".join(f"{name}={value}" for name, value in sorted(qualifier.attributes))
    return f"@{qualifier.name}({attributes})"


__all__ = [
    "MEMBERS_KEY_PREFIX",
    "for_field",
    "for_parameter",
    "get",
    "members_key",
    "provide_key",
    "raw_members_key",
]
