from __future__ import annotations

from dataclasses import dataclass

from wiregen.reporter import DiagnosticKind, Reporter
from wiregen.symbols import MemberKind, MemberSymbol, SymbolTable, TypeRef, TypeSymbol


@dataclass(frozen=True, slots=True)
class InjectionTarget:
    """Classification of a type's injectable members for one round.

    Rebuilt from the symbol table every round, never patched in place.
    ``constructor`` is either the marked constructor or the accessible
    no-argument fallback; ``has_errors`` is true when classification reported
    structural diagnostics.
    """

    type: TypeSymbol
    fields: tuple[MemberSymbol, ...]
    static_fields: tuple[MemberSymbol, ...]
    constructor: MemberSymbol | None
    supertype: TypeRef | None
    has_errors: bool = False

    @property
    def qualified_name(self) -> str:
        return self.type.qualified_name

    @property
    def is_abstract(self) -> bool:
        return self.type.is_abstract

    @property
    def singleton(self) -> bool:
        return self.type.singleton

    def referenced_types(self) -> tuple[TypeRef, ...]:
        """Return every type that must be resolved before the target can be emitted."""
        references: list[TypeRef] = [
            member.type for member in self.fields if member.type is not None
        ]
        if self.constructor is not None:
            references.extend(parameter.type for parameter in self.constructor.parameters)
        references.extend(member.type for member in self.static_fields if member.type is not None)
        return tuple(references)


def classify_target(
    *,
    type_symbol: TypeSymbol,
    symbols: SymbolTable,
    reporter: Reporter,
) -> InjectionTarget:
    """Split the marked members of a type into fields, static fields and a constructor.

    Problems are reported and classification goes on, so every problem of the
    type is surfaced in one pass.

    Args:
        type_symbol: Type freshly fetched from the symbol table.
        symbols: Symbol table of the current round.
        reporter: Receives structural diagnostics.

    """
    type_name = type_symbol.qualified_name
    fields: list[MemberSymbol] = []
    static_fields: list[MemberSymbol] = []
    constructor: MemberSymbol | None = None
    has_errors = False

    for member in type_symbol.marked_members():
        member_symbol = f"{type_name}.{member}"
        if member.kind is MemberKind.FIELD:
            if member.is_static:
                static_fields.append(member)
            else:
                fields.append(member)
            continue

        if member.kind is MemberKind.CONSTRUCTOR:
            if constructor is not None:
                reporter.error(
                    f"Too many injectable constructors on {type_name}",
                    kind=DiagnosticKind.DUPLICATE_CONSTRUCTOR,
                    symbol=member_symbol,
                )
                has_errors = True
            elif type_symbol.is_abstract:
                reporter.error(
                    f"Abstract class {type_name} must not have an injectable constructor.",
                    kind=DiagnosticKind.ABSTRACT_CONSTRUCTOR,
                    symbol=member_symbol,
                )
                has_errors = True
            constructor = member
            continue

        reporter.error(
            f"Cannot inject {member}",
            kind=DiagnosticKind.UNSUPPORTED_MEMBER,
            symbol=member_symbol,
        )
        has_errors = True

    if constructor is None and not type_symbol.is_abstract:
        constructor = find_no_args_constructor(type_symbol)

    return InjectionTarget(
        type=type_symbol,
        fields=tuple(fields),
        static_fields=tuple(static_fields),
        constructor=constructor,
        supertype=symbols.supertype_of(type_symbol),
        has_errors=has_errors,
    )


def find_no_args_constructor(type_symbol: TypeSymbol) -> MemberSymbol | None:
    """Return the accessible no-argument constructor of a type, if any.

    A private no-argument constructor yields ``None``: the type is then only
    members-injectable, which is not an error.

    Args:
        type_symbol: Type whose declared constructors are searched.

    """
    for constructor in type_symbol.constructors():
        if not constructor.parameters:
            return None if constructor.is_private else constructor
    return None
