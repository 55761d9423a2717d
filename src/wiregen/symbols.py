"""Host symbol model consumed by the processor.

The processor never inspects source code itself. A host (a build tool, an
import hook, a test) describes the declared types of the current compilation
round with these records and answers resolution questions through the
``SymbolTable`` protocol.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from wiregen.config import DEFAULT_PLATFORM_TYPE_NAMES

if TYPE_CHECKING:
    from typing_extensions import Self

_TYPE_TOKEN_PATTERN = re.compile(r"\s*([^\[\],\s]+|\[|\]|,)")


class MemberKind(str, Enum):
    """Kind of a member declared directly on a type."""

    FIELD = "field"
    CONSTRUCTOR = "constructor"
    METHOD = "method"
    NESTED_TYPE = "nested_type"


class Modifier(str, Enum):
    """Declaration modifiers relevant to injection."""

    STATIC = "static"
    PRIVATE = "private"
    ABSTRACT = "abstract"


@dataclass(frozen=True, slots=True)
class TypeRef:
    """Reference to a type as seen by the host, with its type arguments.

    ``is_error`` marks a placeholder the host produced for a type it could not
    resolve yet.
    """

    name: str
    arguments: tuple[TypeRef, ...] = ()
    is_error: bool = False

    @classmethod
    def parse(cls, text: str) -> TypeRef:
        """Parse ``name[arg, ...]`` notation into a type reference.

        Args:
            text: Type text such as ``"dict[str, app.parts.Gear]"``.

        """
        tokens = [match.group(1) for match in _TYPE_TOKEN_PATTERN.finditer(text)]
        if "".join(tokens) != re.sub(r"\s+", "", text):
            msg = f"Invalid type reference {text!r}."
            raise ValueError(msg)
        type_ref, position = _parse_type_tokens(tokens=tokens, position=0, text=text)
        if position != len(tokens):
            msg = f"Invalid type reference {text!r}: unexpected trailing tokens."
            raise ValueError(msg)
        return type_ref

    def raw(self) -> TypeRef:
        """Return the reference without type arguments."""
        return TypeRef(name=self.name, is_error=self.is_error)

    def walk(self) -> Iterator[TypeRef]:
        """Yield this reference followed by every nested type argument, depth first."""
        yield self
        for argument in self.arguments:
            yield from argument.walk()

    def __str__(self) -> str:
        if not self.arguments:
            return self.name
        return f"{self.name}[{', '.join(str(argument) for argument in self.arguments)}]"


def _parse_type_tokens(*, tokens: list[str], position: int, text: str) -> tuple[TypeRef, int]:
    if position >= len(tokens) or tokens[position] in {"[", "]", ","}:
        msg = f"Invalid type reference {text!r}: expected a type name."
        raise ValueError(msg)
    name = tokens[position]
    position += 1
    if position >= len(tokens) or tokens[position] != "[":
        return TypeRef(name=name), position

    arguments: list[TypeRef] = []
    position += 1
    while True:
        argument, position = _parse_type_tokens(tokens=tokens, position=position, text=text)
        arguments.append(argument)
        if position >= len(tokens):
            msg = f"Invalid type reference {text!r}: missing ']'."
            raise ValueError(msg)
        if tokens[position] == "]":
            return TypeRef(name=name, arguments=tuple(arguments)), position + 1
        if tokens[position] != ",":
            msg = f"Invalid type reference {text!r}: expected ',' or ']'."
            raise ValueError(msg)
        position += 1


def _as_type_ref(value: TypeRef | str) -> TypeRef:
    if isinstance(value, TypeRef):
        return value
    return TypeRef.parse(value)


@dataclass(frozen=True, slots=True)
class Qualifier:
    """Qualifier marker distinguishing two bindings of the same type."""

    name: str
    attributes: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True, slots=True)
class ParameterSymbol:
    """Constructor parameter."""

    name: str
    type: TypeRef
    qualifier: Qualifier | None = None

    @classmethod
    def of(
        cls,
        name: str,
        type_ref: TypeRef | str,
        *,
        qualifier: Qualifier | None = None,
    ) -> Self:
        return cls(name=name, type=_as_type_ref(type_ref), qualifier=qualifier)


@dataclass(frozen=True, slots=True)
class MemberSymbol:
    """Member declared directly on a type.

    ``marked`` is true when the member carries the injectable marker.
    """

    name: str
    kind: MemberKind
    type: TypeRef | None = None
    parameters: tuple[ParameterSymbol, ...] = ()
    modifiers: frozenset[Modifier] = frozenset()
    qualifier: Qualifier | None = None
    marked: bool = False

    @classmethod
    def field(
        cls,
        name: str,
        type_ref: TypeRef | str,
        *,
        static: bool = False,
        qualifier: Qualifier | None = None,
        marked: bool = True,
    ) -> Self:
        modifiers = frozenset({Modifier.STATIC}) if static else frozenset()
        return cls(
            name=name,
            kind=MemberKind.FIELD,
            type=_as_type_ref(type_ref),
            modifiers=modifiers,
            qualifier=qualifier,
            marked=marked,
        )

    @classmethod
    def constructor(
        cls,
        *parameters: ParameterSymbol,
        private: bool = False,
        marked: bool = True,
    ) -> Self:
        modifiers = frozenset({Modifier.PRIVATE}) if private else frozenset()
        return cls(
            name="__init__",
            kind=MemberKind.CONSTRUCTOR,
            parameters=parameters,
            modifiers=modifiers,
            marked=marked,
        )

    @classmethod
    def method(
        cls,
        name: str,
        *parameters: ParameterSymbol,
        marked: bool = True,
    ) -> Self:
        return cls(name=name, kind=MemberKind.METHOD, parameters=parameters, marked=marked)

    @property
    def is_static(self) -> bool:
        return Modifier.STATIC in self.modifiers

    @property
    def is_private(self) -> bool:
        return Modifier.PRIVATE in self.modifiers

    def __str__(self) -> str:
        if self.kind in {MemberKind.CONSTRUCTOR, MemberKind.METHOD}:
            parameters = ", ".join(str(parameter.type) for parameter in self.parameters)
            return f"{self.name}({parameters})"
        return self.name


@dataclass(frozen=True, slots=True)
class TypeSymbol:
    """Declared type with its directly declared members.

    ``qualified_name`` is ``<module>.<class path>``; nested classes use a dotted
    class path such as ``app.widgets.Outer.Inner``.
    """

    qualified_name: str
    module: str
    members: tuple[MemberSymbol, ...] = ()
    modifiers: frozenset[Modifier] = frozenset()
    supertype: TypeRef | None = None
    type_parameters: tuple[str, ...] = ()
    singleton: bool = False

    def __post_init__(self) -> None:
        if not self.module or not self.qualified_name.startswith(f"{self.module}."):
            msg = (
                f"Invalid type symbol {self.qualified_name!r}: qualified name must start "
                f"with its module {self.module!r}."
            )
            raise ValueError(msg)

    @property
    def class_path(self) -> str:
        """Return the qualified name with the module prefix stripped."""
        return self.qualified_name[len(self.module) + 1 :]

    @property
    def simple_name(self) -> str:
        return self.class_path.rsplit(".", 1)[-1]

    @property
    def is_abstract(self) -> bool:
        return Modifier.ABSTRACT in self.modifiers

    def as_type_ref(self) -> TypeRef:
        """Return the reference naming this type with its own type parameters."""
        return TypeRef(
            name=self.qualified_name,
            arguments=tuple(TypeRef(name=parameter) for parameter in self.type_parameters),
        )

    def marked_members(self) -> tuple[MemberSymbol, ...]:
        return tuple(member for member in self.members if member.marked)

    def constructors(self) -> tuple[MemberSymbol, ...]:
        return tuple(member for member in self.members if member.kind is MemberKind.CONSTRUCTOR)


class SymbolTable(Protocol):
    """Read-only view of the host's symbol table for the current round."""

    def get_type(self, qualified_name: str) -> TypeSymbol | None:
        """Return the type declared under ``qualified_name`` or ``None``.

        Args:
            qualified_name: Fully-qualified name of the type.

        """

    def is_resolved(self, type_ref: TypeRef) -> bool:
        """Return true when the type and all of its type arguments are fully resolved.

        Args:
            type_ref: Type reference taken from a field or a constructor parameter.

        """

    def supertype_of(self, type_symbol: TypeSymbol) -> TypeRef | None:
        """Return the immediate supertype of a type, if it declares one.

        Args:
            type_symbol: Type whose supertype is requested.

        """


class InMemorySymbolTable:
    """Symbol table backed by a dictionary of type symbols.

    Names in ``external_names`` (and the bare builtin names) resolve without a
    type symbol, which models types compiled outside the current run.
    """

    def __init__(
        self,
        types: Iterable[TypeSymbol] = (),
        *,
        external_names: Iterable[str] = (),
    ) -> None:
        self._types: dict[str, TypeSymbol] = {}
        self._external_names = frozenset(external_names) | DEFAULT_PLATFORM_TYPE_NAMES
        self.define(*types)

    def define(self, *types: TypeSymbol) -> None:
        """Add types to the table, replacing earlier symbols with the same name.

        Args:
            types: Type symbols declared by the host.

        """
        for type_symbol in types:
            self._types[type_symbol.qualified_name] = type_symbol

    def types(self) -> tuple[TypeSymbol, ...]:
        return tuple(self._types.values())

    def get_type(self, qualified_name: str) -> TypeSymbol | None:
        return self._types.get(qualified_name)

    def is_resolved(self, type_ref: TypeRef) -> bool:
        return all(
            not reference.is_error
            and (reference.name in self._types or reference.name in self._external_names)
            for reference in type_ref.walk()
        )

    def supertype_of(self, type_symbol: TypeSymbol) -> TypeRef | None:
        return type_symbol.supertype

    def round(
        self,
        *,
        root_types: Iterable[TypeSymbol] | None = None,
        processing_over: bool = False,
    ) -> RoundEnvironment:
        """Build a round environment over this table.

        Args:
            root_types: Types compiled in the round; defaults to every known type.
            processing_over: Whether the host will issue no further rounds.

        """
        roots = self.types() if root_types is None else tuple(root_types)
        return RoundEnvironment(symbols=self, root_types=roots, processing_over=processing_over)


@dataclass(frozen=True, slots=True)
class RoundEnvironment:
    """State the host hands to the processor for a single round."""

    symbols: SymbolTable
    root_types: tuple[TypeSymbol, ...] = field(default=())
    processing_over: bool = False


__all__ = [
    "InMemorySymbolTable",
    "MemberKind",
    "MemberSymbol",
    "Modifier",
    "ParameterSymbol",
    "Qualifier",
    "RoundEnvironment",
    "SymbolTable",
    "TypeRef",
    "TypeSymbol",
]
