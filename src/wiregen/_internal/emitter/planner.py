from __future__ import annotations

import keyword
from dataclasses import dataclass
from enum import Enum

from wiregen import keys
from wiregen._internal.targets import InjectionTarget
from wiregen.config import ProcessorConfig
from wiregen.exceptions import WiregenEmissionError
from wiregen.symbols import MemberSymbol

# Attributes owned by the runtime base classes; slots must not shadow them.
_RESERVED_ATTRIBUTES = frozenset(
    {
        "_state",
        "_mark_attached",
        "_mark_used",
        "required_by",
        "provide_key",
        "members_key",
        "singleton",
    },
)
# Names bound at module level by generated code; an imported target must not shadow them.
_GENERATED_MODULE_NAMES = frozenset(
    {"annotations", "Any", "Binding", "Linker", "StaticInjection"},
)


class AdapterKind(str, Enum):
    INJECT_ADAPTER = "inject_adapter"
    STATIC_INJECTION = "static_injection"


@dataclass(frozen=True, slots=True)
class SlotPlan:
    """Binding slot holding the linker handle of one dependency."""

    attribute: str
    member_name: str
    key: str
    mandatory: bool = True


@dataclass(frozen=True, slots=True)
class InjectAdapterPlan:
    """Deterministic description of an inject adapter, consumed by the renderer."""

    target_name: str
    module: str
    import_clause: str
    type_expression: str
    class_name: str
    provide_key: str | None
    members_key: str
    singleton: bool
    is_abstract: bool
    has_constructor: bool
    parameter_slots: tuple[SlotPlan, ...]
    field_slots: tuple[SlotPlan, ...]
    supertype_slot: SlotPlan | None

    kind = AdapterKind.INJECT_ADAPTER

    @property
    def artifact_name(self) -> str:
        return f"{self.module}.{self.class_name}"

    @property
    def injects_members(self) -> bool:
        return bool(self.field_slots) or self.supertype_slot is not None

    @property
    def is_dependent(self) -> bool:
        return self.injects_members or bool(self.parameter_slots)

    @property
    def construction_keys(self) -> tuple[str, ...]:
        return tuple(slot.key for slot in self.parameter_slots)

    @property
    def members_keys(self) -> tuple[str, ...]:
        field_keys = tuple(slot.key for slot in self.field_slots)
        if self.supertype_slot is None:
            return field_keys
        return (*field_keys, self.supertype_slot.key)

    @property
    def supertype_key(self) -> str | None:
        return None if self.supertype_slot is None else self.supertype_slot.key


@dataclass(frozen=True, slots=True)
class StaticInjectionPlan:
    """Deterministic description of a static injection, consumed by the renderer."""

    target_name: str
    module: str
    import_clause: str
    type_expression: str
    class_name: str
    field_slots: tuple[SlotPlan, ...]

    kind = AdapterKind.STATIC_INJECTION

    @property
    def artifact_name(self) -> str:
        return f"{self.module}.{self.class_name}"

    @property
    def members_keys(self) -> tuple[str, ...]:
        return tuple(slot.key for slot in self.field_slots)


AdapterPlan = InjectAdapterPlan | StaticInjectionPlan


class AdapterPlanner:
    """Decide which adapters a ready target needs and lay out their binding slots.

    An inject adapter is planned when the target has a constructor or instance
    fields; a static injection when it has static fields. Both, one or none
    may be planned for a single target.
    """

    def __init__(self, *, config: ProcessorConfig) -> None:
        self._config = config

    def plan(self, target: InjectionTarget) -> tuple[AdapterPlan, ...]:
        """Build the adapter plans of a ready target.

        Args:
            target: Classified target whose referenced types are all resolved.

        """
        self._validate_class_path(target)
        plans: list[AdapterPlan] = []
        if target.constructor is not None or target.fields:
            plans.append(self._plan_inject_adapter(target))
        if target.static_fields:
            plans.append(self._plan_static_injection(target))
        return tuple(plans)

    def _plan_inject_adapter(self, target: InjectionTarget) -> InjectAdapterPlan:
        constructor = target.constructor
        parameters = () if constructor is None else constructor.parameters
        # Parameter and field slots get separate namespaces only when both exist.
        disambiguate = bool(target.fields) and bool(parameters)
        used_attributes: set[str] = set(_RESERVED_ATTRIBUTES)

        parameter_slots: list[SlotPlan] = []
        for parameter in parameters:
            self._validate_identifier(target=target, name=parameter.name, what="parameter")
            prefix = "_parameter_" if disambiguate else "_"
            parameter_slots.append(
                SlotPlan(
                    attribute=_unique_attribute(f"{prefix}{parameter.name}", used_attributes),
                    member_name=parameter.name,
                    key=keys.for_parameter(parameter),
                ),
            )

        field_slots: list[SlotPlan] = []
        for field in target.fields:
            self._validate_attribute_name(target=target, name=field.name, what="field")
            prefix = "_field_" if disambiguate else "_"
            field_slots.append(
                SlotPlan(
                    attribute=_unique_attribute(f"{prefix}{field.name}", used_attributes),
                    member_name=field.name,
                    key=self._field_key(target=target, field=field),
                ),
            )

        supertype_slot: SlotPlan | None = None
        supertype = target.supertype
        if supertype is not None and not self._config.is_platform_type(supertype.name):
            supertype_slot = SlotPlan(
                attribute=_unique_attribute("_supertype", used_attributes),
                member_name=supertype.name,
                key=keys.raw_members_key(supertype),
                mandatory=False,
            )

        type_symbol = target.type
        import_clause, type_expression = _target_reference(type_symbol.class_path)
        return InjectAdapterPlan(
            target_name=target.qualified_name,
            module=type_symbol.module,
            import_clause=import_clause,
            type_expression=type_expression,
            class_name=self._adapter_class_name(target, self._config.inject_adapter_suffix),
            provide_key=None if constructor is None else keys.provide_key(type_symbol),
            members_key=keys.members_key(type_symbol),
            singleton=target.singleton,
            is_abstract=target.is_abstract,
            has_constructor=constructor is not None,
            parameter_slots=tuple(parameter_slots),
            field_slots=tuple(field_slots),
            supertype_slot=supertype_slot,
        )

    def _plan_static_injection(self, target: InjectionTarget) -> StaticInjectionPlan:
        used_attributes: set[str] = set(_RESERVED_ATTRIBUTES)
        field_slots: list[SlotPlan] = []
        for field in target.static_fields:
            self._validate_attribute_name(target=target, name=field.name, what="static field")
            field_slots.append(
                SlotPlan(
                    attribute=_unique_attribute(f"_{field.name}", used_attributes),
                    member_name=field.name,
                    key=self._field_key(target=target, field=field),
                ),
            )
        type_symbol = target.type
        import_clause, type_expression = _target_reference(type_symbol.class_path)
        return StaticInjectionPlan(
            target_name=target.qualified_name,
            module=type_symbol.module,
            import_clause=import_clause,
            type_expression=type_expression,
            class_name=self._adapter_class_name(target, self._config.static_injection_suffix),
            field_slots=tuple(field_slots),
        )

    def _adapter_class_name(self, target: InjectionTarget, suffix: str) -> str:
        return f"{target.type.class_path.replace('.', '_')}{suffix}"

    def _validate_class_path(self, target: InjectionTarget) -> None:
        type_symbol = target.type
        for part in type_symbol.module.split("."):
            self._validate_identifier(target=target, name=part, what="name segment")
        for part in type_symbol.class_path.split("."):
            self._validate_attribute_name(target=target, name=part, what="name segment")

    def _validate_identifier(self, *, target: InjectionTarget, name: str, what: str) -> None:
        if not name.isidentifier():
            msg = f"{what} '{name}' of {target.qualified_name} is not a valid identifier."
            raise WiregenEmissionError(msg)
        if keyword.iskeyword(name):
            msg = f"{what} '{name}' of {target.qualified_name} is a Python keyword."
            raise WiregenEmissionError(msg)

    def _validate_attribute_name(self, *, target: InjectionTarget, name: str, what: str) -> None:
        self._validate_identifier(target=target, name=name, what=what)
        # Written inside the adapter class body, where `__name` would be mangled.
        if name.startswith("__") and not name.endswith("__"):
            msg = f"{what} '{name}' of {target.qualified_name} is a private name."
            raise WiregenEmissionError(msg)

    def _field_key(self, *, target: InjectionTarget, field: MemberSymbol) -> str:
        if field.type is None:
            msg = f"field '{field.name}' of {target.qualified_name} has no declared type."
            raise WiregenEmissionError(msg)
        return keys.for_field(field)


def _unique_attribute(candidate: str, used: set[str]) -> str:
    attribute = candidate
    while attribute in used:
        attribute = f"{attribute}_"
    used.add(attribute)
    return attribute


def _target_reference(class_path: str) -> tuple[str, str]:
    """Return the import clause and the expression naming the target in generated code."""
    top_level, _, nested_path = class_path.partition(".")
    local_name = top_level
    if top_level in _GENERATED_MODULE_NAMES:
        local_name = f"{top_level}_"
        import_clause = f"{top_level} as {local_name}"
    else:
        import_clause = top_level
    type_expression = f"{local_name}.{nested_path}" if nested_path else local_name
    return import_clause, type_expression
