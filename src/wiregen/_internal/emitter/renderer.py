from __future__ import annotations

import json
from dataclasses import dataclass

from wiregen._internal.emitter.fragments import (
    INJECT_ADAPTER_CLASS_ASSEMBLY_FRAGMENT,
    MODULE_ASSEMBLY_FRAGMENT,
    STATIC_INJECTION_CLASS_ASSEMBLY_FRAGMENT,
)
from wiregen._internal.emitter.mini_assembly import AssemblySnippet, Environment
from wiregen._internal.emitter.planner import (
    AdapterPlan,
    InjectAdapterPlan,
    SlotPlan,
    StaticInjectionPlan,
)
from wiregen.config import ProcessorConfig


@dataclass(frozen=True, slots=True)
class _BindingRequest:
    attribute: str
    expression: str


class AdapterRenderer:
    """Render adapter plans into Python module source text.

    Output depends only on the plan and the configuration, so rendering the
    same plan twice yields byte-identical modules.
    """

    def __init__(self, *, config: ProcessorConfig) -> None:
        self._config = config
        self._env = Environment()
        self._module_snippet = self._snippet(MODULE_ASSEMBLY_FRAGMENT)
        self._inject_adapter_snippet = self._snippet(INJECT_ADAPTER_CLASS_ASSEMBLY_FRAGMENT)
        self._static_injection_snippet = self._snippet(STATIC_INJECTION_CLASS_ASSEMBLY_FRAGMENT)

    def render(self, plan: AdapterPlan) -> str:
        """Return the source of the module defining the planned adapter.

        Args:
            plan: Inject adapter or static injection plan.

        """
        if isinstance(plan, InjectAdapterPlan):
            class_block = self._render_inject_adapter(plan)
            runtime_imports = "Binding, Linker" if plan.is_dependent else "Binding"
            uses_any = plan.is_dependent
            docstring = self._inject_adapter_docstring(plan)
        else:
            class_block = self._render_static_injection(plan)
            runtime_imports = "Linker, StaticInjection"
            uses_any = True
            docstring = f"Static injection of ``{plan.target_name}``."

        module = self._module_snippet.render(
            header=self._config.generated_header,
            module_docstring=docstring,
            uses_any=uses_any,
            runtime_module=self._config.runtime_module,
            runtime_imports=runtime_imports,
            target_module=plan.module,
            target_import=plan.import_clause,
            class_block=class_block.rstrip(),
        )
        return f"{module.rstrip()}\n"

    def _render_inject_adapter(self, plan: InjectAdapterPlan) -> str:
        members_slots = list(plan.field_slots)
        if plan.supertype_slot is not None:
            members_slots.append(plan.supertype_slot)
        slots = [*plan.parameter_slots, *members_slots]
        return self._inject_adapter_snippet.render(
            class_name=plan.class_name,
            class_docstring=self._inject_adapter_class_docstring(plan),
            construction_keys=_tuple_literal(plan.construction_keys),
            members_keys=_tuple_literal(plan.members_keys),
            provide_key=_optional_literal(plan.provide_key),
            members_key=_string_literal(plan.members_key),
            singleton=plan.singleton,
            required_by=_string_literal(plan.target_name),
            slots=slots,
            is_dependent=plan.is_dependent,
            requests=[self._binding_request(slot, plan.target_name) for slot in slots],
            parameter_slots=plan.parameter_slots,
            members_slots=members_slots,
            field_slots=plan.field_slots,
            supertype_slot=plan.supertype_slot,
            has_constructor=plan.has_constructor,
            injects_members=plan.injects_members,
            type_expression=plan.type_expression,
        )

    def _render_static_injection(self, plan: StaticInjectionPlan) -> str:
        return self._static_injection_snippet.render(
            class_name=plan.class_name,
            class_docstring=f"Inject the static fields of ``{plan.type_expression}``.",
            members_keys=_tuple_literal(plan.members_keys),
            required_by=_string_literal(plan.target_name),
            field_slots=plan.field_slots,
            requests=[self._binding_request(slot, plan.target_name) for slot in plan.field_slots],
            type_expression=plan.type_expression,
        )

    def _binding_request(self, slot: SlotPlan, required_by: str) -> _BindingRequest:
        arguments = [_string_literal(slot.key), _string_literal(required_by)]
        if not slot.mandatory:
            arguments.append("mandatory=False")
        return _BindingRequest(
            attribute=slot.attribute,
            expression=f"linker.request_binding({', '.join(arguments)})",
        )

    def _inject_adapter_docstring(self, plan: InjectAdapterPlan) -> str:
        lines = [
            f"Binding of ``{plan.target_name}`` generated for the runtime linker.",
            "",
            "The adapter is responsible for:",
        ]
        if plan.is_dependent:
            lines.append("- owning the dependency links between the type and its dependencies,")
        if not plan.is_abstract and plan.has_constructor:
            lines.append("- creating new instances through the injectable constructor,")
        if plan.injects_members:
            lines.append("- injecting the annotated fields of existing instances,")
        if plan.singleton:
            lines.append("- declaring the binding as a singleton to the lifecycle manager,")
        lines[-1] = f"{lines[-1].rstrip(',')}."
        return "\n".join(lines) + "\n"

    def _inject_adapter_class_docstring(self, plan: InjectAdapterPlan) -> str:
        if plan.has_constructor and plan.injects_members:
            return f"Construct ``{plan.type_expression}`` and inject its members."
        if plan.has_constructor:
            return f"Construct ``{plan.type_expression}``."
        return f"Inject the members of ``{plan.type_expression}``."

    def _snippet(self, text: str) -> AssemblySnippet:
        return self._env.from_string(text)


def _string_literal(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _optional_literal(value: str | None) -> str:
    return "None" if value is None else _string_literal(value)


def _tuple_literal(values: tuple[str, ...]) -> str:
    literals = [_string_literal(value) for value in values]
    if len(literals) == 1:
        return f"({literals[0]},)"
    return f"({', '.join(literals)})"
