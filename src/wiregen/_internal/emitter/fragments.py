from textwrap import dedent

MODULE_ASSEMBLY_FRAGMENT = dedent(
    '''
    {{ header }}
    """{{ module_docstring }}"""

    from __future__ import annotations

    {% if uses_any %}
    from typing import Any

    {% endif %}
    from {{ runtime_module }} import {{ runtime_imports }}

    from {{ target_module }} import {{ target_import }}


    {{ class_block }}
    ''',
).lstrip()

INJECT_ADAPTER_CLASS_ASSEMBLY_FRAGMENT = dedent(
    '''
    class {{ class_name }}(Binding):
        """{{ class_docstring }}"""

        CONSTRUCTION_KEYS = {{ construction_keys }}
        MEMBERS_KEYS = {{ members_keys }}

        def __init__(self) -> None:
            super().__init__(
                provide_key={{ provide_key }},
                members_key={{ members_key }},
                singleton={{ singleton }},
                required_by={{ required_by }},
            )
    {% for slot in slots %}
            self.{{ slot.attribute }}: Any = None
    {% endfor %}
    {% if is_dependent %}

        def attach(self, linker: Linker) -> None:
            """Request the bindings of every dependency; safe to call repeatedly."""
    {% for request in requests %}
            self.{{ request.attribute }} = {{ request.expression }}
    {% endfor %}
            self._mark_attached()

        def get_dependencies(
            self,
            get_bindings: set[Any],
            inject_members_bindings: set[Any],
        ) -> None:
            """Add the attached dependency bindings to the given sets."""
    {% for slot in parameter_slots %}
            get_bindings.add(self.{{ slot.attribute }})
    {% endfor %}
    {% for slot in members_slots %}
            inject_members_bindings.add(self.{{ slot.attribute }})
    {% endfor %}
    {% endif %}
    {% if has_constructor %}

        def get(self) -> {{ type_expression }}:
            """Return a new ``{{ type_expression }}`` with all dependencies injected."""
            self._mark_used()
    {% if parameter_slots %}
            result = {{ type_expression }}(
    {% for slot in parameter_slots %}
                self.{{ slot.attribute }}.get(),
    {% endfor %}
            )
    {% else %}
            result = {{ type_expression }}()
    {% endif %}
    {% if injects_members %}
            self.inject_members(result)
    {% endif %}
            return result
    {% endif %}
    {% if injects_members %}

        def inject_members(self, instance: {{ type_expression }}) -> None:
            """Inject the annotated fields of ``instance``, then its supertype's fields."""
            self._mark_used()
    {% for slot in field_slots %}
            instance.{{ slot.member_name }} = self.{{ slot.attribute }}.get()
    {% endfor %}
    {% if supertype_slot %}
            self.{{ supertype_slot.attribute }}.inject_members(instance)
    {% endif %}
    {% endif %}
    ''',
).lstrip()

STATIC_INJECTION_CLASS_ASSEMBLY_FRAGMENT = dedent(
    '''
    class {{ class_name }}(StaticInjection):
        """{{ class_docstring }}"""

        MEMBERS_KEYS = {{ members_keys }}

        def __init__(self) -> None:
            super().__init__(required_by={{ required_by }})
    {% for slot in field_slots %}
            self.{{ slot.attribute }}: Any = None
    {% endfor %}

        def attach(self, linker: Linker) -> None:
            """Request the bindings of every static field; safe to call repeatedly."""
    {% for request in requests %}
            self.{{ request.attribute }} = {{ request.expression }}
    {% endfor %}
            self._mark_attached()

        def inject(self) -> None:
            """Assign the resolved values to the static fields of ``{{ type_expression }}``."""
            self._mark_used()
    {% for slot in field_slots %}
            {{ type_expression }}.{{ slot.member_name }} = self.{{ slot.attribute }}.get()
    {% endfor %}
    ''',
).lstrip()
