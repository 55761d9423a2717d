from __future__ import annotations

from dataclasses import dataclass

DEFAULT_INJECT_ADAPTER_SUFFIX = "_InjectAdapter"
DEFAULT_STATIC_INJECTION_SUFFIX = "_StaticInjection"
DEFAULT_RUNTIME_MODULE = "wiregen.runtime"
DEFAULT_GENERATED_HEADER = "# Code generated by wiregen. DO NOT EDIT."

DEFAULT_PLATFORM_MODULE_PREFIXES: tuple[str, ...] = (
    "builtins.",
    "typing.",
    "typing_extensions.",
    "abc.",
    "collections.",
    "enum.",
)
"""Supertypes under these modules never take part in members-injection delegation."""

DEFAULT_PLATFORM_TYPE_NAMES: frozenset[str] = frozenset(
    {
        "object",
        "int",
        "float",
        "complex",
        "bool",
        "str",
        "bytes",
        "bytearray",
        "list",
        "dict",
        "set",
        "frozenset",
        "tuple",
        "type",
        "None",
    },
)
"""Bare type names the reference symbol table treats as always resolved."""


@dataclass(frozen=True, slots=True)
class ProcessorConfig:
    """Configuration shared by the processor, the planner and the renderer."""

    inject_adapter_suffix: str = DEFAULT_INJECT_ADAPTER_SUFFIX
    """Suffix appended to the target's class path to name its inject adapter."""

    static_injection_suffix: str = DEFAULT_STATIC_INJECTION_SUFFIX
    """Suffix appended to the target's class path to name its static injection."""

    runtime_module: str = DEFAULT_RUNTIME_MODULE
    """Module imported by generated code for the ``Binding`` base classes."""

    generated_header: str = DEFAULT_GENERATED_HEADER
    """First line of every generated module."""

    platform_module_prefixes: tuple[str, ...] = DEFAULT_PLATFORM_MODULE_PREFIXES
    """Qualified-name prefixes of supertypes excluded from delegation."""

    def __post_init__(self) -> None:
        for attribute in ("inject_adapter_suffix", "static_injection_suffix"):
            suffix = getattr(self, attribute)
            if not suffix or not f"A{suffix}".isidentifier():
                msg = f"Invalid {attribute} {suffix!r}: it must extend a Python identifier."
                raise ValueError(msg)
        if self.inject_adapter_suffix == self.static_injection_suffix:
            msg = "inject_adapter_suffix and static_injection_suffix must differ."
            raise ValueError(msg)

    def is_platform_type(self, qualified_name: str) -> bool:
        """Return true when the type belongs to the platform rather than the application.

        Args:
            qualified_name: Fully-qualified name of the type.

        """
        if qualified_name in DEFAULT_PLATFORM_TYPE_NAMES:
            return True
        return qualified_name.startswith(self.platform_module_prefixes)


DEFAULT_CONFIG = ProcessorConfig()
