"""Runtime base classes imported by generated adapter modules.

Every generated adapter follows a two-phase protocol driven by the linker:

1. ``attach(linker)`` requests a handle for each dependency key. It may be
   called more than once while the graph is being completed; for a fixed graph
   it always converges to the same handles.
2. ``get()`` / ``inject_members(instance)`` (or ``inject()`` for static
   injections) read the current value of those handles.

State moves ``UNATTACHED -> ATTACHED -> USED``; using a binding before it is
attached raises ``WiregenBindingNotAttachedError``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar, Protocol

from wiregen.exceptions import WiregenBindingNotAttachedError, WiregenUnsupportedOperationError


class BindingState(str, Enum):
    UNATTACHED = "unattached"
    ATTACHED = "attached"
    USED = "used"


class BindingHandle(Protocol):
    """Handle returned by the linker; its value is read during the use phase."""

    def get(self) -> Any:
        """Return the current value of the binding."""

    def inject_members(self, instance: Any) -> None:
        """Inject the members of an already constructed instance.

        Args:
            instance: Object whose fields receive resolved values.

        """


class Linker(Protocol):
    """Runtime component resolving binding keys to bindings."""

    def request_binding(
        self,
        key: str,
        required_by: str,
        mandatory: bool = True,  # noqa: FBT001, FBT002
    ) -> BindingHandle:
        """Return the handle bound to ``key``.

        Args:
            key: Binding key rendered by ``wiregen.keys``.
            required_by: Qualified name of the type that requests the binding.
            mandatory: Whether a missing binding is an error for the linker.

        """


class _Attachable:
    def __init__(self, *, required_by: str) -> None:
        self.required_by = required_by
        self._state = BindingState.UNATTACHED

    @property
    def state(self) -> BindingState:
        return self._state

    @property
    def is_attached(self) -> bool:
        return self._state is not BindingState.UNATTACHED

    def attach(self, linker: Linker) -> None:  # noqa: ARG002
        """Request the handles of every dependency from the linker.

        Bindings without dependencies have nothing to request.

        Args:
            linker: Linker resolving binding keys.

        """
        self._mark_attached()

    def _mark_attached(self) -> None:
        if self._state is BindingState.UNATTACHED:
            self._state = BindingState.ATTACHED

    def _mark_used(self) -> None:
        if self._state is BindingState.UNATTACHED:
            msg = f"{type(self).__name__} for {self.required_by!r} is used before attach()."
            raise WiregenBindingNotAttachedError(msg)
        self._state = BindingState.USED


class Binding(_Attachable):
    """Base class of generated inject adapters.

    ``provide_key`` is ``None`` when the target can only be members-injected.
    """

    CONSTRUCTION_KEYS: ClassVar[tuple[str, ...]] = ()
    MEMBERS_KEYS: ClassVar[tuple[str, ...]] = ()

    def __init__(
        self,
        *,
        provide_key: str | None,
        members_key: str,
        singleton: bool,
        required_by: str,
    ) -> None:
        super().__init__(required_by=required_by)
        self.provide_key = provide_key
        self.members_key = members_key
        self.singleton = singleton

    def get_dependencies(
        self,
        get_bindings: set[Any],
        inject_members_bindings: set[Any],
    ) -> None:
        """Add attached dependency handles to the given sets.

        Args:
            get_bindings: Receives the handles needed to construct an instance.
            inject_members_bindings: Receives the handles needed to inject members.

        """

    def get(self) -> Any:
        msg = f"No injectable constructor on {self.required_by!r}."
        raise WiregenUnsupportedOperationError(msg)

    def inject_members(self, instance: Any) -> None:  # noqa: ARG002
        self._mark_used()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(provide_key={self.provide_key!r}, "
            f"members_key={self.members_key!r}, state={self._state.value})"
        )


class StaticInjection(_Attachable):
    """Base class of generated static injections."""

    MEMBERS_KEYS: ClassVar[tuple[str, ...]] = ()

    def inject(self) -> None:
        """Assign the resolved values to the static fields of the target type."""
        self._mark_used()


__all__ = [
    "Binding",
    "BindingHandle",
    "BindingState",
    "Linker",
    "StaticInjection",
]
