from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wiregen.reporter import Diagnostic


class WiregenError(Exception):
    """Represent a base class for all wiregen-specific failures.

    Catch this type when you want to handle any wiregen error path without
    matching each concrete exception class individually.
    """


class WiregenEmissionError(WiregenError):
    """Signal that an adapter artifact could not be produced.

    Raised by artifact sinks when a write fails and by the adapter planner when
    a target member cannot be expressed in generated code (for example a member
    name that is a Python keyword). The processor reports it as a diagnostic
    against the target and never leaves a partial artifact behind.
    """


class WiregenCompilationError(WiregenError):
    """Signal that a processing run finished with unrecoverable diagnostics.

    Raised by ``Reporter.raise_for_errors`` and ``InjectProcessor.run_rounds``.
    The ``diagnostics`` attribute holds every problem found during the run, in
    the order it was reported.
    """

    def __init__(self, diagnostics: Sequence[Diagnostic]) -> None:
        self.diagnostics = tuple(diagnostics)
        lines = [f"{len(self.diagnostics)} injection error(s):"]
        lines.extend(f"- {diagnostic}" for diagnostic in self.diagnostics)
        super().__init__("\n".join(lines))


class WiregenProcessingOverError(WiregenError):
    """Signal a round delivered after the host declared processing over.

    Typical fix is creating a new ``InjectProcessor`` for every compilation run.
    """


class WiregenBindingNotAttachedError(WiregenError):
    """Signal use of a generated binding before ``attach`` was called.

    The linker must attach every binding before reading values from it.
    """


class WiregenUnsupportedOperationError(WiregenError):
    """Signal construction through a binding that only injects members.

    Raised by ``Binding.get`` when the target type has no injectable or
    accessible no-argument constructor.
    """
