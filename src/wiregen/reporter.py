from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from wiregen.exceptions import WiregenCompilationError

logger = logging.getLogger(__name__)


class DiagnosticKind(str, Enum):
    """Category of a reported problem. Every kind fails the run."""

    DUPLICATE_CONSTRUCTOR = "duplicate_constructor"
    ABSTRACT_CONSTRUCTOR = "abstract_constructor"
    UNSUPPORTED_MEMBER = "unsupported_member"
    UNRESOLVED_TYPES = "unresolved_types"
    EMISSION_FAILED = "emission_failed"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Single problem surfaced to the end user."""

    message: str
    kind: DiagnosticKind
    symbol: str | None = None
    """Offending symbol, such as ``app.widgets.Widget.__init__``; ``None`` for run-level errors."""

    def __str__(self) -> str:
        if self.symbol is None:
            return self.message
        return f"{self.message} [{self.symbol}]"


class Reporter:
    """Ordered, append-only sink of diagnostics for one processing run.

    Reporting never aborts processing; the host calls ``raise_for_errors`` once
    the run is over so a single run surfaces as many problems as possible.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def has_errors(self) -> bool:
        return bool(self._diagnostics)

    def error(self, message: str, *, kind: DiagnosticKind, symbol: str | None = None) -> Diagnostic:
        """Append a diagnostic and return it.

        Args:
            message: Human-readable description of the problem.
            kind: Category of the problem.
            symbol: Offending symbol, if the problem is tied to one.

        """
        diagnostic = Diagnostic(message=message, kind=kind, symbol=symbol)
        self._diagnostics.append(diagnostic)
        logger.debug("Injection diagnostic (%s): %s", kind.value, diagnostic)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> tuple[Diagnostic, ...]:
        return tuple(diagnostic for diagnostic in self._diagnostics if diagnostic.kind is kind)

    def raise_for_errors(self) -> None:
        """Raise ``WiregenCompilationError`` when any diagnostic was reported."""
        if self._diagnostics:
            raise WiregenCompilationError(self._diagnostics)
