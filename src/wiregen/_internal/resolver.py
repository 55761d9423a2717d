from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from wiregen._internal.targets import InjectionTarget, classify_target
from wiregen.exceptions import WiregenEmissionError
from wiregen.reporter import DiagnosticKind, Reporter
from wiregen.symbols import SymbolTable

logger = logging.getLogger(__name__)

EmitTarget = Callable[[InjectionTarget], object]


@dataclass(frozen=True, slots=True)
class RoundOutcome:
    """What happened to each pending name during one round."""

    emitted: tuple[str, ...]
    rejected: tuple[str, ...]
    failed: tuple[str, ...]
    deferred: tuple[str, ...]


class ReadinessResolver:
    """Own the pending work-list and decide, round by round, which targets are ready.

    Each round reads the current work-list, computes the next one and swaps it
    in; the list is never mutated while being traversed. A target is ready once
    every type referenced by its fields, static fields and constructor
    parameters is resolved by the host. Targets that are not ready wait for a
    later round; nothing is emitted for them in the meantime.
    """

    def __init__(self, *, reporter: Reporter, emit: EmitTarget) -> None:
        self._reporter = reporter
        self._emit = emit
        self._pending: tuple[str, ...] = ()
        # Names already emitted, rejected or failed; later rounds never requeue them.
        self._finished: set[str] = set()

    @property
    def pending(self) -> tuple[str, ...]:
        return self._pending

    def enqueue(self, names: Iterable[str]) -> None:
        """Union names into the work-list, keeping the order of first discovery.

        Names of targets that were already emitted, rejected or failed are ignored.

        Args:
            names: Qualified names of discovered targets.

        """
        merged = dict.fromkeys(self._pending)
        for name in names:
            if name not in self._finished:
                merged.setdefault(name, None)
        self._pending = tuple(merged)

    def resolve_round(self, symbols: SymbolTable) -> RoundOutcome:
        """Process every pending name once against the symbol table of the round.

        Args:
            symbols: Symbol table of the current round.

        """
        emitted: list[str] = []
        rejected: list[str] = []
        failed: list[str] = []
        next_pending: list[str] = []

        for name in self._pending:
            type_symbol = symbols.get_type(name)
            if type_symbol is None:
                logger.debug("Deferring %s: type is not available in this round", name)
                next_pending.append(name)
                continue

            target = classify_target(type_symbol=type_symbol, symbols=symbols, reporter=self._reporter)
            if target.has_errors:
                rejected.append(name)
                continue

            unresolved = [
                reference
                for reference in target.referenced_types()
                if not symbols.is_resolved(reference)
            ]
            if unresolved:
                logger.debug(
                    "Deferring %s: unresolved types %s",
                    name,
                    ", ".join(str(reference) for reference in unresolved),
                )
                next_pending.append(name)
                continue

            try:
                self._emit(target)
            except WiregenEmissionError as error:
                self._reporter.error(
                    f"Code gen failed: {error}",
                    kind=DiagnosticKind.EMISSION_FAILED,
                    symbol=name,
                )
                failed.append(name)
                continue
            emitted.append(name)

        self._finished.update(emitted, rejected, failed)
        self._pending = tuple(next_pending)
        return RoundOutcome(
            emitted=tuple(emitted),
            rejected=tuple(rejected),
            failed=tuple(failed),
            deferred=tuple(next_pending),
        )

    def finish(self) -> tuple[str, ...]:
        """Turn every name still pending into a single run-failing diagnostic.

        Returns the names that were reported.
        """
        remaining = self._pending
        self._pending = ()
        if remaining:
            self._reporter.error(
                f"Could not find injection type required by [{', '.join(remaining)}]",
                kind=DiagnosticKind.UNRESOLVED_TYPES,
            )
        return remaining
