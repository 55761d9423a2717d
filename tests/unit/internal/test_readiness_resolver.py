from __future__ import annotations

import pytest
from wiring_fixtures import symbols as fixtures

from wiregen._internal.resolver import ReadinessResolver
from wiregen._internal.targets import InjectionTarget
from wiregen.exceptions import WiregenEmissionError
from wiregen.reporter import DiagnosticKind, Reporter
from wiregen.symbols import InMemorySymbolTable

WIDGET = fixtures.qualified("Widget")


class _RecordingEmit:
    def __init__(self, *, failing: frozenset[str] = frozenset()) -> None:
        self.targets: list[InjectionTarget] = []
        self._failing = failing

    def __call__(self, target: InjectionTarget) -> None:
        if target.qualified_name in self._failing:
            msg = "disk full"
            raise WiregenEmissionError(msg)
        self.targets.append(target)


@pytest.fixture()
def emit() -> _RecordingEmit:
    return _RecordingEmit()


@pytest.fixture()
def resolver(reporter: Reporter, emit: _RecordingEmit) -> ReadinessResolver:
    return ReadinessResolver(reporter=reporter, emit=emit)


def test_enqueue_keeps_first_discovery_order_without_duplicates(resolver: ReadinessResolver) -> None:
    resolver.enqueue(["b", "a"])
    resolver.enqueue(["a", "c", "b"])

    assert resolver.pending == ("b", "a", "c")


def test_ready_target_is_emitted_and_leaves_the_work_list(
    resolver: ReadinessResolver,
    emit: _RecordingEmit,
) -> None:
    resolver.enqueue([WIDGET])

    outcome = resolver.resolve_round(fixtures.table(fixtures.widget()))

    assert outcome.emitted == (WIDGET,)
    assert [target.qualified_name for target in emit.targets] == [WIDGET]
    assert resolver.pending == ()


def test_target_with_unresolved_dependency_waits_for_a_later_round(
    resolver: ReadinessResolver,
    emit: _RecordingEmit,
    reporter: Reporter,
) -> None:
    widget = fixtures.widget()
    symbols = InMemorySymbolTable([widget, fixtures.declared("Knob")])
    resolver.enqueue([WIDGET])

    first = resolver.resolve_round(symbols)
    symbols.define(fixtures.declared("Gear"))
    second = resolver.resolve_round(symbols)

    assert first.deferred == (WIDGET,)
    assert first.emitted == ()
    assert second.emitted == (WIDGET,)
    assert len(emit.targets) == 1
    assert not reporter.has_errors


def test_target_missing_from_the_symbol_table_is_deferred(resolver: ReadinessResolver) -> None:
    resolver.enqueue([WIDGET])

    outcome = resolver.resolve_round(fixtures.table())

    assert outcome.deferred == (WIDGET,)
    assert resolver.pending == (WIDGET,)


def test_target_with_structural_errors_is_dropped_without_emission(
    resolver: ReadinessResolver,
    emit: _RecordingEmit,
    reporter: Reporter,
) -> None:
    abstract_widget = fixtures.abstract_widget()
    resolver.enqueue([abstract_widget.qualified_name])

    outcome = resolver.resolve_round(fixtures.table(abstract_widget))

    assert outcome.rejected == (abstract_widget.qualified_name,)
    assert emit.targets == []
    assert resolver.pending == ()
    assert reporter.of_kind(DiagnosticKind.ABSTRACT_CONSTRUCTOR)


def test_emission_failure_is_reported_against_the_target(reporter: Reporter) -> None:
    resolver = ReadinessResolver(reporter=reporter, emit=_RecordingEmit(failing=frozenset({WIDGET})))
    resolver.enqueue([WIDGET])

    outcome = resolver.resolve_round(fixtures.table(fixtures.widget()))

    assert outcome.failed == (WIDGET,)
    assert resolver.pending == ()
    (diagnostic,) = reporter.diagnostics
    assert diagnostic.kind is DiagnosticKind.EMISSION_FAILED
    assert diagnostic.message == "Code gen failed: disk full"
    assert diagnostic.symbol == WIDGET


def test_finish_reports_every_remaining_name_in_one_diagnostic(
    resolver: ReadinessResolver,
    reporter: Reporter,
) -> None:
    resolver.enqueue(["app.Legacy", "app.Old"])

    remaining = resolver.finish()

    assert remaining == ("app.Legacy", "app.Old")
    assert resolver.pending == ()
    (diagnostic,) = reporter.diagnostics
    assert diagnostic.kind is DiagnosticKind.UNRESOLVED_TYPES
    assert diagnostic.message == "Could not find injection type required by [app.Legacy, app.Old]"
    assert diagnostic.symbol is None


def test_finish_with_empty_work_list_reports_nothing(
    resolver: ReadinessResolver,
    reporter: Reporter,
) -> None:
    assert resolver.finish() == ()
    assert not reporter.has_errors


def test_finished_targets_are_never_queued_again(
    resolver: ReadinessResolver,
    emit: _RecordingEmit,
) -> None:
    abstract_widget = fixtures.abstract_widget()
    symbols = fixtures.table(fixtures.widget(), abstract_widget)
    resolver.enqueue([WIDGET, abstract_widget.qualified_name])
    resolver.resolve_round(symbols)

    resolver.enqueue([WIDGET, abstract_widget.qualified_name])
    outcome = resolver.resolve_round(symbols)

    assert resolver.pending == ()
    assert outcome.emitted == ()
    assert outcome.rejected == ()
    assert [target.qualified_name for target in emit.targets] == [WIDGET]


def test_failed_target_is_not_retried(reporter: Reporter) -> None:
    resolver = ReadinessResolver(reporter=reporter, emit=_RecordingEmit(failing=frozenset({WIDGET})))
    symbols = fixtures.table(fixtures.widget())
    resolver.enqueue([WIDGET])
    resolver.resolve_round(symbols)

    resolver.enqueue([WIDGET])

    assert resolver.pending == ()
    assert len(reporter.of_kind(DiagnosticKind.EMISSION_FAILED)) == 1
