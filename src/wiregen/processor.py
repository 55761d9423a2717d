from __future__ import annotations

import logging
from collections.abc import Iterable

from wiregen._internal.collector import TargetCollector
from wiregen._internal.emitter.emitter import AdapterEmitter, GeneratedAdapter
from wiregen._internal.resolver import ReadinessResolver, RoundOutcome
from wiregen._internal.targets import InjectionTarget
from wiregen.config import DEFAULT_CONFIG, ProcessorConfig
from wiregen.exceptions import WiregenProcessingOverError
from wiregen.reporter import Reporter
from wiregen.sinks import ArtifactSink
from wiregen.symbols import RoundEnvironment

logger = logging.getLogger(__name__)


class InjectProcessor:
    """Generate injection adapters for the types of a compilation, round by round.

    The host calls ``process`` once per round. Each round, newly discovered
    targets join the pending work-list and every pending target whose
    dependency types are resolved is emitted. Targets still pending when the
    host declares processing over are reported as unresolved.

    Diagnostics are collected by ``reporter``; the run has failed when
    ``reporter.has_errors`` is true.

    Examples:
        .. code-block:: python

            processor = InjectProcessor(DirectoryArtifactSink("build/generated"))
            processor.process(symbols.round())
            processor.process(symbols.round(processing_over=True))
            processor.reporter.raise_for_errors()

    """

    def __init__(
        self,
        sink: ArtifactSink,
        *,
        config: ProcessorConfig | None = None,
        reporter: Reporter | None = None,
    ) -> None:
        self._config = config or DEFAULT_CONFIG
        self.reporter = reporter or Reporter()
        self._collector = TargetCollector()
        self._emitter = AdapterEmitter(config=self._config, sink=sink)
        self._resolver = ReadinessResolver(reporter=self.reporter, emit=self._emit)
        self._generated: list[GeneratedAdapter] = []
        self._rounds = 0
        self._is_over = False

    @property
    def pending(self) -> tuple[str, ...]:
        """Names of targets waiting for a later round."""
        return self._resolver.pending

    @property
    def generated_adapters(self) -> tuple[GeneratedAdapter, ...]:
        return tuple(self._generated)

    @property
    def is_over(self) -> bool:
        return self._is_over

    def process(self, environment: RoundEnvironment) -> RoundOutcome:
        """Run one round.

        Args:
            environment: Symbols and root types of the round.

        """
        if self._is_over:
            msg = "Processing is over; no further rounds are accepted."
            raise WiregenProcessingOverError(msg)

        self._rounds += 1
        self._resolver.enqueue(self._collector.collect(environment))
        outcome = self._resolver.resolve_round(environment.symbols)
        logger.info(
            "Injection round %d: emitted=%d rejected=%d failed=%d deferred=%d",
            self._rounds,
            len(outcome.emitted),
            len(outcome.rejected),
            len(outcome.failed),
            len(outcome.deferred),
        )
        if environment.processing_over:
            self.finish()
        return outcome

    def finish(self) -> tuple[str, ...]:
        """Declare that no further rounds will come and report what is still pending.

        Calling it more than once has no further effect. Returns the names
        reported as unresolved.
        """
        if self._is_over:
            return ()
        self._is_over = True
        unresolved = self._resolver.finish()
        if unresolved:
            logger.info("Injection processing over with %d unresolved target(s)", len(unresolved))
        return unresolved

    def run_rounds(self, environments: Iterable[RoundEnvironment]) -> tuple[GeneratedAdapter, ...]:
        """Process every round, finish, and fail if any diagnostic was reported.

        Args:
            environments: Rounds in the order the host produces them.

        Raises:
            WiregenCompilationError: At least one diagnostic was reported.

        """
        for environment in environments:
            self.process(environment)
        self.finish()
        self.reporter.raise_for_errors()
        return self.generated_adapters

    def _emit(self, target: InjectionTarget) -> tuple[GeneratedAdapter, ...]:
        adapters = self._emitter.emit(target)
        self._generated.extend(adapters)
        return adapters
