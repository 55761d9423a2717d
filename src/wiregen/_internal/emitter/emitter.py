from __future__ import annotations

import logging
from dataclasses import dataclass

from wiregen._internal.emitter.planner import (
    AdapterKind,
    AdapterPlan,
    AdapterPlanner,
    InjectAdapterPlan,
)
from wiregen._internal.emitter.renderer import AdapterRenderer
from wiregen._internal.targets import InjectionTarget
from wiregen.config import ProcessorConfig
from wiregen.sinks import ArtifactSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GeneratedAdapter:
    """Artifact emitted for a target; immutable once written."""

    kind: AdapterKind
    target_name: str
    artifact_name: str
    construction_keys: tuple[str, ...]
    members_keys: tuple[str, ...]
    supertype_key: str | None
    singleton: bool
    source: str


class AdapterEmitter:
    """Plan, render and write the adapters of ready targets."""

    def __init__(self, *, config: ProcessorConfig, sink: ArtifactSink) -> None:
        self._planner = AdapterPlanner(config=config)
        self._renderer = AdapterRenderer(config=config)
        self._sink = sink

    def emit(self, target: InjectionTarget) -> tuple[GeneratedAdapter, ...]:
        """Write every adapter the target needs and return their descriptions.

        Every module is rendered before the first write, so a planning failure
        leaves nothing behind for the target.

        Args:
            target: Ready target.

        Raises:
            WiregenEmissionError: A member cannot be expressed in generated code
                or the sink failed to write an artifact.

        """
        adapters = tuple(self._generate(plan) for plan in self._planner.plan(target))
        for adapter in adapters:
            self._sink.write(adapter.artifact_name, adapter.source, origin=adapter.target_name)
            logger.info(
                "Wrote %s for %s: construction_keys=%d members_keys=%d singleton=%s",
                adapter.artifact_name,
                adapter.target_name,
                len(adapter.construction_keys),
                len(adapter.members_keys),
                adapter.singleton,
            )
        return adapters

    def _generate(self, plan: AdapterPlan) -> GeneratedAdapter:
        source = self._renderer.render(plan)
        if isinstance(plan, InjectAdapterPlan):
            return GeneratedAdapter(
                kind=plan.kind,
                target_name=plan.target_name,
                artifact_name=plan.artifact_name,
                construction_keys=plan.construction_keys,
                members_keys=plan.members_keys,
                supertype_key=plan.supertype_key,
                singleton=plan.singleton,
                source=source,
            )
        return GeneratedAdapter(
            kind=plan.kind,
            target_name=plan.target_name,
            artifact_name=plan.artifact_name,
            construction_keys=(),
            members_keys=plan.members_keys,
            supertype_key=None,
            singleton=False,
            source=source,
        )
