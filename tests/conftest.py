"""Shared pytest fixtures for wiregen tests."""

from __future__ import annotations

import logging

import pytest

from wiregen.config import ProcessorConfig
from wiregen.processor import InjectProcessor
from wiregen.reporter import Reporter
from wiregen.sinks import InMemoryArtifactSink


@pytest.fixture()
def sink() -> InMemoryArtifactSink:
    """Sink collecting generated modules in memory."""
    return InMemoryArtifactSink()


@pytest.fixture()
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture()
def config() -> ProcessorConfig:
    return ProcessorConfig()


@pytest.fixture()
def processor(
    sink: InMemoryArtifactSink,
    config: ProcessorConfig,
    reporter: Reporter,
) -> InjectProcessor:
    """Processor writing to the in-memory sink."""
    return InjectProcessor(sink, config=config, reporter=reporter)


@pytest.fixture(autouse=True)
def _debug_logging(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="wiregen")
