from __future__ import annotations

import logging

import pytest

from wiregen.config import DEFAULT_CONFIG, ProcessorConfig
from wiregen.exceptions import WiregenCompilationError, WiregenError
from wiregen.reporter import Diagnostic, DiagnosticKind, Reporter


def test_reporter_keeps_diagnostics_in_reporting_order() -> None:
    reporter = Reporter()

    reporter.error("first", kind=DiagnosticKind.UNSUPPORTED_MEMBER, symbol="app.Widget.start()")
    reporter.error("second", kind=DiagnosticKind.UNRESOLVED_TYPES)

    assert [diagnostic.message for diagnostic in reporter.diagnostics] == ["first", "second"]
    assert reporter.has_errors
    assert reporter.of_kind(DiagnosticKind.UNRESOLVED_TYPES) == (
        Diagnostic("second", DiagnosticKind.UNRESOLVED_TYPES),
    )


def test_reporter_logs_each_diagnostic(caplog: pytest.LogCaptureFixture) -> None:
    Reporter().error("Cannot inject start()", kind=DiagnosticKind.UNSUPPORTED_MEMBER)

    assert any(
        record.levelno == logging.DEBUG and "Cannot inject start()" in record.getMessage()
        for record in caplog.records
    )


def test_diagnostic_string_names_the_offending_symbol() -> None:
    diagnostic = Diagnostic("Cannot inject start()", DiagnosticKind.UNSUPPORTED_MEMBER, "app.Widget.start()")

    assert str(diagnostic) == "Cannot inject start() [app.Widget.start()]"
    assert str(Diagnostic("run failed", DiagnosticKind.UNRESOLVED_TYPES)) == "run failed"


def test_raise_for_errors_is_silent_without_diagnostics() -> None:
    Reporter().raise_for_errors()


def test_raise_for_errors_carries_every_diagnostic() -> None:
    reporter = Reporter()
    reporter.error("first", kind=DiagnosticKind.DUPLICATE_CONSTRUCTOR, symbol="app.Widget.__init__()")
    reporter.error("second", kind=DiagnosticKind.UNRESOLVED_TYPES)

    with pytest.raises(WiregenCompilationError) as exc_info:
        reporter.raise_for_errors()

    assert isinstance(exc_info.value, WiregenError)
    assert exc_info.value.diagnostics == reporter.diagnostics
    assert str(exc_info.value) == (
        "2 injection error(s):\n- first [app.Widget.__init__()]\n- second"
    )


@pytest.mark.parametrize(
    ("options", "match"),
    [
        ({"inject_adapter_suffix": ""}, "inject_adapter_suffix"),
        ({"static_injection_suffix": "-static"}, "static_injection_suffix"),
        (
            {"inject_adapter_suffix": "_Adapter", "static_injection_suffix": "_Adapter"},
            "must differ",
        ),
    ],
)
def test_config_rejects_unusable_suffixes(options: dict[str, str], match: str) -> None:
    with pytest.raises(ValueError, match=match):
        ProcessorConfig(**options)


@pytest.mark.parametrize(
    ("qualified_name", "expected"),
    [
        ("object", True),
        ("builtins.object", True),
        ("typing.Generic", True),
        ("collections.abc.Mapping", True),
        ("app.widgets.Machine", False),
        ("typingx.Base", False),
    ],
)
def test_platform_type_detection(qualified_name: str, expected: bool) -> None:  # noqa: FBT001
    assert DEFAULT_CONFIG.is_platform_type(qualified_name) is expected


def test_platform_prefixes_are_configurable() -> None:
    config = ProcessorConfig(platform_module_prefixes=("vendor.",))

    assert config.is_platform_type("vendor.Base")
    assert not config.is_platform_type("typing.Generic")
