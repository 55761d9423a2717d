from wiregen._internal.emitter.emitter import GeneratedAdapter
from wiregen._internal.emitter.planner import AdapterKind
from wiregen._internal.resolver import RoundOutcome
from wiregen.config import ProcessorConfig
from wiregen.exceptions import (
    WiregenBindingNotAttachedError,
    WiregenCompilationError,
    WiregenEmissionError,
    WiregenError,
    WiregenProcessingOverError,
    WiregenUnsupportedOperationError,
)
from wiregen.processor import InjectProcessor
from wiregen.reporter import Diagnostic, DiagnosticKind, Reporter
from wiregen.sinks import ArtifactSink, DirectoryArtifactSink, InMemoryArtifactSink
from wiregen.symbols import (
    InMemorySymbolTable,
    MemberKind,
    MemberSymbol,
    Modifier,
    ParameterSymbol,
    Qualifier,
    RoundEnvironment,
    SymbolTable,
    TypeRef,
    TypeSymbol,
)

__all__ = [
    "AdapterKind",
    "ArtifactSink",
    "Diagnostic",
    "DiagnosticKind",
    "DirectoryArtifactSink",
    "GeneratedAdapter",
    "InMemoryArtifactSink",
    "InMemorySymbolTable",
    "InjectProcessor",
    "MemberKind",
    "MemberSymbol",
    "Modifier",
    "ParameterSymbol",
    "ProcessorConfig",
    "Qualifier",
    "Reporter",
    "RoundEnvironment",
    "RoundOutcome",
    "SymbolTable",
    "TypeRef",
    "TypeSymbol",
    "WiregenBindingNotAttachedError",
    "WiregenCompilationError",
    "WiregenEmissionError",
    "WiregenError",
    "WiregenProcessingOverError",
    "WiregenUnsupportedOperationError",
]
