
from .config import BenchmarkConfig, RawParams, Stage, validate
from .curves import CurveID, CurveRegistry
from .errors import (
    ConfigError,
    ConfigErrorKind,
    ExecutionError,
    ProfileError,
    ProofRejected,
    ZkBenchError,
)
from .executor import BenchmarkExecutor
from .interfaces import Circuit, CircuitBlueprint, CompiledCircuit, KeyPair, ProofSystem, Witness
from .metrics import BenchmarkResult, StageStats
from .profiling import ProfileKind, acquire
from .registry import CircuitRegistry

__all__ = [
    "BenchmarkConfig",
    "RawParams",
    "Stage",
    "validate",
    "CurveID",
    "CurveRegistry",
    "ConfigError",
    "ConfigErrorKind",
    "ExecutionError",
    "ProfileError",
    "ProofRejected",
    "ZkBenchError",
    "BenchmarkExecutor",
    "Circuit",
    "CircuitBlueprint",
    "CompiledCircuit",
    "KeyPair",
    "ProofSystem",
    "Witness",
    "BenchmarkResult",
    "StageStats",
    "ProfileKind",
    "acquire",
    "CircuitRegistry",
]
