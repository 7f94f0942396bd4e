
from __future__ import annotations
from enum import Enum
from typing import TYPE_CHECKING

"""Error taxonomy shared by the validator, the executor and the profilers.

Every error the CLI reports derives from `ZkBenchError`, so the command layer
can map the whole family to a non-zero exit status in one place.
"""

if TYPE_CHECKING:
    from .config import Stage
    from .profiling import ProfileKind


class ZkBenchError(Exception):
    """Base class for benchmark harness errors."""


class ConfigErrorKind(str, Enum):
    INVALID_SIZE = "invalid_size"
    INVALID_COUNT = "invalid_count"
    INVALID_ALGORITHM = "invalid_algorithm"
    INVALID_PROFILE = "invalid_profile"
    INVALID_CURVE = "invalid_curve"
    UNKNOWN_CIRCUIT = "unknown_circuit"


class ConfigError(ZkBenchError, ValueError):
    """A benchmark parameter failed validation; nothing has run yet."""

    def __init__(self, kind: ConfigErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ExecutionError(ZkBenchError, RuntimeError):
    """A proof-system call failed while building or timing a stage."""

    def __init__(self, stage: "Stage", cause: BaseException) -> None:
        super().__init__(f"{stage.value} failed: {cause!r}")
        self.stage = stage
        self.cause = cause


class ProfileError(ZkBenchError, RuntimeError):
    """A profiling session could not be started or flushed."""

    def __init__(self, kind: "ProfileKind", message: str) -> None:
        super().__init__(message)
        self.kind = kind


class ProofRejected(Exception):
    """Raised when the verifier returns False for a freshly generated proof."""
