
from __future__ import annotations
"""Benchmark parameter validation.

`validate` is the single place that decides whether a configuration can run.
It turns the raw CLI values into a frozen `BenchmarkConfig` whose fields are
already resolved handles (enum members, a `CurveID`), or raises `ConfigError`
naming the first parameter that failed. It has no side effects.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .curves import CurveID, CurveRegistry
from .errors import ConfigError, ConfigErrorKind
from .profiling import ProfileKind
from .registry import CircuitRegistry


class Stage(str, Enum):
    """Algorithm stages, in dependency order."""
    COMPILE = "compile"
    SETUP = "setup"
    PROVE = "prove"
    VERIFY = "verify"

    @property
    def prerequisites(self) -> Tuple["Stage", ...]:
        """Stages that must run (once, untimed) before this one."""
        order = list(Stage)
        return tuple(order[: order.index(self)])


@dataclass(frozen=True)
class RawParams:
    circuit: str = "expo"
    size: int = 10000
    count: int = 2
    algo: str = "prove"
    profile: str = "none"
    curve: str = "bn254"


@dataclass(frozen=True)
class BenchmarkConfig:
    circuit_name: str
    circuit_size: int
    stage: Stage
    curve: CurveID
    profile: ProfileKind
    count: int

    @property
    def curve_name(self) -> str:
        return self.curve.key


def _literals(enum_cls) -> str:
    return ", ".join(m.value for m in enum_cls)


def validate(raw: RawParams, *, circuits: CircuitRegistry, curves: CurveRegistry) -> BenchmarkConfig:
    if raw.size <= 0:
        raise ConfigError(ConfigErrorKind.INVALID_SIZE, "circuit size must be > 0")
    if raw.count <= 0:
        raise ConfigError(ConfigErrorKind.INVALID_COUNT, "bench count must be > 0")

    try:
        stage = Stage(raw.algo)
    except ValueError:
        raise ConfigError(
            ConfigErrorKind.INVALID_ALGORITHM,
            f"invalid algo {raw.algo!r}. must be {_literals(Stage)}",
        ) from None

    try:
        profile = ProfileKind(raw.profile)
    except ValueError:
        raise ConfigError(
            ConfigErrorKind.INVALID_PROFILE,
            f"invalid profile {raw.profile!r}. must be {_literals(ProfileKind)}",
        ) from None

    curve = curves.find(raw.curve)
    if curve is None:
        raise ConfigError(
            ConfigErrorKind.INVALID_CURVE,
            f"invalid curve {raw.curve!r}. must be one of {curves.names()}",
        )

    # Raises UNKNOWN_CIRCUIT itself.
    circuits.resolve(raw.circuit)

    return BenchmarkConfig(
        circuit_name=raw.circuit,
        circuit_size=raw.size,
        stage=stage,
        curve=curve,
        profile=profile,
        count=raw.count,
    )
