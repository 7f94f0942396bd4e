"""Benchmark executor: prerequisite chain, timed loop, averaging.

Running stage N needs the artifacts of every earlier stage, so `run` first
builds them once, outside timing, then times only the target stage for
`config.count` repetitions inside a single profiling scope. Prerequisite
artifacts are reused by every repetition; only the target stage re-runs.

Any failure aborts the whole run with `ExecutionError`; a partial average is
never reported.
"""

import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import profiling
from .config import BenchmarkConfig, Stage
from .errors import ExecutionError, ProofRejected
from .interfaces import CircuitBlueprint, CompiledCircuit, KeyPair, ProofSystem, Witness
from .metrics import StageStats
from .registry import CircuitRegistry

log = logging.getLogger(__name__)


@dataclass
class _Artifacts:
    blueprint: CircuitBlueprint
    compiled: Optional[CompiledCircuit] = None
    keys: Optional[KeyPair] = None
    witness: Optional[Witness] = None
    proof: Any = None


class BenchmarkExecutor:
    def __init__(
        self,
        circuits: CircuitRegistry,
        proof_system: ProofSystem,
        *,
        clock: Callable[[], int] = time.perf_counter_ns,
        profile_dir: str | os.PathLike[str] | None = None,
    ) -> None:
        self._circuits = circuits
        self._system = proof_system
        self._clock = clock
        self._profile_dir = profile_dir
        self._steps: Dict[Stage, Callable[[_Artifacts, BenchmarkConfig], None]] = {
            Stage.COMPILE: self._compile,
            Stage.SETUP: self._setup,
            Stage.PROVE: self._prove,
            Stage.VERIFY: self._verify,
        }
        self.last_session: Optional[profiling.ProfileSession] = None

    def run(self, config: BenchmarkConfig) -> StageStats:
        target = config.stage
        circuit = self._circuits.resolve(config.circuit_name)
        try:
            blueprint = circuit.construct(config.circuit_size)
        except Exception as exc:
            raise ExecutionError(Stage.COMPILE, exc) from exc
        artifacts = _Artifacts(blueprint=blueprint)

        for stage in target.prerequisites:
            log.debug("prerequisite %s (untimed) for %s", stage.value, target.value)
            self._call(stage, artifacts, config)
        if target in (Stage.PROVE, Stage.VERIFY):
            self._prepare_witness(artifacts, config, target)

        series: List[int] = []
        session = profiling.acquire(config.profile, self._profile_dir)
        self.last_session = session
        with session:
            for i in range(config.count):
                start = self._clock()
                self._call(target, artifacts, config)
                elapsed = self._clock() - start
                series.append(elapsed)
                log.debug("%s run %d/%d: %.3f ms", target.value, i + 1, config.count, elapsed / 1e6)

        artifact = str(session.artifact) if session.artifact is not None else None
        return StageStats.from_series(target.value, series, profile_artifact=artifact)

    def _call(self, stage: Stage, artifacts: _Artifacts, config: BenchmarkConfig) -> None:
        try:
            self._steps[stage](artifacts, config)
        except Exception as exc:
            raise ExecutionError(stage, exc) from exc

    def _prepare_witness(self, artifacts: _Artifacts, config: BenchmarkConfig, target: Stage) -> None:
        # Verify gets its witness during the prerequisite prove step.
        if artifacts.witness is not None:
            return
        log.debug("witness generation (untimed) for %s", target.value)
        try:
            artifacts.witness = self._system.witness(artifacts.compiled, config.curve)  # type: ignore[arg-type]
        except Exception as exc:
            raise ExecutionError(Stage.PROVE, exc) from exc

    def _compile(self, artifacts: _Artifacts, config: BenchmarkConfig) -> None:
        artifacts.compiled = self._system.compile(artifacts.blueprint, config.curve)

    def _setup(self, artifacts: _Artifacts, config: BenchmarkConfig) -> None:
        artifacts.keys = self._system.setup(artifacts.compiled, config.curve)  # type: ignore[arg-type]

    def _prove(self, artifacts: _Artifacts, config: BenchmarkConfig) -> None:
        if artifacts.witness is None:
            artifacts.witness = self._system.witness(artifacts.compiled, config.curve)  # type: ignore[arg-type]
        artifacts.proof = self._system.prove(
            artifacts.compiled,  # type: ignore[arg-type]
            artifacts.keys.proving_key,  # type: ignore[union-attr]
            artifacts.witness,
            config.curve,
        )

    def _verify(self, artifacts: _Artifacts, config: BenchmarkConfig) -> None:
        ok = self._system.verify(
            artifacts.proof,
            artifacts.keys.verifying_key,  # type: ignore[union-attr]
            artifacts.witness.public,  # type: ignore[union-attr]
            config.curve,
        )
        if not ok:
            raise ProofRejected("verifier rejected the proof")
