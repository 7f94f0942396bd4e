from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
for rel in (
    Path("libs/core/src"),
    Path("libs/adapters/zksnake/src"),
    Path("apps/cli/src"),
):
    candidate_str = str(ROOT / rel)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from zkbench import (  # noqa: E402
    CircuitBlueprint,
    CircuitRegistry,
    CompiledCircuit,
    CurveID,
    CurveRegistry,
    KeyPair,
    Witness,
)

BN254_R = 21888242871839275222246405745257275088548364400416034343698204186575808495617
BLS12_381_R = 52435875175126190479447740508185965837690552500527637822603658699938581184513

# Virtual cost of each proof-system call, in nanoseconds.
STAGE_COST_NS: Dict[str, int] = {
    "compile": 1_000_000,
    "setup": 2_000_000,
    "witness": 500_000,
    "prove": 3_000_000,
    "verify": 7_000,
}


class VirtualClock:
    def __init__(self) -> None:
        self.now = 0
        self.reads = 0

    def __call__(self) -> int:
        self.reads += 1
        return self.now

    def advance(self, ns: int) -> None:
        self.now += ns


class FakeCircuit:
    """Circuit double that records every size it was built with."""

    def __init__(self, name: str, fail: bool = False) -> None:
        self.name = name
        self.fail = fail
        self.constructed: List[int] = []

    def construct(self, size: int) -> CircuitBlueprint:
        self.constructed.append(size)
        if self.fail:
            raise ValueError(f"{self.name} cannot be built with size {size}")
        return CircuitBlueprint(
            name=self.name,
            size=size,
            inputs=("inp",),
            outputs=("out",),
            define=lambda cs: None,
            assignment=lambda modulus: {"inp": 3, "out": pow(3, 2 ** size, modulus)},
        )


class FakeProofSystem:
    """Proof system whose calls only advance a virtual clock."""

    def __init__(
        self,
        name: str = "fake",
        clock: Optional[VirtualClock] = None,
        *,
        fail_on: Optional[str] = None,
        fail_at: int = 1,
        reject: bool = False,
    ) -> None:
        self.name = name
        self.clock = clock or VirtualClock()
        self.calls: Counter = Counter()
        self.fail_on = fail_on
        self.fail_at = fail_at
        self.reject = reject

    def _tick(self, op: str) -> None:
        self.calls[op] += 1
        if op == self.fail_on and self.calls[op] == self.fail_at:
            raise RuntimeError(f"{op} exploded on call {self.calls[op]}")
        self.clock.advance(STAGE_COST_NS[op])

    def compile(self, blueprint: CircuitBlueprint, curve: CurveID) -> CompiledCircuit:
        self._tick("compile")
        return CompiledCircuit(blueprint=blueprint, constraints=("cs", curve.display_name), arithmetization=None)

    def setup(self, compiled: CompiledCircuit, curve: CurveID) -> KeyPair:
        self._tick("setup")
        return KeyPair(proving_key="pk", verifying_key="vk")

    def witness(self, compiled: CompiledCircuit, curve: CurveID) -> Witness:
        self._tick("witness")
        values = compiled.blueprint.assignment(curve.scalar_field)
        return Witness(public=[values["out"]], private=[values["inp"]])

    def prove(self, compiled: CompiledCircuit, proving_key: Any, witness: Witness, curve: CurveID) -> Any:
        assert proving_key == "pk"
        self._tick("prove")
        return ("proof", tuple(witness.public))

    def verify(self, proof: Any, verifying_key: Any, public_witness: Any, curve: CurveID) -> bool:
        assert verifying_key == "vk"
        self._tick("verify")
        return not self.reject and proof == ("proof", tuple(public_witness))


@pytest.fixture
def fake_circuits() -> Dict[str, FakeCircuit]:
    return {
        "expo": FakeCircuit("expo"),
        "power": FakeCircuit("power"),
        "broken": FakeCircuit("broken", fail=True),
    }


@pytest.fixture
def circuits(fake_circuits: Dict[str, FakeCircuit]) -> CircuitRegistry:
    registry = CircuitRegistry()
    for name, circuit in fake_circuits.items():
        registry.register(name, circuit)
    return registry.freeze()


@pytest.fixture
def curves() -> CurveRegistry:
    return CurveRegistry((CurveID("BN254", BN254_R), CurveID("BLS12_381", BLS12_381_R)))


@pytest.fixture
def clock() -> VirtualClock:
    return VirtualClock()


@pytest.fixture
def make_system(clock: VirtualClock):
    def _make(**kwargs: Any) -> FakeProofSystem:
        kwargs.setdefault("clock", clock)
        return FakeProofSystem(**kwargs)
    return _make
