
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Protocol, Sequence, TYPE_CHECKING

"""Proof-system and circuit interfaces used by backends.

Backends implement these Protocols and hand their circuits to a
`CircuitRegistry`. The executor and the CLI interact only with these
interfaces, never with the proof-system library directly.
"""

if TYPE_CHECKING:
    from .curves import CurveID


@dataclass(frozen=True)
class CircuitBlueprint:
    """Curve-agnostic description of a circuit instance.

    `define` receives the library constraint system and emits the constraints;
    `assignment` maps the scalar-field modulus to the input values of one
    proof instance.
    """
    name: str
    size: int
    inputs: Sequence[str]
    outputs: Sequence[str]
    define: Callable[[Any], None]
    assignment: Callable[[int], Dict[str, int]]


@dataclass
class CompiledCircuit:
    blueprint: CircuitBlueprint
    constraints: Any
    arithmetization: Any


@dataclass
class KeyPair:
    proving_key: Any
    verifying_key: Any


@dataclass
class Witness:
    public: Any
    private: Any


class Circuit(Protocol):
    """Circuit constructor contract."""
    name: str
    def construct(self, size: int) -> CircuitBlueprint: ...


class ProofSystem(Protocol):
    """SNARK stage contract (compile, setup, prove, verify)."""
    name: str
    def compile(self, blueprint: CircuitBlueprint, curve: "CurveID") -> CompiledCircuit: ...
    def setup(self, compiled: CompiledCircuit, curve: "CurveID") -> KeyPair: ...
    def witness(self, compiled: CompiledCircuit, curve: "CurveID") -> Witness: ...
    def prove(self, compiled: CompiledCircuit, proving_key: Any, witness: Witness, curve: "CurveID") -> Any: ...
    def verify(self, proof: Any, verifying_key: Any, public_witness: Any, curve: "CurveID") -> bool: ...
