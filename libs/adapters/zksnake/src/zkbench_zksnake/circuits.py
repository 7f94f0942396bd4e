
from __future__ import annotations
from typing import Dict, List

from zksnake.arithmetization import Var

from zkbench.interfaces import CircuitBlueprint
from zkbench.registry import CircuitRegistry

"""Benchmark circuits built with zksnake's symbolic constraint API.

Both circuits take a public output `out` and a private input `inp` and emit
exactly `size` multiplication constraints, so `--size` scales the constraint
count linearly.
"""

_INPUTS = ("inp",)
_OUTPUTS = ("out",)


def _chain_vars(size: int) -> List[Var]:
    return [Var(f"v{i}") for i in range(size)]


class ExpoCircuit:
    """Repeated squaring: out == inp^(2^size)."""
    name = "expo"
    base = 3

    def construct(self, size: int) -> CircuitBlueprint:
        def define(cs) -> None:
            inp = Var("inp")
            out = Var("out")
            v = _chain_vars(size)
            cs.add_constraint(v[0] == inp * inp)
            for i in range(1, size):
                cs.add_constraint(v[i] == v[i - 1] * v[i - 1])
            cs.add_constraint(out == v[size - 1])
            cs.set_public(out)

        def assignment(modulus: int) -> Dict[str, int]:
            return {"inp": self.base, "out": pow(self.base, 1 << size, modulus)}

        return CircuitBlueprint(
            name=self.name,
            size=size,
            inputs=_INPUTS,
            outputs=_OUTPUTS,
            define=define,
            assignment=assignment,
        )


class PowerCircuit:
    """Linear multiplication chain: out == inp^(size+1)."""
    name = "power"
    base = 2

    def construct(self, size: int) -> CircuitBlueprint:
        def define(cs) -> None:
            inp = Var("inp")
            out = Var("out")
            v = _chain_vars(size)
            cs.add_constraint(v[0] == inp * inp)
            for i in range(1, size):
                cs.add_constraint(v[i] == v[i - 1] * inp)
            cs.add_constraint(out == v[size - 1])
            cs.set_public(out)

        def assignment(modulus: int) -> Dict[str, int]:
            return {"inp": self.base, "out": pow(self.base, size + 1, modulus)}

        return CircuitBlueprint(
            name=self.name,
            size=size,
            inputs=_INPUTS,
            outputs=_OUTPUTS,
            define=define,
            assignment=assignment,
        )


def default_circuits() -> CircuitRegistry:
    circuits = CircuitRegistry()
    circuits.register(ExpoCircuit.name, ExpoCircuit())
    circuits.register(PowerCircuit.name, PowerCircuit())
    return circuits.freeze()
