
from __future__ import annotations
from typing import Any, Dict

from zksnake.arithmetization import ConstraintSystem, Var
from zksnake.arithmetization.plonkish import Plonkish
from zksnake.arithmetization.r1cs import R1CS
from zksnake.groth16 import Groth16
from zksnake.plonk import Plonk

from zkbench.curves import CurveID
from zkbench.interfaces import CircuitBlueprint, CompiledCircuit, KeyPair, ProofSystem, Witness


class _ZksnakeSystem:
    """Shared compile/witness plumbing for zksnake proof systems.

    zksnake keeps the proving and verifying keys on the prover object created
    by `setup()`, so both halves of the `KeyPair` point at that object.
    """
    name = "zksnake"

    def _pad(self, cs: ConstraintSystem, blueprint: CircuitBlueprint) -> None:
        pass

    def _arithmetize(self, cs: ConstraintSystem, curve: CurveID) -> Any:
        raise NotImplementedError

    def _engine(self, compiled: CompiledCircuit, curve: CurveID) -> Any:
        raise NotImplementedError

    def compile(self, blueprint: CircuitBlueprint, curve: CurveID) -> CompiledCircuit:
        cs = ConstraintSystem(list(blueprint.inputs), list(blueprint.outputs), curve.scalar_field)
        blueprint.define(cs)
        self._pad(cs, blueprint)
        arithmetization = self._arithmetize(cs, curve)
        arithmetization.compile()
        return CompiledCircuit(blueprint=blueprint, constraints=cs, arithmetization=arithmetization)

    def setup(self, compiled: CompiledCircuit, curve: CurveID) -> KeyPair:
        engine = self._engine(compiled, curve)
        engine.setup()
        return KeyPair(proving_key=engine, verifying_key=engine)

    def witness(self, compiled: CompiledCircuit, curve: CurveID) -> Witness:
        values = compiled.constraints.solve(compiled.blueprint.assignment(curve.scalar_field))
        public, private = compiled.arithmetization.generate_witness(values)
        return Witness(public=public, private=private)

    def prove(self, compiled: CompiledCircuit, proving_key: Any, witness: Witness, curve: CurveID) -> Any:
        return proving_key.prove(witness.public, witness.private)

    def verify(self, proof: Any, verifying_key: Any, public_witness: Any, curve: CurveID) -> bool:
        return bool(verifying_key.verify(proof, public_witness))


class Groth16System(_ZksnakeSystem):
    name = "groth16"

    def _arithmetize(self, cs: ConstraintSystem, curve: CurveID) -> R1CS:
        return R1CS(cs, curve.display_name)

    def _engine(self, compiled: CompiledCircuit, curve: CurveID) -> Groth16:
        return Groth16(compiled.arithmetization, curve.display_name)


class PlonkSystem(_ZksnakeSystem):
    name = "plonk"
    # zksnake's Plonk prover needs an evaluation domain of at least 4 rows,
    # i.e. 3 gates before power-of-two padding.
    min_gates = 3

    def _pad(self, cs: ConstraintSystem, blueprint: CircuitBlueprint) -> None:
        inp = Var(blueprint.inputs[0])
        for i in range(cs.num_constraints(), self.min_gates):
            cs.add_constraint(Var(f"pad{i}") == inp * inp)

    def _arithmetize(self, cs: ConstraintSystem, curve: CurveID) -> Plonkish:
        return Plonkish(cs, curve.display_name)

    def _engine(self, compiled: CompiledCircuit, curve: CurveID) -> Plonk:
        return Plonk(compiled.arithmetization, curve=curve.display_name)


def proof_systems() -> Dict[str, ProofSystem]:
    return {s.name: s for s in (Groth16System(), PlonkSystem())}
