"""Backend package for zksnake-powered proof systems, circuits and curves.

Importing this package pulls in zksnake; the CLI does so lazily so that the
core and its tests never need the library.
"""

from .circuits import ExpoCircuit, PowerCircuit, default_circuits
from .curves import BLS12_381, BN254, default_curves
from .systems import Groth16System, PlonkSystem, proof_systems

__all__ = [
    "ExpoCircuit",
    "PowerCircuit",
    "default_circuits",
    "BLS12_381",
    "BN254",
    "default_curves",
    "Groth16System",
    "PlonkSystem",
    "proof_systems",
]
