"""Command-line entry point for zkbench (`zkbench groth16|plonk ...`)."""
