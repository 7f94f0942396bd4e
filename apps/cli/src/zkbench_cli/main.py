
from __future__ import annotations
import logging
import os
import sys
from typing import Optional

import typer

from zkbench import BenchmarkExecutor, RawParams, ZkBenchError, validate
from .runners.common import _load_backends, build_result, export_json

app = typer.Typer(add_completion=False, help="runs benchmarks and profiles using zksnake")

log = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    level_name = os.environ.get("ZKBENCH_LOG_LEVEL") or ("DEBUG" if verbose else "WARNING")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("zkbench").setLevel(level)


def _circuit_option():
    return typer.Option("expo", "--circuit", help="name of the circuit to use")


def _size_option():
    return typer.Option(10000, "--size", help="size of the circuit, parameter to circuit constructor")


def _count_option():
    return typer.Option(2, "--count", help="bench count (time is averaged on number of executions)")


def _algo_option():
    return typer.Option("prove", "--algo", help="name of the algorithm to benchmark. must be compile, setup, prove or verify")


def _profile_option():
    return typer.Option("none", "--profile", help="type of profile. must be none, trace, cpu or mem")


def _curve_option():
    return typer.Option("bn254", "--curve", help="curve name. must be bn254 or bls12_381")


def _profile_dir_option():
    return typer.Option(
        None,
        "--profile-dir",
        help="directory for profile artifacts (default: $ZKBENCH_PROFILE_DIR or a fresh temp dir)",
    )


def _export_option():
    return typer.Option(None, "--export", help="write a JSON summary of the run to this path")


def _verbose_option():
    return typer.Option(False, "--verbose", "-v", help="enable debug logging")


def _bench(
    system: str,
    *,
    circuit: str,
    size: int,
    count: int,
    algo: str,
    profile: str,
    curve: str,
    profile_dir: Optional[str],
    export: Optional[str],
    verbose: bool,
) -> None:
    _configure_logging(verbose)
    backends = _load_backends()
    raw = RawParams(circuit=circuit, size=size, count=count, algo=algo, profile=profile, curve=curve)
    try:
        config = validate(raw, circuits=backends.circuits, curves=backends.curves)
        executor = BenchmarkExecutor(
            backends.circuits,
            backends.proof_systems[system],
            profile_dir=profile_dir or os.environ.get("ZKBENCH_PROFILE_DIR") or None,
        )
        stats = executor.run(config)
    except ZkBenchError as e:
        log.debug("benchmark aborted", exc_info=True)
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)
    except KeyboardInterrupt:
        typer.echo("interrupted", err=True)
        raise typer.Exit(code=130)

    typer.echo(
        f"{system} {config.stage.value} {config.circuit_name} "
        f"(size={config.circuit_size}, curve={config.curve_name}): "
        f"{stats.mean_ms:.3f} ms (average over {stats.runs} runs)"
    )
    if stats.profile_artifact:
        typer.echo(f"profile written to {stats.profile_artifact}")
    if export:
        try:
            path = export_json(build_result(system, config, stats), export)
        except OSError as e:
            log.debug("export failed", exc_info=True)
            typer.echo(f"error: cannot write summary to {export}: {e}", err=True)
            raise typer.Exit(code=1)
        typer.echo(f"summary written to {path}")


@app.command()
def groth16(
    circuit: str = _circuit_option(),
    size: int = _size_option(),
    count: int = _count_option(),
    algo: str = _algo_option(),
    profile: str = _profile_option(),
    curve: str = _curve_option(),
    profile_dir: Optional[str] = _profile_dir_option(),
    export: Optional[str] = _export_option(),
    verbose: bool = _verbose_option(),
):
    """Benchmark a Groth16 stage (R1CS arithmetization)."""
    _bench(
        "groth16",
        circuit=circuit, size=size, count=count, algo=algo, profile=profile, curve=curve,
        profile_dir=profile_dir, export=export, verbose=verbose,
    )


@app.command()
def plonk(
    circuit: str = _circuit_option(),
    size: int = _size_option(),
    count: int = _count_option(),
    algo: str = _algo_option(),
    profile: str = _profile_option(),
    curve: str = _curve_option(),
    profile_dir: Optional[str] = _profile_dir_option(),
    export: Optional[str] = _export_option(),
    verbose: bool = _verbose_option(),
):
    """Benchmark a PLONK stage (Plonkish arithmetization)."""
    _bench(
        "plonk",
        circuit=circuit, size=size, count=count, algo=algo, profile=profile, curve=curve,
        profile_dir=profile_dir, export=export, verbose=verbose,
    )


@app.command("list-circuits")
def list_circuits():
    """List registered circuits."""
    backends = _load_backends()
    for name, circuit in backends.circuits.list().items():
        doc = (type(circuit).__doc__ or "").strip().splitlines()
        typer.echo(f"- {name}: {doc[0]}" if doc else f"- {name}")


@app.command("list-curves")
def list_curves():
    """List supported curves (names are matched case-insensitively)."""
    backends = _load_backends()
    for name in backends.curves.names():
        typer.echo(f"- {name}")


def app_main():
    app()

if __name__ == "__main__":
    app_main()
