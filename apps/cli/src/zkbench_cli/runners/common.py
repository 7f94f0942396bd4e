from __future__ import annotations
"""Shared CLI utilities.

Includes backend bootstrap, environment metadata, and JSON export of a
benchmark result.
"""

import copy
import json
import logging
import os
import pathlib
import platform
import subprocess
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

import psutil

from zkbench import BenchmarkConfig, CircuitRegistry, CurveRegistry, ProofSystem
from zkbench.metrics import BenchmarkResult, StageStats

log = logging.getLogger(__name__)

_ENVIRONMENT_CACHE: Dict[str, Any] | None = None


@dataclass
class Backends:
    circuits: CircuitRegistry
    curves: CurveRegistry
    proof_systems: Dict[str, ProofSystem]


def _load_backends() -> Backends:
    """Import the zksnake backend and build its registries."""
    import zkbench_zksnake

    return Backends(
        circuits=zkbench_zksnake.default_circuits(),
        curves=zkbench_zksnake.default_curves(),
        proof_systems=zkbench_zksnake.proof_systems(),
    )


def _detect_cpu_model() -> str | None:
    system = platform.system()
    try:
        if system == "Darwin":
            out = subprocess.check_output(
                ["sysctl", "-n", "machdep.cpu.brand_string"],
                stderr=subprocess.DEVNULL,
                text=True,
            ).strip()
            if out:
                return out
        elif system == "Linux":
            cpuinfo = pathlib.Path("/proc/cpuinfo")
            if cpuinfo.exists():
                for line in cpuinfo.read_text(encoding="utf-8", errors="ignore").splitlines():
                    if line.lower().startswith("model name"):
                        return line.split(":", 1)[1].strip()
        elif system == "Windows":
            val = os.environ.get("PROCESSOR_IDENTIFIER")
            if val:
                return val
    except (OSError, subprocess.SubprocessError):
        log.debug("cpu model detection failed", exc_info=True)
    uname = platform.uname()
    for val in (uname.processor, uname.machine):
        if val:
            return val
    return None


def _collect_environment_meta() -> Dict[str, Any]:
    global _ENVIRONMENT_CACHE
    if _ENVIRONMENT_CACHE is None:
        info: Dict[str, Any] = {}
        cpu_model = _detect_cpu_model()
        if cpu_model:
            info["cpu_model"] = cpu_model
        info["os"] = platform.platform(aliased=True)
        info["python"] = platform.python_version()
        info["logical_cpus"] = psutil.cpu_count(logical=True)
        _ENVIRONMENT_CACHE = info
    return copy.deepcopy(_ENVIRONMENT_CACHE)


def build_result(system: str, config: BenchmarkConfig, stats: StageStats) -> BenchmarkResult:
    return BenchmarkResult(
        system=system,
        config={
            "circuit": config.circuit_name,
            "size": config.circuit_size,
            "algo": config.stage.value,
            "curve": config.curve_name,
            "profile": config.profile.value,
            "count": config.count,
        },
        stats=stats,
        meta={"environment": _collect_environment_meta()},
    )


def _build_export_payload(result: BenchmarkResult) -> Dict[str, Any]:
    stats = asdict(result.stats)
    stats["mean_ms"] = result.stats.mean_ms
    return {
        "system": result.system,
        "config": dict(result.config),
        "stats": stats,
        "meta": dict(result.meta),
    }


def _repo_root() -> pathlib.Path:
    """Best-effort detection of the repository root (directory containing .git).
    Falls back to the current working directory if not found.
    """
    here = pathlib.Path(__file__).resolve()
    for p in (here, *here.parents):
        if (p / ".git").exists():
            return p
    return pathlib.Path.cwd()


def export_json(result: BenchmarkResult, export_path: str | None) -> Optional[pathlib.Path]:
    if not export_path:
        return None
    # Normalize Windows-style separators on POSIX if users pass e.g. "results\file.json"
    if "\\" in export_path and ":" not in export_path:
        export_path = export_path.replace("\\", "/")
    path = pathlib.Path(export_path)
    # Resolve relative paths to the repository root so results/ always lands at repo root
    if not path.is_absolute():
        path = _repo_root() / path
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(_build_export_payload(result), f, indent=2)
    return path
