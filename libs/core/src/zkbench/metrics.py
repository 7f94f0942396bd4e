
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

"""Timing result containers returned by the executor and used for export."""


@dataclass
class StageStats:
    stage: str  # 'compile', 'setup', 'prove' or 'verify'
    runs: int
    total_ns: int
    mean_ns: float
    series_ns: List[int] = field(default_factory=list)
    profile_artifact: Optional[str] = None

    @property
    def mean_ms(self) -> float:
        return self.mean_ns / 1e6

    @classmethod
    def from_series(cls, stage: str, series_ns: List[int], profile_artifact: Optional[str] = None) -> "StageStats":
        total = sum(series_ns)
        return cls(
            stage=stage,
            runs=len(series_ns),
            total_ns=total,
            mean_ns=total / len(series_ns),
            series_ns=list(series_ns),
            profile_artifact=profile_artifact,
        )


@dataclass
class BenchmarkResult:
    system: str
    config: Dict[str, Any]
    stats: StageStats
    meta: Dict[str, Any] = field(default_factory=dict)
