
from __future__ import annotations
"""Scoped profiling sessions wrapped around the timed benchmark loop.

`acquire(kind)` returns a context manager. Entering it starts capture; leaving
it (normally or through an exception) stops capture and flushes the artifact
exactly once. `ProfileKind.NONE` yields a session with the same interface whose
start/stop do nothing, so callers never branch on whether profiling is on.

Artifacts land in `output_dir` (or a fresh `profile*` temp directory):
- cpu   -> cpu.pprof   (cProfile stats, readable with `pstats`)
- mem   -> mem.pprof   (tracemalloc snapshot, `tracemalloc.Snapshot.load`)
- trace -> trace.json  (Chrome trace-event JSON of Python call/return events)

The underlying mechanisms are process-wide and not reentrant; starting a second
session of the same kind raises `ProfileError`.
"""

import cProfile
import json
import logging
import os
import pathlib
import pstats
import sys
import tempfile
import threading
import time
import tracemalloc
from enum import Enum
from typing import Any, Dict, Optional, TextIO, Type

import psutil

from .errors import ProfileError

log = logging.getLogger(__name__)


class ProfileKind(str, Enum):
    NONE = "none"
    TRACE = "trace"
    CPU = "cpu"
    MEM = "mem"


class ProfileSession:
    """Base session: owns the start/stop lifecycle and the release count."""

    kind = ProfileKind.NONE
    filename: Optional[str] = None

    def __init__(self, output_dir: str | os.PathLike[str] | None = None) -> None:
        self._output_dir = output_dir
        self.artifact: Optional[pathlib.Path] = None
        self.release_count = 0

    @property
    def released(self) -> bool:
        return self.release_count > 0

    def __enter__(self) -> "ProfileSession":
        try:
            if self.filename:
                self.artifact = self._artifact_path()
            self._start()
        except BaseException as exc:
            # Give back whatever was acquired before the failure.
            try:
                self._release()
            except ProfileError:
                log.debug("cleanup after failed %s start also failed", self.kind.value, exc_info=True)
            if isinstance(exc, ProfileError) or not isinstance(exc, Exception):
                raise
            raise ProfileError(self.kind, f"failed to start {self.kind.value} profile: {exc}") from exc
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> bool:
        self._release()
        return False

    def _release(self) -> None:
        if self.release_count:
            return
        self.release_count += 1
        try:
            self._stop()
        except ProfileError:
            raise
        except Exception as err:
            raise ProfileError(self.kind, f"failed to stop {self.kind.value} profile: {err}") from err
        if self.artifact is not None and self.artifact.exists():
            log.info("profile: %s profiling disabled, %s", self.kind.value, self.artifact)

    def _artifact_path(self) -> pathlib.Path:
        if self._output_dir:
            directory = pathlib.Path(self._output_dir)
            directory.mkdir(parents=True, exist_ok=True)
        else:
            directory = pathlib.Path(tempfile.mkdtemp(prefix="profile"))
        return directory / str(self.filename)

    def _start(self) -> None:
        pass

    def _stop(self) -> None:
        pass


class NoProfile(ProfileSession):
    kind = ProfileKind.NONE


class CPUProfile(ProfileSession):
    kind = ProfileKind.CPU
    filename = "cpu.pprof"

    def __init__(self, output_dir: str | os.PathLike[str] | None = None) -> None:
        super().__init__(output_dir)
        self._profiler: Optional[cProfile.Profile] = None

    def _start(self) -> None:
        profiler = cProfile.Profile()
        try:
            profiler.enable()
        except ValueError as exc:
            # Raised when another profiler is already attached.
            raise ProfileError(self.kind, f"cpu profiler unavailable: {exc}") from exc
        self._profiler = profiler
        log.info("profile: cpu profiling enabled, %s", self.artifact)

    def _stop(self) -> None:
        if self._profiler is None:
            return
        profiler, self._profiler = self._profiler, None
        profiler.disable()
        stats = pstats.Stats(profiler)
        stats.dump_stats(str(self.artifact))


class MemProfile(ProfileSession):
    kind = ProfileKind.MEM
    filename = "mem.pprof"

    def __init__(self, output_dir: str | os.PathLike[str] | None = None) -> None:
        super().__init__(output_dir)
        self._tracing = False
        self._rss_before: Optional[int] = None
        self.peak_kb: Optional[float] = None
        self.rss_delta_kb: Optional[float] = None

    def _start(self) -> None:
        if tracemalloc.is_tracing():
            raise ProfileError(self.kind, "tracemalloc is already tracing; mem profiling is not reentrant")
        self._rss_before = psutil.Process(os.getpid()).memory_info().rss
        tracemalloc.start()
        self._tracing = True
        log.info("profile: mem profiling enabled, %s", self.artifact)

    def _stop(self) -> None:
        if not self._tracing:
            return
        self._tracing = False
        try:
            snapshot = tracemalloc.take_snapshot()
            _, peak_bytes = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()
        self.peak_kb = peak_bytes / 1024.0
        if self._rss_before is not None:
            rss_after = psutil.Process(os.getpid()).memory_info().rss
            self.rss_delta_kb = max(0, rss_after - self._rss_before) / 1024.0
        log.info("profile: python heap peak %.1f KB, rss delta %s KB", self.peak_kb, self.rss_delta_kb)
        snapshot.dump(str(self.artifact))


class TraceProfile(ProfileSession):
    """Streams Chrome trace events to the artifact while the hook is installed.

    Events are written as they arrive, so memory stays flat however many
    calls the traced stage makes; only the file grows.
    """

    kind = ProfileKind.TRACE
    filename = "trace.json"

    def __init__(self, output_dir: str | os.PathLike[str] | None = None) -> None:
        super().__init__(output_dir)
        self._out: Optional[TextIO] = None
        self.event_count = 0

    def _start(self) -> None:
        if sys.getprofile() is not None:
            raise ProfileError(self.kind, "a profile hook is already installed; trace is not reentrant")
        out = open(self.artifact, "w", encoding="utf-8")  # type: ignore[arg-type]
        out.write('{"displayTimeUnit": "ns", "traceEvents": [\n')
        self._out = out
        self.event_count = 0
        pid = os.getpid()
        tid = threading.get_ident()
        clock = time.perf_counter_ns
        t0 = clock()
        dumps = json.dumps

        def _hook(frame: Any, event: str, arg: Any) -> None:
            if event == "call" or event == "return":
                code = frame.f_code
                name = getattr(code, "co_qualname", code.co_name)
                cat = "python"
            elif event == "c_call" or event == "c_return":
                name = getattr(arg, "__qualname__", None) or getattr(arg, "__name__", repr(arg))
                cat = "builtin"
            else:
                return
            record = dumps({
                "name": name,
                "cat": cat,
                "ph": "B" if event.endswith("call") else "E",
                "ts": (clock() - t0) / 1000.0,
                "pid": pid,
                "tid": tid,
            })
            out.write(",\n" + record if self.event_count else record)
            self.event_count += 1

        sys.setprofile(_hook)
        log.info("profile: trace enabled, %s", self.artifact)

    def _stop(self) -> None:
        if self._out is None:
            return
        sys.setprofile(None)
        out, self._out = self._out, None
        try:
            out.write("\n]}\n")
        finally:
            out.close()
        log.debug("profile: wrote %d trace events", self.event_count)


_SESSIONS: Dict[ProfileKind, Type[ProfileSession]] = {
    ProfileKind.NONE: NoProfile,
    ProfileKind.TRACE: TraceProfile,
    ProfileKind.CPU: CPUProfile,
    ProfileKind.MEM: MemProfile,
}


def acquire(kind: ProfileKind, output_dir: str | os.PathLike[str] | None = None) -> ProfileSession:
    """Return an un-entered session for `kind`; use it as a context manager."""
    return _SESSIONS[kind](output_dir)
