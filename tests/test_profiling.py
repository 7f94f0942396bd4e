from __future__ import annotations

import json
import pstats
import sys
import tracemalloc

import pytest

from zkbench import ProfileError, ProfileKind, acquire
from zkbench.profiling import NoProfile, ProfileSession


def _work() -> int:
    return sum(i * i for i in range(2000))


def test_none_session_is_a_noop():
    session = acquire(ProfileKind.NONE)
    assert isinstance(session, NoProfile)
    with session as entered:
        assert entered is session
        _work()
    assert session.release_count == 1
    assert session.artifact is None


@pytest.mark.parametrize("kind", list(ProfileKind))
def test_session_released_exactly_once_on_success(tmp_path, kind):
    session = acquire(kind, tmp_path)
    with session:
        _work()
    assert session.released
    assert session.release_count == 1
    session.__exit__(None, None, None)
    assert session.release_count == 1


@pytest.mark.parametrize("kind", list(ProfileKind))
def test_session_released_exactly_once_on_failure(tmp_path, kind):
    session = acquire(kind, tmp_path)
    with pytest.raises(RuntimeError, match="boom"):
        with session:
            _work()
            raise RuntimeError("boom")
    assert session.release_count == 1
    assert sys.getprofile() is None
    assert not tracemalloc.is_tracing()


def test_cpu_profile_writes_pstats_dump(tmp_path):
    with acquire(ProfileKind.CPU, tmp_path) as session:
        _work()
    assert session.artifact == tmp_path / "cpu.pprof"
    stats = pstats.Stats(str(session.artifact))
    assert stats.total_calls > 0


def test_mem_profile_writes_tracemalloc_snapshot(tmp_path):
    with acquire(ProfileKind.MEM, tmp_path) as session:
        blob = [bytes(64) for _ in range(1000)]
    assert blob
    assert session.artifact == tmp_path / "mem.pprof"
    snapshot = tracemalloc.Snapshot.load(str(session.artifact))
    assert snapshot.statistics("filename")
    assert session.peak_kb is not None and session.peak_kb > 0
    assert not tracemalloc.is_tracing()


def test_trace_profile_writes_chrome_trace(tmp_path):
    with acquire(ProfileKind.TRACE, tmp_path) as session:
        _work()
    assert session.artifact == tmp_path / "trace.json"
    data = json.loads(session.artifact.read_text(encoding="utf-8"))
    events = data["traceEvents"]
    assert any(e["name"].endswith("_work") and e["ph"] == "B" for e in events)
    assert sys.getprofile() is None


def _leaf(i: int) -> int:
    return i + 1


def test_trace_profile_streams_events_while_running(tmp_path):
    with acquire(ProfileKind.TRACE, tmp_path) as session:
        for i in range(500):
            _leaf(i)
        # Events beyond the write buffer are already on disk mid-session.
        assert session.artifact.stat().st_size > 0
    data = json.loads(session.artifact.read_text(encoding="utf-8"))
    calls = [e for e in data["traceEvents"] if e["name"] == "_leaf" and e["ph"] == "B"]
    assert len(calls) == 500
    assert session.event_count == len(data["traceEvents"])
    assert sys.getprofile() is None


def test_default_output_dir_is_a_fresh_temp_dir():
    with acquire(ProfileKind.MEM) as session:
        _work()
    assert session.artifact is not None
    assert session.artifact.parent.name.startswith("profile")
    assert session.artifact.exists()


def test_mem_profile_is_not_reentrant(tmp_path):
    tracemalloc.start()
    try:
        session = acquire(ProfileKind.MEM, tmp_path)
        with pytest.raises(ProfileError) as excinfo:
            with session:
                pytest.fail("body must not run when the profiler cannot start")
        assert excinfo.value.kind is ProfileKind.MEM
        assert session.release_count == 1
        # The pre-existing trace belongs to the caller and is left running.
        assert tracemalloc.is_tracing()
    finally:
        tracemalloc.stop()


def test_trace_profile_is_not_reentrant(tmp_path):
    def _other_hook(frame, event, arg):
        return None

    sys.setprofile(_other_hook)
    try:
        session = acquire(ProfileKind.TRACE, tmp_path)
        with pytest.raises(ProfileError):
            with session:
                pass
        assert session.release_count == 1
        assert sys.getprofile() is _other_hook
    finally:
        sys.setprofile(None)


class _FlakyStart(ProfileSession):
    kind = ProfileKind.CPU
    filename = "flaky.out"

    def __init__(self, output_dir=None):
        super().__init__(output_dir)
        self.stopped = 0

    def _start(self):
        raise OSError("device busy")

    def _stop(self):
        self.stopped += 1


def test_start_failure_is_wrapped_and_still_released(tmp_path):
    session = _FlakyStart(tmp_path)
    with pytest.raises(ProfileError, match="device busy") as excinfo:
        with session:
            pass
    assert isinstance(excinfo.value.__cause__, OSError)
    assert session.release_count == 1
    assert session.stopped == 1


class _FailingStop(ProfileSession):
    kind = ProfileKind.TRACE

    def _stop(self):
        raise OSError("disk full")


def test_stop_failure_surfaces_as_profile_error():
    session = _FailingStop()
    with pytest.raises(ProfileError, match="disk full"):
        with session:
            pass
    assert session.release_count == 1
