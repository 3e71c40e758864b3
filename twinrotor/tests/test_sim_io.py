#!/usr/bin/env python3
"""
Output Collaborator Tests
出力のテスト
"""

import io
import threading

import numpy as np
import pytest

from twinrotor.core import SimConfig, Simulation, StateRecord
from twinrotor.interfaces import (
    TextPrinter,
    CsvLogger,
    load_output_csv,
    TrajectoryRecorder,
    QueuedOutput,
)


SHORT = SimConfig(step_size=1e-4, end_time=0.002)


def make_record(t=0.5):
    return StateRecord(
        time=t, current_right=20.1, current_left=19.9,
        rpm_right=14460.0, rpm_left=14320.5, rate=0.61, attitude=0.075,
    )


# =============================================================================
# Text
# =============================================================================

def test_text_printer_format():
    """Test 1: seven %11.8f columns separated by spaces"""
    stream = io.StringIO()
    TextPrinter(stream)(make_record())

    line = stream.getvalue()
    assert line.endswith("\n")
    cols = line.split()
    assert len(cols) == 7
    assert cols[0] == "0.50000000"
    assert cols[3] == "14460.00000000"
    assert line.startswith(" 0.50000000 20.10000000")


def test_text_printer_full_run():
    """Test 2: one line per record including t=0"""
    stream = io.StringIO()
    steps = Simulation(SHORT).run(TextPrinter(stream))
    lines = stream.getvalue().splitlines()
    assert len(lines) == steps + 1
    assert [float(x) for x in lines[0].split()] == [0.0] * 7


# =============================================================================
# CSV
# =============================================================================

def test_csv_round_trip_with_metadata(tmp_path):
    """Test 3: CsvLogger output loads back with metadata"""
    path = tmp_path / "out.csv"
    recorder = TrajectoryRecorder()

    with CsvLogger(path, metadata={"step_size": SHORT.step_size, "simulator": "twinrotor"}) as log:
        def both(record):
            log(record)
            recorder(record)
        steps = Simulation(SHORT).run(both)
        assert log.record_count == steps + 1

    records, metadata = load_output_csv(path)

    assert metadata == {"step_size": str(SHORT.step_size), "simulator": "twinrotor"}
    assert len(records) == steps + 1
    loaded = np.array([r.as_tuple() for r in records])
    assert np.allclose(loaded, recorder.to_array(), rtol=0.0, atol=1e-8)


def test_csv_header(tmp_path):
    """Test 4: header row lists the seven fields"""
    path = tmp_path / "out.csv"
    with CsvLogger(path) as log:
        log(make_record())
    first = path.read_text().splitlines()[0]
    assert first == "time,current_right,current_left,rpm_right,rpm_left,rate,attitude"


def test_csv_stream_left_open():
    """Test 5: a caller-owned stream is not closed"""
    stream = io.StringIO()
    with CsvLogger(stream=stream) as log:
        log(make_record())
    assert not stream.closed
    assert len(stream.getvalue().splitlines()) == 2


def test_csv_write_before_open(tmp_path):
    """Test 6: writing to an unopened logger raises RuntimeError"""
    log = CsvLogger(tmp_path / "x.csv")
    with pytest.raises(RuntimeError):
        log(make_record())


def test_csv_requires_one_target(tmp_path):
    """Test 7: exactly one of filepath / stream"""
    with pytest.raises(ValueError):
        CsvLogger()
    with pytest.raises(ValueError):
        CsvLogger(tmp_path / "x.csv", stream=io.StringIO())


def test_load_csv_missing_column(tmp_path):
    """Test 8: files without the expected columns are rejected"""
    path = tmp_path / "bad.csv"
    path.write_text("time,x\n0.0,1.0\n")
    with pytest.raises(ValueError):
        load_output_csv(path)


# =============================================================================
# Recorder
# =============================================================================

def test_recorder_array_and_columns():
    """Test 9: to_array() is (N, 7); column() selects by name"""
    rec = TrajectoryRecorder()
    assert rec.to_array().shape == (0, 7)

    steps = Simulation(SHORT).run(rec)
    arr = rec.to_array()
    assert arr.shape == (steps + 1, 7)
    assert np.array_equal(arr[:, 6], rec.column("attitude"))

    with pytest.raises(KeyError):
        rec.column("altitude")


# =============================================================================
# Queued output
# =============================================================================

def test_queued_output_preserves_order():
    """Test 10: records reach the wrapped sink in order on another thread"""
    direct = TrajectoryRecorder()
    Simulation(SHORT).run(direct)

    received = []
    threads = set()

    def sink(record):
        threads.add(threading.get_ident())
        received.append(record)

    with QueuedOutput(sink, maxsize=4) as out:
        Simulation(SHORT).run(out)

    assert received == direct.records
    assert threading.get_ident() not in threads


def test_queued_output_not_started():
    """Test 11: enqueueing before start() raises RuntimeError"""
    with pytest.raises(RuntimeError):
        QueuedOutput(lambda r: None)(make_record())


def test_queued_output_reraises_sink_error():
    """Test 12: an exception in the sink surfaces on stop()"""
    def failing(record):
        raise ValueError("disk full")

    out = QueuedOutput(failing)
    out.start()
    out(make_record())
    out(make_record(0.6))
    with pytest.raises(ValueError, match="disk full"):
        out.stop()


def test_queued_output_keeps_inflight_exception():
    """Test 13: a sink error does not replace an exception raised in the with-block"""
    def failing(record):
        raise ValueError("disk full")

    with pytest.raises(RuntimeError, match="integration failed"):
        with QueuedOutput(failing) as out:
            out(make_record())
            raise RuntimeError("integration failed")


def test_csv_open_twice_raises(tmp_path):
    """Test 14: a second open() is rejected, the first file stays usable"""
    path = tmp_path / "twice.csv"
    with CsvLogger(path) as log:
        with pytest.raises(RuntimeError):
            log.open()
        log(make_record())

    records, _ = load_output_csv(path)
    assert records == [make_record()]
