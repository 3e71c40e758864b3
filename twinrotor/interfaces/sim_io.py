# MIT License
#
# Copyright (c) 2025 Kouhei Ito
#
# Permission is hereby granted, free of charge, to any person obtaining a copy
# of this software and associated documentation files (the "Software"), to deal
# in the Software without restriction, including without limitation the rights
# to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
# copies of the Software, and to permit persons to whom the Software is
# furnished to do so, subject to the following conditions:

# The above copyright notice and this permission notice shall be included in all
# copies or substantial portions of the Software.

# THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
# IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
# FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
# AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
# LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
# OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
# SOFTWARE.

"""
sim_io.py - Simulation output collaborators
シミュレーション出力

Every sink is a callable taking a StateRecord, so any of them can be
passed to Simulation.run().
すべての出力先は StateRecord を受け取る呼び出し可能オブジェクト。

Text format (one line per record, 7 columns, %11.8f):
  time current_R current_L rpm_R rpm_L q theta

CSV format:
  # key: value            (optional metadata)
  time,current_right,current_left,rpm_right,rpm_left,rate,attitude
  0.000000000,0.000000000,...
"""

import csv
import queue
import sys
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO, Tuple, Union

import numpy as np

from ..core.state import StateRecord


# =============================================================================
# Text Output
# =============================================================================

class TextPrinter:
    """
    Print records as fixed-width text columns.
    レコードを固定幅テキストで出力
    """

    def __init__(self, stream: Optional[TextIO] = None, fmt: str = "%11.8f"):
        self.stream = stream if stream is not None else sys.stdout
        self.fmt = fmt

    def format(self, record: StateRecord) -> str:
        return " ".join(self.fmt % value for value in record.as_tuple())

    def __call__(self, record: StateRecord) -> None:
        self.stream.write(self.format(record) + "\n")


# =============================================================================
# CSV Output
# =============================================================================

class CsvLogger:
    """
    Write records to a CSV file.
    レコードをCSVファイルに書き込み

    Usage:
        with CsvLogger("out.csv", metadata={"step_size": 1e-4}) as log:
            sim.run(log)

    Pass stream= instead of a path to write to an already open text
    stream (e.g. sys.stdout); the stream is left open on close().
    """

    def __init__(
        self,
        filepath: Optional[Union[str, Path]] = None,
        metadata: Optional[dict] = None,
        precision: int = 9,
        stream: Optional[TextIO] = None,
    ):
        if (filepath is None) == (stream is None):
            raise ValueError("Give exactly one of filepath or stream")
        self.filepath = Path(filepath) if filepath is not None else None
        self.stream = stream
        self.metadata = metadata or {}
        self.precision = precision
        self._file: Optional[TextIO] = None
        self._writer = None
        self._record_count = 0

    def open(self):
        """Open file and write metadata + header / ファイルを開きヘッダを書き込み"""
        if self._file is not None:
            raise RuntimeError("Logger already opened")
        if self.stream is not None:
            self._file = self.stream
        else:
            self._file = open(self.filepath, 'w', newline='')
        for key, value in self.metadata.items():
            self._file.write(f"# {key}: {value}\n")
        self._writer = csv.writer(self._file)
        self._writer.writerow(StateRecord.FIELDS)
        self._record_count = 0

    def write(self, record: StateRecord):
        if self._file is None:
            raise RuntimeError("Logger not opened")
        self._writer.writerow([f"{value:.{self.precision}f}" for value in record.as_tuple()])
        self._record_count += 1

    __call__ = write

    def close(self):
        if self._file is not None:
            if self._file is not self.stream:
                self._file.close()
            self._file = None
            self._writer = None

    @property
    def record_count(self) -> int:
        """Number of records written / 書き込まれたレコード数"""
        return self._record_count

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def load_output_csv(filepath: Union[str, Path]) -> Tuple[List[StateRecord], Dict[str, str]]:
    """
    Load records from CSV.
    CSVからレコードを読み込み

    Returns:
        (records, metadata)
    """
    records = []
    metadata = {}

    with open(filepath, 'r') as f:
        for line in f:
            if line.startswith('#'):
                parts = line[1:].strip().split(': ', 1)
                if len(parts) == 2:
                    metadata[parts[0].strip()] = parts[1].strip()
            else:
                break

    with open(filepath, 'r') as f:
        reader = csv.DictReader(line for line in f if not line.startswith('#'))
        missing = set(StateRecord.FIELDS) - set(reader.fieldnames or ())
        if missing:
            raise ValueError(f"Missing columns in {filepath}: {', '.join(sorted(missing))}")
        for row in reader:
            records.append(StateRecord(**{name: float(row[name]) for name in StateRecord.FIELDS}))

    return records, metadata


# =============================================================================
# In-memory Recorder
# =============================================================================

class TrajectoryRecorder:
    """
    Keep every record in memory.
    全レコードをメモリに保持
    """

    def __init__(self):
        self.records: List[StateRecord] = []

    def __call__(self, record: StateRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def to_array(self) -> np.ndarray:
        """(N, 7) array in StateRecord.FIELDS column order"""
        if not self.records:
            return np.zeros((0, len(StateRecord.FIELDS)))
        return np.array([r.as_tuple() for r in self.records])

    def column(self, name: str) -> np.ndarray:
        """One column by field name / フィールド名で1列を取得"""
        if name not in StateRecord.FIELDS:
            raise KeyError(name)
        return np.array([getattr(r, name) for r in self.records])


# =============================================================================
# Queued Output
# =============================================================================

class QueuedOutput:
    """
    Forward records to another sink from a worker thread.
    ワーカースレッドから別の出力先へレコードを転送

    The simulation only enqueues; a bounded queue applies back-pressure
    when the sink falls behind. Records are immutable, so handing them to
    another thread does not affect the integration.
    シミュレーション側はキューに積むだけ。

    Usage:
        with QueuedOutput(TextPrinter()) as out:
            sim.run(out)
    """

    _STOP = object()

    def __init__(self, sink: Callable[[StateRecord], None], maxsize: int = 1024):
        self.sink = sink
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None

    def start(self):
        """Start worker thread / ワーカースレッドを開始"""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._worker, name="twinrotor-output", daemon=True)
        self._thread.start()

    def _worker(self):
        while True:
            item = self._queue.get()
            if item is self._STOP:
                break
            if self._error is None:
                try:
                    self.sink(item)
                except Exception as e:
                    self._error = e

    def __call__(self, record: StateRecord) -> None:
        if self._thread is None:
            raise RuntimeError("QueuedOutput not started")
        self._queue.put(record)

    def stop(self, reraise: bool = True):
        """
        Flush the queue and stop the worker.
        キューを排出してワーカーを停止

        Args:
            reraise: Re-raise an exception from the wrapped sink

        Raises:
            Exception raised by the wrapped sink, if any
        """
        if self._thread is None:
            return
        self._queue.put(self._STOP)
        self._thread.join()
        self._thread = None
        error, self._error = self._error, None
        if error is not None and reraise:
            raise error

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # An exception already in flight wins over a sink error
        self.stop(reraise=exc_type is None)
        return False
