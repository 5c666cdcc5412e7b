from __future__ import annotations

import threading
from pathlib import Path
from typing import IO, List, Optional


class BatchRunReport:
    """
    Log and counters for one batch run.

    Every line goes to stdout and, when a log file is given, to that file
    (flushed per line so progress can be followed live). Use it as a context
    manager so the file is closed on every exit path:

        with BatchRunReport(log_path) as report:
            await run_batch(paths, report, extractor)
    """

    def __init__(self, log_path: Optional[str | Path] = None, echo: bool = True):
        self.log_path = Path(log_path) if log_path else None
        self.echo = echo
        self.lines: List[str] = []
        self.success_count = 0
        self.failure_count = 0
        self.warning_count = 0
        self.total_files = 0
        self._stream: Optional[IO[str]] = None
        self._lock = threading.Lock()

    def open(self) -> "BatchRunReport":
        if self.log_path is not None and self._stream is None:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            self._stream = self.log_path.open("w", encoding="utf-8")
        return self

    def close(self) -> None:
        with self._lock:
            if self._stream is not None:
                self._stream.flush()
                self._stream.close()
                self._stream = None

    def __enter__(self) -> "BatchRunReport":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def log(self, message: str) -> None:
        # One lock per line: concurrent documents never interleave partial writes.
        with self._lock:
            self.lines.append(message)
            if self.echo:
                print(message)
            if self._stream is not None:
                self._stream.write(f"{message}\n")
                self._stream.flush()

    def record_success(self) -> None:
        with self._lock:
            self.success_count += 1

    def record_failure(self) -> None:
        with self._lock:
            self.failure_count += 1

    def record_warning(self) -> None:
        with self._lock:
            self.warning_count += 1

    @property
    def accounted_files(self) -> int:
        return self.success_count + self.failure_count + self.warning_count

    def summary(self) -> List[str]:
        return [
            "",
            "--- Batch Processing Complete ---",
            f"🟢 Successful exports: {self.success_count}",
            f"🟡 No BOM items found: {self.warning_count}",
            f"🔴 Failed files: {self.failure_count}",
            "---------------------------------",
        ]

    def finalize(self) -> None:
        for line in self.summary():
            self.log(line)
