"""Tick log export for the vacuum cleaning simulation."""

import csv
from pathlib import Path
from typing import IO, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..model.state import SimulationState


TICK_FIELDS = ['step', 'strategy', 'action', 'moved', 'x', 'y',
               'remaining_dirt', 'outcome']
METRIC_FIELDS = ['cleaned', 'coverage', 'no_op_streak']


class CSVWriter:
    """
    Appends one row per tick to a CSV file.

    Output format:
        step,strategy,action,moved,x,y,remaining_dirt,outcome,cleaned,coverage,no_op_streak
        1,waterfall,E,1,1,0,4,,1,0.04,0
        ...

    Rows are flushed every `flush_every` ticks and on close, so a run that is
    interrupted still leaves a readable log.
    """

    def __init__(self, output_path: Path, flush_every: int = 1):
        self.output_path = Path(output_path)
        self.flush_every = max(1, flush_every)
        self.fieldnames: List[str] = TICK_FIELDS + METRIC_FIELDS
        self.rows_written = 0
        self._file: Optional[IO[str]] = None
        self._writer: Optional[csv.DictWriter] = None

    @property
    def is_open(self) -> bool:
        return self._file is not None

    def open(self) -> None:
        """Create the file (and parent directories) and write the header."""
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self.output_path, 'w', newline='')
        self._writer = csv.DictWriter(self._file, fieldnames=self.fieldnames)
        self._writer.writeheader()
        self.rows_written = 0

    def append(self, state: "SimulationState") -> None:
        if not self.is_open:
            self.open()
        for row in state.to_csv_rows():
            for name in METRIC_FIELDS:
                value = state.metrics.get(name, 0)
                row[name] = round(value, 4) if isinstance(value, float) else value
            self._writer.writerow(row)
            self.rows_written += 1
        if self.rows_written % self.flush_every == 0:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
        self._file = None
        self._writer = None

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
