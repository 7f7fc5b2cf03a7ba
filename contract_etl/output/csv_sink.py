"""
CSV Output Sinks
================
Row streams for decoded contract records.

Each sink owns one CSV file for the whole batch run:
- open() truncates the destination and writes the header row
- write() appends one record in fixed column order
- close() flushes and releases the file

Rows are written as they arrive, so memory stays flat no matter how many
records a run produces.
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..parsing.records import (
    INVENTORY_COLUMNS,
    INVENTORY_STREAM,
    RATE_COLUMNS,
    RATES_STREAM,
)

logger = logging.getLogger(__name__)


def format_value(value: Any) -> Any:
    """Render integral floats without a fractional part (12.0 -> '12')"""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, float):
        return repr(value)
    return value


class CsvSink:
    """A single CSV output stream"""

    def __init__(self, table_name: str, columns: Sequence[str]):
        self.table_name = table_name
        self.columns = tuple(columns)
        self.file_path: Optional[Path] = None
        self.count = 0
        self._handle = None
        self._writer = None

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self, destination: Path) -> None:
        """
        Open (and truncate) the destination file

        Args:
            destination: CSV file path; parent directories are created
        """
        if self.is_open:
            raise RuntimeError(f"Sink {self.table_name} is already open")

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

        self._handle = open(destination, 'w', newline='', encoding='utf-8')
        self._writer = csv.writer(self._handle, quoting=csv.QUOTE_MINIMAL, lineterminator='\n')
        self._writer.writerow(self.columns)
        self.file_path = destination
        self.count = 0
        logger.debug(f"Opened sink {self.table_name}: {destination}")

    def write(self, record) -> None:
        """Append one record (anything exposing to_row())"""
        self.write_row(record.to_row())

    def write_row(self, row: Sequence[Any]) -> None:
        """Append one already-ordered row"""
        if not self.is_open:
            raise RuntimeError(f"Sink {self.table_name} is not open")
        if len(row) != len(self.columns):
            raise ValueError(
                f"Row for {self.table_name} has {len(row)} values, expected {len(self.columns)}"
            )
        self._writer.writerow([format_value(value) for value in row])
        self.count += 1

    def close(self) -> None:
        """Flush and release the destination"""
        if not self.is_open:
            return
        self._handle.flush()
        self._handle.close()
        self._handle = None
        self._writer = None
        logger.debug(f"Closed sink {self.table_name}: {self.count} rows")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class SinkSet:
    """
    The two output streams of a run (hotel_inventory, hotel_rates)

    Usage:
        with SinkSet(output_dir) as sinks:
            sinks.write(stream, record)
        summary = sinks.summary()
    """

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)
        self.sinks: Dict[str, CsvSink] = {
            INVENTORY_STREAM: CsvSink(INVENTORY_STREAM, INVENTORY_COLUMNS),
            RATES_STREAM: CsvSink(RATES_STREAM, RATE_COLUMNS),
        }

    def open(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        for table_name, sink in self.sinks.items():
            sink.open(self.output_dir / f"{table_name}.csv")
        logger.info(f"Output sinks opened in {self.output_dir}")

    def write(self, stream: str, record) -> None:
        self.sinks[stream].write(record)

    def write_rows(self, stream: str, rows: Iterable[Sequence[Any]]) -> None:
        sink = self.sinks[stream]
        for row in rows:
            sink.write_row(row)

    def close(self) -> None:
        for sink in self.sinks.values():
            sink.close()

    def counts(self) -> Dict[str, int]:
        return {table_name: sink.count for table_name, sink in self.sinks.items()}

    def summary(self) -> Dict[str, Dict[str, Any]]:
        """
        Per-stream row counts and file sizes

        Returns:
            {table_name: {'records', 'file_size_mb', 'file_path'}}
        """
        summary = {}
        empty_tables: List[str] = []

        for table_name, sink in self.sinks.items():
            size_mb = 0.0
            if sink.file_path is not None and sink.file_path.exists():
                size_mb = sink.file_path.stat().st_size / 1024 / 1024
            summary[table_name] = {
                'records': sink.count,
                'file_size_mb': round(size_mb, 2),
                'file_path': str(sink.file_path) if sink.file_path else None,
            }
            if sink.count == 0:
                empty_tables.append(table_name)

        if empty_tables:
            logger.warning(f"Empty output tables (no matching sections in source files): {', '.join(empty_tables)}")

        return summary

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
