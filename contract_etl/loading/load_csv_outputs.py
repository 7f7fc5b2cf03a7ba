"""
Contract CSV Bulk Loader
========================
Streams the hotel_inventory / hotel_rates CSV files produced by the
contract processor into existing PostgreSQL tables with COPY.

Only the load itself lives here. Creating the tables and deriving
cheapest-price rows are handled elsewhere.

Usage:
    db = DatabaseManager('config/db_config.yml')
    summary = CsvOutputLoader(db).load('downloads/csv_output', truncate=True)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..db_utils import DatabaseManager
from ..parsing.records import STREAM_COLUMNS

logger = logging.getLogger(__name__)

LOAD_ORDER = ('hotel_inventory', 'hotel_rates')


@dataclass
class CsvLoadSummary:
    """Summary statistics from a CSV load"""
    rows_by_table: Dict[str, int] = field(default_factory=dict)
    tables_skipped: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def rows_loaded(self) -> int:
        return sum(self.rows_by_table.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            'rows_loaded': self.rows_loaded,
            'rows_by_table': self.rows_by_table,
            'tables_skipped': self.tables_skipped,
            'errors': self.errors
        }


class CsvOutputLoader:
    """
    Loads contract CSV output into the database.

    Process (per table):
    1. Skip if the CSV is missing or holds only a header
    2. Skip if the target table does not exist
    3. Optionally TRUNCATE the table
    4. COPY the file (header row skipped by PostgreSQL)
    """

    def __init__(self, db_manager: DatabaseManager, tables: Optional[Sequence[str]] = None):
        self.db_manager = db_manager
        self.tables = tuple(tables) if tables else LOAD_ORDER
        unknown = [t for t in self.tables if t not in STREAM_COLUMNS]
        if unknown:
            raise ValueError(f"Unknown output tables: {unknown}")

    def load(self, output_dir: str, truncate: bool = False) -> CsvLoadSummary:
        """
        Load every configured table from output_dir

        Args:
            output_dir: Directory holding <table>.csv files
            truncate: Empty each table before loading

        Returns:
            CsvLoadSummary; a failing table is recorded and the rest continue
        """
        summary = CsvLoadSummary()
        output_path = Path(output_dir)

        for table_name in self.tables:
            csv_path = output_path / f"{table_name}.csv"

            if not _has_data_rows(csv_path):
                logger.info(f"Skipping {table_name} (no data in {csv_path})")
                summary.tables_skipped.append(table_name)
                continue

            try:
                if not self.db_manager.table_exists(table_name):
                    logger.warning(f"Skipping {table_name}: table does not exist")
                    summary.tables_skipped.append(table_name)
                    continue

                summary.rows_by_table[table_name] = self.load_table(table_name, csv_path, truncate)
            except Exception as e:
                logger.error(f"Failed to load {table_name}: {e}")
                summary.errors.append(f"{table_name}: {e}")

        return summary

    def load_table(self, table_name: str, csv_path: Path, truncate: bool = False) -> int:
        """COPY one CSV file into its table and return the row count"""
        if truncate:
            logger.info(f"Truncating {table_name}")
            self.db_manager.execute_statement(f"TRUNCATE TABLE {table_name}")

        logger.info(f"Loading {table_name} from {csv_path}")
        with open(csv_path, 'r', encoding='utf-8', newline='') as f:
            return self.db_manager.bulk_insert_copy(
                table_name,
                list(STREAM_COLUMNS[table_name]),
                f,
                header=True
            )


def _has_data_rows(csv_path: Path) -> bool:
    """True if the file exists and has at least one row after the header"""
    if not csv_path.exists() or csv_path.stat().st_size == 0:
        return False
    with open(csv_path, 'r', encoding='utf-8') as f:
        f.readline()
        return bool(f.readline())


def load_csv_outputs(
    db_manager: DatabaseManager,
    output_dir: str,
    truncate: bool = False
) -> Dict[str, Any]:
    """
    Convenience function to load both contract CSVs

    Returns:
        Summary dictionary
    """
    return CsvOutputLoader(db_manager).load(output_dir, truncate=truncate).to_dict()
