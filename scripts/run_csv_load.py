#!/usr/bin/env python
"""
Hotel Contracts ETL - CSV Bulk Load Script
==========================================
Loads hotel_inventory.csv / hotel_rates.csv into PostgreSQL via COPY.

Usage:
    python scripts/run_csv_load.py
    python scripts/run_csv_load.py --csv-dir downloads/csv_output --truncate
    python scripts/run_csv_load.py --tables hotel_rates
"""

import sys
import argparse
import logging
from pathlib import Path
from datetime import datetime

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_etl.db_utils import DatabaseManager
from contract_etl.loading import CsvOutputLoader
from contract_etl.logging_config import setup_logging


def print_summary(result: dict, elapsed_seconds: float):
    """Print a formatted summary of the load results."""
    print()
    print("=" * 70)
    print("  CONTRACT CSV LOAD SUMMARY")
    print("=" * 70)
    print()
    print(f"    Rows loaded:         {result.get('rows_loaded', 0):,}")
    for table_name, count in result.get('rows_by_table', {}).items():
        print(f"      {table_name}: {count:,}")

    skipped = result.get('tables_skipped', [])
    if skipped:
        print(f"    Tables skipped:      {', '.join(skipped)}")

    errors = result.get('errors', [])
    if errors:
        print()
        print("  ERRORS:")
        for error in errors:
            print(f"    - {error}")

    print()
    print(f"  ELAPSED TIME: {elapsed_seconds:.2f} seconds")
    print("=" * 70)
    print("  STATUS: COMPLETED WITH ERRORS" if errors else "  STATUS: SUCCESS")
    print("=" * 70)
    print()


def main(argv=None) -> int:
    """Main entry point for the CSV loader."""
    parser = argparse.ArgumentParser(description='Load contract CSV output into PostgreSQL')
    parser.add_argument(
        '--config',
        default='config/db_config.yml',
        help='Path to database configuration file (default: config/db_config.yml)'
    )
    parser.add_argument(
        '--csv-dir',
        default='downloads/csv_output',
        help='Directory holding the generated CSV files (default: downloads/csv_output)'
    )
    parser.add_argument(
        '--tables',
        nargs='+',
        choices=['hotel_inventory', 'hotel_rates'],
        help='Tables to load (default: both)'
    )
    parser.add_argument(
        '--truncate',
        action='store_true',
        help='Empty each table before loading'
    )
    parser.add_argument(
        '--log-level',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity level (default: INFO)'
    )

    args = parser.parse_args(argv)

    setup_logging(log_level=args.log_level)
    logger = logging.getLogger(__name__)

    if not Path(args.config).exists():
        logger.error(f"Configuration file not found: {args.config}")
        return 1

    start_time = datetime.now()

    try:
        db = DatabaseManager(args.config)
        try:
            summary = CsvOutputLoader(db, tables=args.tables).load(args.csv_dir, truncate=args.truncate)
        finally:
            db.close()
    except Exception as e:
        logger.error(f"FATAL ERROR: {e}", exc_info=True)
        return 1

    elapsed = (datetime.now() - start_time).total_seconds()
    result = summary.to_dict()
    print_summary(result, elapsed)

    return 0 if not result['errors'] else 1


if __name__ == "__main__":
    sys.exit(main())
