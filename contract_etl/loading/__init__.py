"""
Hotel Contracts ETL - Loading Module
COPY-based load of the contract CSV output into PostgreSQL
"""

from .load_csv_outputs import (
    CsvLoadSummary,
    CsvOutputLoader,
    load_csv_outputs,
)

__all__ = [
    'CsvLoadSummary',
    'CsvOutputLoader',
    'load_csv_outputs',
]
