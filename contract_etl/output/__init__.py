"""
Hotel Contracts ETL - Output Module
CSV row streams consumed by the downstream bulk loader
"""

from .csv_sink import CsvSink, SinkSet, format_value

__all__ = [
    'CsvSink',
    'SinkSet',
    'format_value',
]
