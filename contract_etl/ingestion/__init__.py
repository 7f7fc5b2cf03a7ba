"""
Hotel Contracts ETL - Ingestion Module
Discovers contract files and drives them through parsing into CSV output
"""

from .process_contracts import (
    BatchRunContext,
    BatchSummary,
    ContractBatchProcessor,
    ContractDiscoveryError,
    FileOutcome,
    discover_contract_files,
    find_cache_directory,
    process_contract_file,
    resolve_input_root,
)

__all__ = [
    'BatchRunContext',
    'BatchSummary',
    'ContractBatchProcessor',
    'ContractDiscoveryError',
    'FileOutcome',
    'discover_contract_files',
    'find_cache_directory',
    'process_contract_file',
    'resolve_input_root',
]
