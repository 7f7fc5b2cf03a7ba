"""
Hotel Contracts ETL - Contract Batch Processor
==============================================
Turns a tree of vendor contract files into two CSV row streams
(hotel_inventory, hotel_rates).

Expected layout: {root}/{destination_dir}/{contract_file}
    root/D_PMI/ID_B2B_27#DBL_123456_20240101
    root/D_BCN/ID_B2B_31#STD_654321_20240101

Per file:
1. Size admission check (oversized files are skipped, not failed)
2. Hotel ID from the filename (no ID -> skipped, never failed)
3. Section splitting -> record decoding -> output sinks

A failing file is logged and counted; the batch always carries on.
Only a root directory that cannot be listed aborts the run.
"""

import logging
from collections import Counter
from concurrent.futures import FIRST_COMPLETED, ProcessPoolExecutor, wait
from concurrent.futures.process import BrokenProcessPool
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple

from ..config import ContractsConfig
from ..logging_config import setup_worker_logging
from ..output.csv_sink import SinkSet
from ..parsing.decoders import decode_section
from ..parsing.hotel_id import extract_hotel_id
from ..parsing.records import INVENTORY_STREAM, RATES_STREAM, ContractFile
from ..parsing.sections import iter_sections

logger = logging.getLogger(__name__)

STATUS_PROCESSED = 'PROCESSED'
STATUS_SKIPPED = 'SKIPPED'
STATUS_FAILED = 'FAILED'

SKIP_FILE_TOO_LARGE = 'FILE_TOO_LARGE'
SKIP_NO_HOTEL_ID = 'NO_HOTEL_ID'

FILE_ENCODING = 'utf-8'


class ContractDiscoveryError(Exception):
    """The contract root cannot be located or listed"""


# ============================================================================
# DISCOVERY
# ============================================================================

def find_cache_directory(downloads_dir: Path, cache_dir_prefix: str) -> Path:
    """
    Locate the vendor cache directory inside the downloads folder

    Args:
        downloads_dir: Folder holding downloaded cache extracts
        cache_dir_prefix: Name prefix of the cache directory

    Returns:
        Path of the first matching directory (sorted by name)
    """
    downloads_dir = Path(downloads_dir)
    if not downloads_dir.is_dir():
        raise ContractDiscoveryError(f"Downloads directory not found: {downloads_dir}")

    try:
        candidates = sorted(
            p for p in downloads_dir.iterdir()
            if p.is_dir() and p.name.startswith(cache_dir_prefix)
        )
    except OSError as e:
        raise ContractDiscoveryError(f"Cannot list downloads directory {downloads_dir}: {e}") from e
    if not candidates:
        raise ContractDiscoveryError(
            f"No cache directory found in {downloads_dir}. Looking for: {cache_dir_prefix}*"
        )

    logger.info(f"Found cache directory: {candidates[0].name}")
    return candidates[0]


def resolve_input_root(config: ContractsConfig) -> Path:
    """Return the directory holding the destination folders"""
    if config.input_root is not None:
        return Path(config.input_root)

    cache_dir = find_cache_directory(config.downloads_dir, config.cache_dir_prefix)
    return cache_dir / config.destinations_dir_name


def discover_contract_files(
    root: Path,
    destination_prefix: str = 'D_',
    contract_prefix: str = 'ID_B2B'
) -> List[ContractFile]:
    """
    Enumerate contract files under the destination folders

    Args:
        root: Directory holding one folder per destination
        destination_prefix: Name prefix of destination folders
        contract_prefix: Name prefix of contract files

    Returns:
        ContractFiles in (destination, filename) order

    Raises:
        ContractDiscoveryError: If the root itself cannot be listed
    """
    root = Path(root)
    if not root.is_dir():
        raise ContractDiscoveryError(f"Contract root not found or not a directory: {root}")

    try:
        destinations = sorted(
            p for p in root.iterdir()
            if p.is_dir() and p.name.startswith(destination_prefix)
        )
    except OSError as e:
        raise ContractDiscoveryError(f"Cannot list contract root {root}: {e}") from e

    logger.info(f"Found {len(destinations)} destination folders in {root}")

    contracts: List[ContractFile] = []
    folders_with_contracts = 0

    for destination in destinations:
        try:
            names = sorted(
                p.name for p in destination.iterdir()
                if p.name.startswith(contract_prefix) and p.is_file()
            )
        except OSError as e:
            logger.error(f"Cannot list destination folder {destination.name}: {e}")
            continue

        if not names:
            continue

        folders_with_contracts += 1
        logger.debug(f"{destination.name}: {len(names)} contract files")

        for name in names:
            contracts.append(ContractFile(
                path=destination / name,
                filename=name,
                destination=destination.name,
                hotel_id=extract_hotel_id(name),
            ))

    logger.info(f"Discovered {len(contracts)} contract files in {folders_with_contracts} destination folders")
    return contracts


# ============================================================================
# PER-FILE PROCESSING
# ============================================================================

@dataclass
class FileOutcome:
    """Result of pushing one contract file through the pipeline"""
    filename: str
    status: str
    hotel_id: Optional[int] = None
    skip_reason: Optional[str] = None
    error: Optional[str] = None
    rows_written: Dict[str, int] = field(default_factory=dict)
    # Only filled by pool workers; the parent process writes these
    buffered_rows: Dict[str, List[Tuple]] = field(default_factory=dict)


class RowBuffer:
    """In-memory stand-in for SinkSet used inside pool workers"""

    def __init__(self):
        self.rows: Dict[str, List[Tuple]] = {INVENTORY_STREAM: [], RATES_STREAM: []}

    def write(self, stream: str, record) -> None:
        self.rows[stream].append(record.to_row())


def process_contract_file(contract: ContractFile, sinks, max_file_size_bytes: int) -> FileOutcome:
    """
    Run one contract file through splitter, decoders and sinks

    Admission order is size first, then hotel ID. A file without a hotel
    ID is always skipped, even when it can no longer be stat'ed.

    Args:
        contract: Discovered contract file
        sinks: Anything with write(stream, record) (SinkSet or RowBuffer)
        max_file_size_bytes: Files above this size are skipped

    Returns:
        FileOutcome; errors are captured, never raised
    """
    outcome = FileOutcome(filename=contract.filename, status=STATUS_PROCESSED, hotel_id=contract.hotel_id)
    rows_written = Counter()

    try:
        size = contract.path.stat().st_size
    except OSError as e:
        if contract.hotel_id is not None:
            return _mark_failed(outcome, e)
        size = None

    if size is not None and size > max_file_size_bytes:
        logger.info(f"Skipping large file: {contract.filename} ({size / 1024 / 1024:.2f}MB)")
        outcome.status = STATUS_SKIPPED
        outcome.skip_reason = SKIP_FILE_TOO_LARGE
        return outcome

    if contract.hotel_id is None:
        logger.warning(f"Could not extract hotel ID from: {contract.filename}")
        outcome.status = STATUS_SKIPPED
        outcome.skip_reason = SKIP_NO_HOTEL_ID
        return outcome

    try:
        with open(contract.path, 'r', encoding=FILE_ENCODING, errors='replace', newline='') as f:
            for block in iter_sections(f):
                for stream, record in decode_section(block, contract.hotel_id):
                    sinks.write(stream, record)
                    rows_written[stream] += 1

    except Exception as e:
        _mark_failed(outcome, e)

    finally:
        outcome.rows_written = dict(rows_written)

    return outcome


def _mark_failed(outcome: FileOutcome, error: Exception) -> FileOutcome:
    logger.error(f"Failed to process {outcome.filename}: {error}")
    outcome.status = STATUS_FAILED
    outcome.error = str(error)
    return outcome


def _process_in_worker(contract: ContractFile, max_file_size_bytes: int) -> FileOutcome:
    """Pool entry point: decode into memory and hand rows back to the parent"""
    buffer = RowBuffer()
    outcome = process_contract_file(contract, buffer, max_file_size_bytes)
    outcome.buffered_rows = {stream: rows for stream, rows in buffer.rows.items() if rows}
    return outcome


# ============================================================================
# RUN CONTEXT & SUMMARY
# ============================================================================

@dataclass
class BatchSummary:
    """Final statistics of a batch run"""
    total_files: int = 0
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    skip_reasons: Dict[str, int] = field(default_factory=dict)
    rows_by_stream: Dict[str, int] = field(default_factory=dict)
    outputs: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    failed_files: List[str] = field(default_factory=list)
    elapsed_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_files': self.total_files,
            'processed': self.processed,
            'skipped': self.skipped,
            'failed': self.failed,
            'skip_reasons': self.skip_reasons,
            'rows_by_stream': self.rows_by_stream,
            'outputs': self.outputs,
            'failed_files': self.failed_files,
            'elapsed_seconds': self.elapsed_seconds,
        }


class BatchRunContext:
    """
    Counters for one batch run.

    Owned by the orchestrating process only; pool workers report back
    through FileOutcome and never touch these counters.
    """

    def __init__(self, total_files: int, progress_interval: int):
        self.total_files = total_files
        self.progress_interval = progress_interval
        self.started_at = datetime.now()
        self.seen = 0
        self.processed = 0
        self.skipped = 0
        self.failed = 0
        self.skip_reasons: Counter = Counter()
        self.failed_files: List[str] = []

    @property
    def elapsed_seconds(self) -> float:
        return (datetime.now() - self.started_at).total_seconds()

    def record(self, outcome: FileOutcome) -> None:
        self.seen += 1

        if outcome.status == STATUS_PROCESSED:
            self.processed += 1
        elif outcome.status == STATUS_SKIPPED:
            self.skipped += 1
            self.skip_reasons[outcome.skip_reason] += 1
        elif outcome.status == STATUS_FAILED:
            self.failed += 1
            self.failed_files.append(outcome.filename)

        if self.seen % self.progress_interval == 0:
            logger.info(
                f"Progress: {self.processed}/{self.total_files} files processed "
                f"({self.seen} seen, {self.elapsed_seconds:.1f}s)"
            )

    def to_summary(self, sinks: SinkSet) -> BatchSummary:
        return BatchSummary(
            total_files=self.total_files,
            processed=self.processed,
            skipped=self.skipped,
            failed=self.failed,
            skip_reasons=dict(self.skip_reasons),
            rows_by_stream=sinks.counts(),
            outputs=sinks.summary(),
            failed_files=list(self.failed_files),
            elapsed_seconds=round(self.elapsed_seconds, 3),
        )


# ============================================================================
# ORCHESTRATOR
# ============================================================================

class ContractBatchProcessor:
    """
    Orchestrates a full contract run

    Process:
    1. Resolve the contract root and discover files
    2. Open both output sinks (truncating previous output)
    3. Process files sequentially, or through a process pool
    4. Close sinks and build the summary
    """

    def __init__(self, config: ContractsConfig):
        self.config = config

    def run(self, contracts: Optional[List[ContractFile]] = None) -> BatchSummary:
        """
        Execute the batch

        Args:
            contracts: Pre-discovered files; discovered from config when None

        Returns:
            BatchSummary

        Raises:
            ContractDiscoveryError: If the contract root cannot be listed
        """
        if contracts is None:
            root = resolve_input_root(self.config)
            contracts = discover_contract_files(
                root,
                self.config.destination_prefix,
                self.config.contract_prefix
            )

        context = BatchRunContext(len(contracts), self.config.progress_interval)

        with SinkSet(self.config.output_dir) as sinks:
            if self.config.workers > 1 and len(contracts) > 1:
                self._run_parallel(contracts, sinks, context)
            else:
                self._run_sequential(contracts, sinks, context)

        summary = context.to_summary(sinks)
        log_batch_summary(summary)
        return summary

    def _run_sequential(self, contracts: List[ContractFile], sinks: SinkSet, context: BatchRunContext) -> None:
        for idx, contract in enumerate(contracts, 1):
            logger.debug(f"[{idx}/{len(contracts)}] Processing: {contract.filename} (Hotel ID: {contract.hotel_id})")
            outcome = process_contract_file(contract, sinks, self.config.max_file_size_bytes)
            context.record(outcome)

    def _run_parallel(self, contracts: List[ContractFile], sinks: SinkSet, context: BatchRunContext) -> None:
        logger.info(f"Processing with {self.config.workers} worker processes")
        queue = iter(contracts)

        while True:
            in_flight = self._drain_pool(queue, sinks, context)
            if not in_flight:
                break

            # A dead worker breaks the whole pool; every lost file gets a single-use pool
            logger.warning(
                f"Worker pool broke; re-running {len(in_flight)} in-flight files one at a time"
            )
            for contract in in_flight:
                self._record_outcome(self._run_isolated(contract), sinks, context)

    def _drain_pool(self, queue: Iterator[ContractFile], sinks: SinkSet, context: BatchRunContext) -> List[ContractFile]:
        """
        Feed queued files through one pool until the queue is empty or the pool breaks

        Returns:
            Files whose results were lost to a broken pool (empty when the queue is done)
        """
        max_in_flight = self.config.workers * 2
        pending = {}
        lost: List[ContractFile] = []

        with self._create_executor(self.config.workers) as executor:
            while True:
                # Keep the pool fed without buffering the whole batch
                while not lost and len(pending) < max_in_flight:
                    contract = next(queue, None)
                    if contract is None:
                        break
                    try:
                        future = executor.submit(_process_in_worker, contract, self.config.max_file_size_bytes)
                    except BrokenProcessPool:
                        lost.append(contract)
                        break
                    pending[future] = contract

                if not pending:
                    return lost

                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    contract = pending.pop(future)
                    try:
                        outcome = future.result()
                    except BrokenProcessPool:
                        lost.append(contract)
                        continue
                    except Exception as e:
                        outcome = _worker_failure(contract, e)
                    self._record_outcome(outcome, sinks, context)

    def _run_isolated(self, contract: ContractFile) -> FileOutcome:
        with self._create_executor(1) as executor:
            future = executor.submit(_process_in_worker, contract, self.config.max_file_size_bytes)
            try:
                return future.result()
            except Exception as e:
                return _worker_failure(contract, e)

    def _create_executor(self, max_workers: int) -> ProcessPoolExecutor:
        return ProcessPoolExecutor(
            max_workers=max_workers,
            initializer=setup_worker_logging,
            initargs=(logging.getLogger().getEffectiveLevel(),)
        )

    @staticmethod
    def _record_outcome(outcome: FileOutcome, sinks: SinkSet, context: BatchRunContext) -> None:
        # Parent process is the only writer
        for stream, rows in outcome.buffered_rows.items():
            sinks.write_rows(stream, rows)
        outcome.buffered_rows = {}
        context.record(outcome)


def _worker_failure(contract: ContractFile, error: Exception) -> FileOutcome:
    if isinstance(error, BrokenProcessPool):
        message = f"worker process terminated abruptly: {error}"
    else:
        message = str(error)
    logger.error(f"Worker failed on {contract.filename}: {message}")
    return FileOutcome(
        filename=contract.filename,
        status=STATUS_FAILED,
        hotel_id=contract.hotel_id,
        error=message
    )


def log_batch_summary(summary: BatchSummary) -> None:
    """Log the end-of-run report"""
    logger.info("=" * 80)
    logger.info("CONTRACT PROCESSING SUMMARY")
    logger.info("=" * 80)
    logger.info(f"Total contract files:   {summary.total_files}")
    logger.info(f"  Processed:            {summary.processed}")
    logger.info(f"  Skipped:              {summary.skipped}")
    for reason, count in sorted(summary.skip_reasons.items()):
        logger.info(f"    {reason}: {count}")
    logger.info(f"  Failed:               {summary.failed}")
    for table_name, stats in summary.outputs.items():
        logger.info(f"{table_name}: {stats['records']:,} records ({stats['file_size_mb']:.2f} MB)")
    logger.info(f"Duration:               {summary.elapsed_seconds:.2f} seconds")
    logger.info("=" * 80)
