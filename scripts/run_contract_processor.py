"""
Hotel Contracts ETL - Contract Processor Script
Converts vendor contract files into hotel_inventory.csv / hotel_rates.csv

Usage:
    python scripts/run_contract_processor.py

    Or with a custom config / overrides:
    python scripts/run_contract_processor.py --config config/contracts_config.yml
    python scripts/run_contract_processor.py --input-root downloads/cache/DESTINATIONS --workers 4
    python scripts/run_contract_processor.py --dry-run
"""

import sys
import argparse
from pathlib import Path
from datetime import datetime

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_etl.config import DEFAULT_CONFIG_PATH, load_contracts_config
from contract_etl.ingestion import (
    ContractBatchProcessor,
    discover_contract_files,
    resolve_input_root,
)
from contract_etl.logging_config import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Hotel contract file processor')
    parser.add_argument(
        '--config',
        default=DEFAULT_CONFIG_PATH,
        help=f'Path to contracts config YAML (default: {DEFAULT_CONFIG_PATH})'
    )
    parser.add_argument('--input-root', help='Directory holding the destination folders')
    parser.add_argument('--output-dir', help='Directory for the generated CSV files')
    parser.add_argument('--max-file-size', type=int, help='Skip contract files larger than this (bytes)')
    parser.add_argument('--progress-interval', type=int, help='Log progress every N files')
    parser.add_argument('--workers', type=int, help='Worker processes (1 = sequential)')
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging verbosity level (overrides config)'
    )
    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Discover contract files only, do not write output'
    )
    return parser


def main(argv=None) -> int:
    """Main orchestrator for contract processing"""
    args = build_parser().parse_args(argv)

    try:
        config = load_contracts_config(args.config)
        config = config.with_overrides(
            input_root=args.input_root,
            output_dir=args.output_dir,
            max_file_size_bytes=args.max_file_size,
            progress_interval=args.progress_interval,
            workers=args.workers,
        )
    except ValueError as e:
        print(f"ERROR: Invalid configuration: {e}")
        return 1

    log_config = config.log_config
    setup_logging(
        log_file=log_config.file,
        log_level=args.log_level or log_config.level,
        max_bytes=log_config.max_bytes,
        backup_count=log_config.backup_count
    )

    logger = get_logger(__name__)

    start_time = datetime.now()
    logger.info("=" * 80)
    logger.info("Hotel Contracts ETL - Contract Processing Started")
    logger.info(f"Start time: {start_time.strftime('%Y-%m-%d %H:%M:%S')}")
    logger.info("=" * 80)

    try:
        root = resolve_input_root(config)
        logger.info(f"Contract root: {root}")
        logger.info(f"Output dir:    {config.output_dir}")

        contracts = discover_contract_files(root, config.destination_prefix, config.contract_prefix)

        if not contracts:
            logger.warning("No contract files found")
            return 0

        if args.dry_run:
            logger.info("DRY RUN MODE - Contract files discovered:")
            for contract in contracts:
                logger.info(f"  - {contract.destination}/{contract.filename} (Hotel ID: {contract.hotel_id})")
            return 0

        summary = ContractBatchProcessor(config).run(contracts)

        if summary.failed:
            logger.error(f"{summary.failed} file(s) failed:")
            for filename in summary.failed_files:
                logger.error(f"  ✗ {filename}")

        logger.info(f"CSV files are ready in: {config.output_dir}")
        return 0 if summary.failed == 0 else 1

    except Exception as e:
        logger.error(f"FATAL ERROR: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
