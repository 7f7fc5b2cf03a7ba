"""
Script Tests
============
Runs scripts/run_contract_processor.py the way an operator would and
checks exit codes and output files.
"""

import subprocess
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
PROCESSOR_SCRIPT = PROJECT_ROOT / 'scripts' / 'run_contract_processor.py'


@pytest.fixture
def config_file(tmp_path, contract_root):
    """Config pointing at the fixture tree, logging into tmp_path"""
    path = tmp_path / 'contracts_config.yml'
    path.write_text(
        "contracts:\n"
        f"  input_root: {contract_root.as_posix()}\n"
        f"  output_dir: {(tmp_path / 'csv_output').as_posix()}\n"
        "logging:\n"
        f"  file: {(tmp_path / 'logs' / 'contracts.log').as_posix()}\n"
        "  level: INFO\n"
    )
    return path


def _run(*args):
    return subprocess.run(
        [sys.executable, str(PROCESSOR_SCRIPT), *args],
        capture_output=True,
        text=True,
        cwd=str(PROJECT_ROOT)
    )


def test_full_run_exits_zero(config_file, tmp_path):
    result = _run('--config', str(config_file))

    assert result.returncode == 0, result.stderr[-2000:]
    assert (tmp_path / 'csv_output' / 'hotel_inventory.csv').exists()
    assert (tmp_path / 'csv_output' / 'hotel_rates.csv').exists()
    assert 'CONTRACT PROCESSING SUMMARY' in (tmp_path / 'logs' / 'contracts.log').read_text(encoding='utf-8')


def test_dry_run_writes_nothing(config_file, tmp_path):
    result = _run('--config', str(config_file), '--dry-run')

    assert result.returncode == 0, result.stderr[-2000:]
    assert not (tmp_path / 'csv_output').exists()
    assert 'ID_B2B_27#DBL_123456_20240101' in (tmp_path / 'logs' / 'contracts.log').read_text(encoding='utf-8')


def test_missing_root_exits_one(config_file, tmp_path):
    result = _run('--config', str(config_file), '--input-root', str(tmp_path / 'missing'))
    assert result.returncode == 1


def test_invalid_override_exits_one(config_file):
    result = _run('--config', str(config_file), '--workers', '0')
    assert result.returncode == 1
    assert 'Invalid configuration' in result.stdout


def test_failed_file_exits_one(config_file, contract_root):
    # Unreadable contract file: counted as failed, batch still finishes
    bad = contract_root / 'D_PMI' / 'ID_B2B_99#BAD_888888_20240101'
    bad.write_bytes(b'{SIIN}\nx\n')
    bad.chmod(0o000)
    try:
        if bad.exists() and _readable(bad):
            pytest.skip("running with privileges that ignore file permissions")
        result = _run('--config', str(config_file))
    finally:
        bad.chmod(0o644)

    assert result.returncode == 1


def _readable(path):
    try:
        with open(path, 'rb'):
            return True
    except OSError:
        return False
