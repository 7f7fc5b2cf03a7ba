"""
Contracts Config Tests
======================
YAML loading, defaults, validation and command line overrides.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest

from contract_etl.config import (
    DEFAULT_MAX_FILE_SIZE_BYTES,
    ContractsConfig,
    LoggingConfig,
    load_contracts_config,
)


def test_defaults():
    config = ContractsConfig()

    assert config.input_root is None
    assert config.max_file_size_bytes == DEFAULT_MAX_FILE_SIZE_BYTES == 52428800
    assert config.progress_interval == 100
    assert config.workers == 1
    assert config.destination_prefix == 'D_'
    assert config.contract_prefix == 'ID_B2B'
    assert config.log_config == LoggingConfig()


def test_missing_file_falls_back_to_defaults(tmp_path):
    config = load_contracts_config(tmp_path / 'absent.yml')
    assert config == ContractsConfig()


def test_missing_file_required(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_contracts_config(tmp_path / 'absent.yml', required=True)


def test_load_yaml(tmp_path):
    config_file = tmp_path / 'contracts_config.yml'
    config_file.write_text(
        "contracts:\n"
        "  input_root: /data/DESTINATIONS\n"
        "  output_dir: /data/out\n"
        "  max_file_size_bytes: 1000\n"
        "  workers: 3\n"
        "logging:\n"
        "  file: /tmp/contracts.log\n"
        "  level: DEBUG\n"
    )

    config = load_contracts_config(config_file)

    assert config.input_root == Path('/data/DESTINATIONS')
    assert config.output_dir == Path('/data/out')
    assert config.max_file_size_bytes == 1000
    assert config.workers == 3
    # Unset keys keep their defaults
    assert config.progress_interval == 100
    assert config.log_config.file == '/tmp/contracts.log'
    assert config.log_config.level == 'DEBUG'
    assert config.log_config.backup_count == 5


def test_empty_yaml_document(tmp_path):
    config_file = tmp_path / 'contracts_config.yml'
    config_file.write_text("")
    assert load_contracts_config(config_file) == ContractsConfig()


@pytest.mark.parametrize('key', ['max_file_size_bytes', 'progress_interval', 'workers'])
def test_non_positive_values_rejected(key):
    with pytest.raises(ValueError):
        ContractsConfig.from_dict({'contracts': {key: 0}})


def test_overrides_skip_none_and_coerce_paths():
    config = ContractsConfig().with_overrides(
        input_root='/x/DESTINATIONS',
        output_dir=None,
        workers=4,
    )

    assert config.input_root == Path('/x/DESTINATIONS')
    assert config.output_dir == ContractsConfig().output_dir
    assert config.workers == 4


def test_overrides_are_validated():
    with pytest.raises(ValueError):
        ContractsConfig().with_overrides(progress_interval=-1)
