"""
Configuration for the Hotel Contracts ETL

Settings come from a YAML file (see config/contracts_config.example.yml)
and may be overridden by command line flags. Every key is optional.
"""

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = 'config/contracts_config.yml'
DEFAULT_MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024  # 50MB
DEFAULT_PROGRESS_INTERVAL = 100


@dataclass
class LoggingConfig:
    """Logging section of the config file"""
    file: Optional[str] = 'logs/contracts.log'
    level: str = 'INFO'
    max_bytes: int = 10485760
    backup_count: int = 5

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'LoggingConfig':
        data = data or {}
        defaults = cls()
        return cls(
            file=data.get('file', defaults.file),
            level=str(data.get('level', defaults.level)),
            max_bytes=int(data.get('max_bytes', defaults.max_bytes)),
            backup_count=int(data.get('backup_count', defaults.backup_count)),
        )


@dataclass
class ContractsConfig:
    """
    Contract processing settings

    input_root points straight at the directory holding the destination
    folders. When it is not set, the root is looked up in the vendor cache
    layout: <downloads_dir>/<cache_dir_prefix>*/<destinations_dir_name>.
    """
    input_root: Optional[Path] = None
    downloads_dir: Path = Path('downloads')
    cache_dir_prefix: str = 'hotelbed_cache_full_'
    destinations_dir_name: str = 'DESTINATIONS'
    destination_prefix: str = 'D_'
    contract_prefix: str = 'ID_B2B'
    output_dir: Path = Path('downloads/csv_output')
    max_file_size_bytes: int = DEFAULT_MAX_FILE_SIZE_BYTES
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    workers: int = 1
    log_config: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'ContractsConfig':
        """
        Build config from the parsed YAML document

        Args:
            data: Whole YAML document ({'contracts': {...}, 'logging': {...}})

        Returns:
            Validated ContractsConfig
        """
        data = data or {}
        section = data.get('contracts') or {}
        defaults = cls()

        input_root = section.get('input_root')
        config = cls(
            input_root=Path(input_root) if input_root else None,
            downloads_dir=Path(section.get('downloads_dir', defaults.downloads_dir)),
            cache_dir_prefix=section.get('cache_dir_prefix', defaults.cache_dir_prefix),
            destinations_dir_name=section.get('destinations_dir_name', defaults.destinations_dir_name),
            destination_prefix=section.get('destination_prefix', defaults.destination_prefix),
            contract_prefix=section.get('contract_prefix', defaults.contract_prefix),
            output_dir=Path(section.get('output_dir', defaults.output_dir)),
            max_file_size_bytes=int(section.get('max_file_size_bytes', defaults.max_file_size_bytes)),
            progress_interval=int(section.get('progress_interval', defaults.progress_interval)),
            workers=int(section.get('workers', defaults.workers)),
            log_config=LoggingConfig.from_dict(data.get('logging')),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError for settings the pipeline cannot run with"""
        if self.max_file_size_bytes <= 0:
            raise ValueError(f"max_file_size_bytes must be positive, got {self.max_file_size_bytes}")
        if self.progress_interval <= 0:
            raise ValueError(f"progress_interval must be positive, got {self.progress_interval}")
        if self.workers <= 0:
            raise ValueError(f"workers must be positive, got {self.workers}")

    def with_overrides(self, **overrides: Any) -> 'ContractsConfig':
        """Return a copy with every non-None override applied"""
        changes = {key: value for key, value in overrides.items() if value is not None}
        for key in ('input_root', 'downloads_dir', 'output_dir'):
            if key in changes:
                changes[key] = Path(changes[key])
        config = replace(self, **changes)
        config.validate()
        return config


def load_contracts_config(config_path: str = DEFAULT_CONFIG_PATH, required: bool = False) -> ContractsConfig:
    """
    Load contract processing configuration from YAML

    Args:
        config_path: Path to the YAML file
        required: Raise if the file is missing instead of using defaults

    Returns:
        ContractsConfig
    """
    path = Path(config_path)
    if not path.exists():
        if required:
            raise FileNotFoundError(f"Config file not found: {path}")
        logger.debug(f"Config file {path} not found, using defaults")
        return ContractsConfig()

    with open(path, 'r') as f:
        data = yaml.safe_load(f)

    return ContractsConfig.from_dict(data)
