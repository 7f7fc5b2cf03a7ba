"""
Shared fixtures for contract ETL tests
Builds small contract trees shaped like the vendor cache layout
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_etl.config import ContractsConfig


SAMPLE_CONTRACT = """{CCON}
ES:PMI:27:DBL:BB:N
{/CCON}
{SIIN}
20240101:20240131:X:DBL:BB:5,5,5
20240201:20240228:X:SGL:RO:3,3
too:short
{/SIIN}
{SIAP}
20240101:20240131:X:DBL:BB:N:2:a:b:(1,2,45.50)(3,4,0)(5,6,12.00)
{/SIAP}
"""


def write_contract(root: Path, destination: str, filename: str, content: str = SAMPLE_CONTRACT) -> Path:
    """Create root/destination/filename with the given content"""
    folder = root / destination
    folder.mkdir(parents=True, exist_ok=True)
    path = folder / filename
    path.write_text(content, encoding='utf-8')
    return path


@pytest.fixture
def contract_root(tmp_path):
    """A DESTINATIONS folder with two destinations and three contracts"""
    root = tmp_path / 'DESTINATIONS'
    write_contract(root, 'D_PMI', 'ID_B2B_27#DBL_123456_20240101')
    write_contract(root, 'D_PMI', 'ID_B2B_28#STD_234567_20240101')
    write_contract(root, 'D_BCN', 'ID_B2B_31#SUP_345678_20240101')
    # Ignored: wrong prefixes
    write_contract(root, 'D_BCN', 'README.txt', 'not a contract')
    write_contract(root, 'X_OTHER', 'ID_B2B_1#X_999_1')
    return root


@pytest.fixture
def contracts_config(tmp_path, contract_root):
    return ContractsConfig(
        input_root=contract_root,
        output_dir=tmp_path / 'csv_output',
        progress_interval=1,
    )
