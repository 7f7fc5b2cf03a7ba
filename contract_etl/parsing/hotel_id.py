"""
Hotel ID extraction from contract filenames

Vendor filenames look like ``ID_B2B_<seq>#<contract>_<hotelId>_<...>``.
When a name does not follow that shape, the second purely numeric
underscore token is taken, on the assumption that names are laid out as
``<sequence>_<hotelId>_...``. That fallback is a heuristic over an
undocumented naming scheme and can pick the wrong number for files that
deviate from it.
"""

import re
from typing import List, Optional

STRICT_FILENAME_PATTERN = re.compile(r'ID_B2B_[0-9]+#[^_]+_([0-9]+)_')
NUMERIC_TOKEN_PATTERN = re.compile(r'^[0-9]+$')


def _numeric_tokens(filename: str) -> List[str]:
    return [part for part in filename.split('_') if NUMERIC_TOKEN_PATTERN.match(part)]


def extract_hotel_id(filename: str) -> Optional[int]:
    """
    Derive the hotel identifier from a contract filename

    Args:
        filename: Bare filename (no directory part)

    Returns:
        Hotel ID, or None if no identifier can be determined
    """
    match = STRICT_FILENAME_PATTERN.search(filename)
    if match:
        candidate = match.group(1)
    else:
        numeric = _numeric_tokens(filename)
        if len(numeric) >= 2:
            candidate = numeric[1]
        elif numeric:
            candidate = numeric[0]
        else:
            return None

    hotel_id = int(candidate)
    # A zero id is never a real property
    return hotel_id if hotel_id > 0 else None
