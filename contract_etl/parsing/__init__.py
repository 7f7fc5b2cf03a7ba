"""
Hotel Contracts ETL - Parsing Module
Filename hotel IDs, section splitting and per-section record decoding
"""

from .hotel_id import extract_hotel_id
from .sections import SectionSplitter, iter_sections
from .decoders import (
    InventoryDecoder,
    RateDecoder,
    decode_section,
    get_decoder,
    parse_price_tuples,
)
from .records import (
    INVENTORY_COLUMNS,
    INVENTORY_STREAM,
    RATE_COLUMNS,
    RATES_STREAM,
    ContractFile,
    InventoryRecord,
    PriceTuple,
    RateRecord,
    SectionBlock,
)

__all__ = [
    'extract_hotel_id',
    'SectionSplitter',
    'iter_sections',
    'InventoryDecoder',
    'RateDecoder',
    'decode_section',
    'get_decoder',
    'parse_price_tuples',
    'INVENTORY_COLUMNS',
    'INVENTORY_STREAM',
    'RATE_COLUMNS',
    'RATES_STREAM',
    'ContractFile',
    'InventoryRecord',
    'PriceTuple',
    'RateRecord',
    'SectionBlock',
]
