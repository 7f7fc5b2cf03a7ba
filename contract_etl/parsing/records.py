"""
Contract Record Types
=====================
Typed records produced while parsing hotel contract files.

The column tuples below are the contract with the downstream bulk loader:
the CSV files are written in exactly this order.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

INVENTORY_STREAM = 'hotel_inventory'
RATES_STREAM = 'hotel_rates'

INVENTORY_COLUMNS = (
    'hotel_id',
    'room_code',
    'board_code',
    'date_from',
    'date_to',
    'availability_data',
)

RATE_COLUMNS = (
    'hotel_id',
    'room_code',
    'board_code',
    'date_from',
    'date_to',
    'rate_type',
    'base_price',
    'tax_amount',
    'adults',
    'board_type',
    'price',
)

STREAM_COLUMNS = {
    INVENTORY_STREAM: INVENTORY_COLUMNS,
    RATES_STREAM: RATE_COLUMNS,
}


@dataclass(frozen=True)
class ContractFile:
    """A contract file discovered under a destination directory"""
    path: Path
    filename: str
    destination: str
    hotel_id: Optional[int] = None


@dataclass
class SectionBlock:
    """Trimmed body lines of one {TAG} ... {/TAG} section"""
    tag: str
    lines: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class InventoryRecord:
    """One availability row decoded from a SIIN line"""
    hotel_id: int
    room_code: str
    board_code: str
    date_from: str
    date_to: str
    availability_data: str

    stream = INVENTORY_STREAM

    def to_row(self) -> Tuple:
        return (
            self.hotel_id,
            self.room_code,
            self.board_code,
            self.date_from,
            self.date_to,
            self.availability_data,
        )


@dataclass(frozen=True)
class RateRecord:
    """
    One priced row decoded from a SIAP price tuple.

    base_price and tax_amount are not computed by this stage and stay 0;
    the columns exist only to keep the loader's column order.
    """
    hotel_id: int
    room_code: str
    board_code: str
    date_from: str
    date_to: str
    rate_type: str
    base_price: float
    tax_amount: float
    adults: int
    board_type: str
    price: float

    stream = RATES_STREAM

    def to_row(self) -> Tuple:
        return (
            self.hotel_id,
            self.room_code,
            self.board_code,
            self.date_from,
            self.date_to,
            self.rate_type,
            self.base_price,
            self.tax_amount,
            self.adults,
            self.board_type,
            self.price,
        )


@dataclass(frozen=True)
class PriceTuple:
    """A parsed (a,b,c) group; only the third value is used"""
    first: str
    second: str
    price_raw: str
