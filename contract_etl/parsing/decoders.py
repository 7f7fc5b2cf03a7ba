"""
Section Record Decoders
=======================
One decoding strategy per section tag.

    SIIN -> InventoryDecoder -> hotel_inventory
    SIAP -> RateDecoder      -> hotel_rates

Lines with too few colon-delimited fields are dropped silently; they are
malformed input, not errors. Tags without a registered decoder produce no
records, so new section types in the feed pass through harmlessly.

Columns left unfilled here (inventory field[2], rate base_price and
tax_amount) are deliberately not computed by this stage.
"""

import logging
import re
from typing import Dict, Iterator, List, Optional, Tuple, Union

from .records import (
    INVENTORY_STREAM,
    RATES_STREAM,
    InventoryRecord,
    PriceTuple,
    RateRecord,
    SectionBlock,
)

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ':'
PRICE_TUPLE_PATTERN = re.compile(r'\(([^,]*),([^,]*),([^)]+)\)')
LEADING_INT_PATTERN = re.compile(r'\s*([+-]?[0-9]+)')
LEADING_FLOAT_PATTERN = re.compile(r'\s*([+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)')

DEFAULT_RATE_TYPE = 'N'

Record = Union[InventoryRecord, RateRecord]


def parse_leading_int(value: str, default: int = 0) -> int:
    """Parse the integer prefix of a field ('2', ' 3', '2x' -> 2), else default"""
    match = LEADING_INT_PATTERN.match(value)
    if not match:
        return default
    return int(match.group(1))


def parse_leading_float(value: str) -> Optional[float]:
    """Parse the numeric prefix of a field, None if there is none"""
    match = LEADING_FLOAT_PATTERN.match(value)
    if not match:
        return None
    return float(match.group(1))


def parse_price_tuples(price_list: str) -> List[PriceTuple]:
    """
    Parse a price-list field made of back-to-back (a,b,c) groups

    Args:
        price_list: Raw field, e.g. "(1,2,45.50)(3,4,0)"

    Returns:
        PriceTuples in field order
    """
    return [
        PriceTuple(first=m.group(1), second=m.group(2), price_raw=m.group(3))
        for m in PRICE_TUPLE_PATTERN.finditer(price_list)
    ]


class InventoryDecoder:
    """Decodes SIIN lines: date_from:date_to:_:room:board:availability"""

    tag = 'SIIN'
    stream = INVENTORY_STREAM
    min_fields = 6

    def decode(self, hotel_id: int, line: str) -> Iterator[InventoryRecord]:
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < self.min_fields:
            logger.debug(f"Dropping short SIIN line ({len(parts)} fields)")
            return

        yield InventoryRecord(
            hotel_id=hotel_id,
            room_code=parts[3],
            board_code=parts[4],
            date_from=parts[0],
            date_to=parts[1],
            availability_data=parts[5],
        )


class RateDecoder:
    """
    Decodes SIAP lines into one RateRecord per positive price tuple.

    Field layout used: 0 date_from, 1 date_to, 3 room, 4 board, 6 adults,
    9 price list. Board code doubles as board_type.
    """

    tag = 'SIAP'
    stream = RATES_STREAM
    min_fields = 10

    def decode(self, hotel_id: int, line: str) -> Iterator[RateRecord]:
        parts = line.split(FIELD_SEPARATOR)
        if len(parts) < self.min_fields:
            logger.debug(f"Dropping short SIAP line ({len(parts)} fields)")
            return

        adults = parse_leading_int(parts[6])

        for price_tuple in parse_price_tuples(parts[9]):
            price = parse_leading_float(price_tuple.price_raw)
            if price is None or price <= 0:
                continue

            yield RateRecord(
                hotel_id=hotel_id,
                room_code=parts[3],
                board_code=parts[4],
                date_from=parts[0],
                date_to=parts[1],
                rate_type=DEFAULT_RATE_TYPE,
                base_price=0,
                tax_amount=0,
                adults=adults,
                board_type=parts[4],
                price=price,
            )


DECODERS: Dict[str, object] = {
    InventoryDecoder.tag: InventoryDecoder(),
    RateDecoder.tag: RateDecoder(),
}


def get_decoder(tag: str):
    """Return the decoder registered for a section tag, or None"""
    return DECODERS.get(tag)


def decode_section(block: SectionBlock, hotel_id: int) -> Iterator[Tuple[str, Record]]:
    """
    Decode every body line of a section

    Args:
        block: Flushed section from the splitter
        hotel_id: Owning hotel, stamped on every record

    Yields:
        (stream_name, record) pairs in line order
    """
    decoder = get_decoder(block.tag)
    if decoder is None:
        logger.debug(f"No decoder for section {block.tag}; {len(block.lines)} lines passed through")
        return

    for line in block.lines:
        for record in decoder.decode(hotel_id, line):
            yield decoder.stream, record
