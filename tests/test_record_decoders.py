"""
Record Decoder Tests
====================
SIIN -> InventoryRecord, SIAP -> RateRecord (one per positive price tuple).
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_etl.parsing.decoders import (
    InventoryDecoder,
    RateDecoder,
    decode_section,
    get_decoder,
    parse_leading_float,
    parse_leading_int,
    parse_price_tuples,
)
from contract_etl.parsing.records import (
    INVENTORY_COLUMNS,
    RATE_COLUMNS,
    InventoryRecord,
    PriceTuple,
    RateRecord,
    SectionBlock,
)

HOTEL_ID = 123456


def _rate_line(price_list, adults='2'):
    return f"20240101:20240131:X:DBL:BB:N:{adults}:a:b:{price_list}"


# ============================================================================
# INVENTORY
# ============================================================================

def test_inventory_line_maps_fields_verbatim():
    records = list(InventoryDecoder().decode(HOTEL_ID, "20240101:20240131:IGNORED:DBL:BB:5,5,0,2"))

    assert records == [InventoryRecord(
        hotel_id=HOTEL_ID,
        room_code='DBL',
        board_code='BB',
        date_from='20240101',
        date_to='20240131',
        availability_data='5,5,0,2',
    )]


def test_inventory_extra_fields_ignored():
    records = list(InventoryDecoder().decode(HOTEL_ID, "d1:d2:z:R:B:avail:extra:more"))
    assert len(records) == 1
    assert records[0].availability_data == 'avail'


def test_inventory_short_line_dropped():
    assert list(InventoryDecoder().decode(HOTEL_ID, "d1:d2:z:R:B")) == []
    assert list(InventoryDecoder().decode(HOTEL_ID, "")) == []


def test_inventory_empty_fields_kept_as_empty():
    records = list(InventoryDecoder().decode(HOTEL_ID, ":::::"))
    assert len(records) == 1
    assert records[0].to_row() == (HOTEL_ID, '', '', '', '', '')


# ============================================================================
# RATES
# ============================================================================

def test_rate_line_drops_non_positive_tuples():
    records = list(RateDecoder().decode(HOTEL_ID, _rate_line("(1,2,45.50)(3,4,0)(5,6,12.00)")))

    assert [r.price for r in records] == [45.50, 12.00]
    first = records[0]
    assert first == RateRecord(
        hotel_id=HOTEL_ID,
        room_code='DBL',
        board_code='BB',
        date_from='20240101',
        date_to='20240131',
        rate_type='N',
        base_price=0,
        tax_amount=0,
        adults=2,
        board_type='BB',
        price=45.50,
    )


def test_rate_line_with_no_tuples_yields_nothing():
    assert list(RateDecoder().decode(HOTEL_ID, _rate_line(""))) == []


def test_rate_short_line_dropped():
    assert list(RateDecoder().decode(HOTEL_ID, "a:b:c:d:e:f:g:h:(1,2,3)")) == []


def test_rate_negative_and_unparsable_prices_dropped():
    records = list(RateDecoder().decode(HOTEL_ID, _rate_line("(1,2,-5)(1,2,abc)(1,2,7.25)")))
    assert [r.price for r in records] == [7.25]


def test_rate_adults_defaults_to_zero():
    records = list(RateDecoder().decode(HOTEL_ID, _rate_line("(1,2,10)", adults='n/a')))
    assert records[0].adults == 0


def test_rate_adults_uses_integer_prefix():
    records = list(RateDecoder().decode(HOTEL_ID, _rate_line("(1,2,10)", adults='3x')))
    assert records[0].adults == 3


def test_rate_row_column_order():
    record = next(RateDecoder().decode(HOTEL_ID, _rate_line("(1,2,99.9)")))
    row = dict(zip(RATE_COLUMNS, record.to_row()))
    assert row['rate_type'] == 'N'
    assert row['board_type'] == row['board_code'] == 'BB'
    assert row['base_price'] == 0
    assert row['tax_amount'] == 0
    assert row['price'] == 99.9
    assert len(RATE_COLUMNS) == 11
    assert len(INVENTORY_COLUMNS) == 6


# ============================================================================
# PARSE HELPERS
# ============================================================================

def test_parse_price_tuples():
    assert parse_price_tuples("(1,2,45.50)(,,3)") == [
        PriceTuple(first='1', second='2', price_raw='45.50'),
        PriceTuple(first='', second='', price_raw='3'),
    ]
    assert parse_price_tuples("no tuples here") == []


def test_parse_leading_numbers():
    assert parse_leading_int('2') == 2
    assert parse_leading_int(' 4 ') == 4
    assert parse_leading_int('') == 0
    assert parse_leading_float('12.00') == 12.0
    assert parse_leading_float('.5') == 0.5
    assert parse_leading_float('1e2') == 100.0
    assert parse_leading_float('3.5EUR') == 3.5
    assert parse_leading_float('EUR') is None


# ============================================================================
# SECTION DISPATCH
# ============================================================================

def test_decode_section_routes_by_tag():
    inventory = SectionBlock('SIIN', ["d1:d2:z:R:B:avail"])
    rates = SectionBlock('SIAP', [_rate_line("(1,2,1)(1,2,2)")])

    inv = list(decode_section(inventory, HOTEL_ID))
    rat = list(decode_section(rates, HOTEL_ID))

    assert [stream for stream, _ in inv] == ['hotel_inventory']
    assert [stream for stream, _ in rat] == ['hotel_rates', 'hotel_rates']
    assert all(record.hotel_id == HOTEL_ID for _, record in inv + rat)


def test_unknown_section_yields_nothing():
    assert get_decoder('CNHF') is None
    assert list(decode_section(SectionBlock('CNHF', ["a:b:c:d:e:f"]), HOTEL_ID)) == []
