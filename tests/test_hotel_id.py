"""
Hotel ID Extraction Tests
=========================
Filename -> hotel identifier, strict vendor pattern first, then the
numeric-token fallback.
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from contract_etl.parsing.hotel_id import extract_hotel_id


def test_strict_pattern_uses_second_digit_run():
    assert extract_hotel_id("ID_B2B_1#X_987654_20240101") == 987654


def test_strict_pattern_with_long_contract_code():
    assert extract_hotel_id("ID_B2B_27#DBL-STD.2024_123456_20240101_extra") == 123456


def test_fallback_returns_second_numeric_token():
    assert extract_hotel_id("something_111_222_333.txt") == 222


def test_fallback_single_numeric_token():
    assert extract_hotel_id("contract_4242_final") == 4242


def test_fallback_ignores_mixed_tokens():
    # "12a" and "333.txt" are not purely numeric
    assert extract_hotel_id("x_12a_77_333.txt") == 77


def test_no_numeric_token_returns_none():
    assert extract_hotel_id("ID_B2B_contract.txt") is None
    assert extract_hotel_id("") is None


def test_strict_pattern_needs_trailing_underscore():
    # No "_" after the hotel digits: falls back to numeric tokens
    # Tokens: ID, B2B, 5#ABC, 42 -> only "42" is numeric
    assert extract_hotel_id("ID_B2B_5#ABC_42") == 42


def test_leading_zeros_are_dropped():
    assert extract_hotel_id("ID_B2B_1#X_000123_2024") == 123


def test_zero_id_is_not_an_identifier():
    assert extract_hotel_id("ID_B2B_1#X_0_2024") is None
    assert extract_hotel_id("only_0_here") is None
