"""Tests for CRC16-CCITT calculation."""

from emvqr.crc import append_crc, crc16_ccitt, verify_crc


def test_crc16_check_value():
    """Standard CRC-16/CCITT-FALSE check value."""
    assert crc16_ccitt("123456789") == "29B1"
    assert crc16_ccitt(b"123456789") == "29B1"


def test_crc16_empty_is_initial_register():
    assert crc16_ccitt("") == "FFFF"


def test_crc16_payload_format_indicator_only():
    assert crc16_ccitt("0002016304") == "AAE6"


def test_crc16_is_zero_padded_uppercase():
    result = crc16_ccitt("00020191320016A0112233449988770708123456786304")
    assert result == "4D32"
    assert len(result) == 4
    assert result == result.upper()


def test_crc16_encodes_text_as_utf8():
    assert crc16_ccitt("最佳运输") == crc16_ccitt("最佳运输".encode("utf-8"))


def test_crc16_deterministic():
    assert crc16_ccitt("5802CN") == crc16_ccitt("5802CN")


def test_crc16_single_byte_change():
    assert crc16_ccitt("5802CN") != crc16_ccitt("5802CM")


def test_append_crc():
    assert append_crc("000201") == "0002016304AAE6"


def test_verify_crc():
    assert verify_crc("0002016304AAE6")
    assert not verify_crc("0002016304AAE7")


def test_verify_crc_is_case_sensitive():
    assert not verify_crc("0002016304aae6")


def test_verify_crc_short_input():
    assert not verify_crc("AE6")
