"""CRC16-CCITT implementation."""
from __future__ import annotations

CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF

# ID and length of the trailing checksum data object.
CRC_HEADER = "6304"


def crc16_ccitt(data: str | bytes) -> str:
    """Compute CRC16-CCITT (0x1021, init 0xFFFF) as four uppercase hex digits.

    Strings are encoded as UTF-8 before hashing.
    """

    if isinstance(data, str):
        data = data.encode("utf-8")
    checksum = CRC16_INIT
    for byte in data:
        checksum ^= byte << 8
        for _ in range(8):
            if checksum & 0x8000:
                checksum = (checksum << 1) ^ CRC16_POLY
            else:
                checksum <<= 1
            checksum &= 0xFFFF
    return f"{checksum:04X}"


def append_crc(body: str) -> str:
    """Terminate ``body`` with the CRC data object."""

    crc_input = f"{body}{CRC_HEADER}"
    return f"{crc_input}{crc16_ccitt(crc_input)}"


def verify_crc(payload: str) -> bool:
    """Check that the last four characters are the CRC of everything before them."""

    if len(payload) < 4:
        return False
    return payload[-4:] == crc16_ccitt(payload[:-4])
