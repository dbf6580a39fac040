"""EMV merchant-presented QR payload codec."""
from __future__ import annotations

from .crc import crc16_ccitt
from .errors import QRError
from .message import QRMessage

__all__ = ["QRError", "QRMessage", "crc16_ccitt"]
