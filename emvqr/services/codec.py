"""Decode, encode and amend services for QR payloads."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from ..message import QRMessage

logger = logging.getLogger("emvqr.codec")


@dataclass(frozen=True)
class EncodedPayload:
    payload: str
    crc: str

    @classmethod
    def from_message(cls, message: QRMessage) -> EncodedPayload:
        payload = message.pack()
        return cls(payload=payload, crc=payload[-4:])


@dataclass(slots=True)
class DecodeResult:
    message: QRMessage
    crc: str


def decode_payload(payload: str) -> DecodeResult:
    """Parse and validate a complete QR payload."""

    message = QRMessage.parse(payload)
    logger.info("payload decoded", extra={"length": len(payload), "tags": len(message.entries)})
    return DecodeResult(message=message, crc=payload[-4:])


def encode_fields(fields: Mapping[str, object]) -> EncodedPayload:
    """Build a payload from nested tag mappings and compute its CRC."""

    encoded = EncodedPayload.from_message(QRMessage.from_dict(fields))
    logger.info("payload encoded", extra={"length": len(encoded.payload), "crc": encoded.crc})
    return encoded


def inspect_payload(payload: str, paths: Iterable[str]) -> dict[str, str | None]:
    """Look up several field paths in one payload."""

    message = QRMessage.parse(payload)
    return {path: message.get(path) for path in paths}


def amend_payload(payload: str, updates: Mapping[str, str | None]) -> EncodedPayload:
    """Apply path updates to an existing payload and recompute its CRC.

    A ``None`` or empty value removes the field.
    """

    message = QRMessage.parse(payload)
    for path, value in updates.items():
        message.set(path, value)
    encoded = EncodedPayload.from_message(message)
    logger.info(
        "payload amended",
        extra={"updates": len(updates), "crc_before": payload[-4:], "crc_after": encoded.crc},
    )
    return encoded
