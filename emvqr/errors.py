"""Codec error definitions."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class QRError(Exception):
    code: str
    message: str
    status_code: int = 400

    def __str__(self) -> str:  # noqa: D401 override
        return f"{self.code}: {self.message}"


def err_invalid_header(message: str | None = None) -> QRError:
    return QRError(code="ERR_INVALID_HEADER", message=message or "Payload must start with 000201")


def err_checksum_mismatch(message: str | None = None) -> QRError:
    return QRError(code="ERR_CHECKSUM_MISMATCH", message=message or "CRC validation failed")


def err_invalid_tag(tag: str) -> QRError:
    return QRError(code="ERR_INVALID_TAG", message=f"Tag must be between 00 and 99, got {tag!r}")


def err_invalid_element(message: str | None = None) -> QRError:
    return QRError(code="ERR_INVALID_ELEMENT", message=message or "Invalid data element")


def err_payload_too_large(length: int, limit: int) -> QRError:
    return QRError(
        code="ERR_PAYLOAD_TOO_LARGE",
        message=f"Packed payload is {length} characters, limit is {limit}",
        status_code=413,
    )


def err_invalid_path(path: str) -> QRError:
    return QRError(code="ERR_INVALID_PATH", message=f"Cannot descend into primitive value: {path}")


def err_truncated_element(message: str | None = None) -> QRError:
    return QRError(code="ERR_TRUNCATED_ELEMENT", message=message or "TLV element exceeds payload")
