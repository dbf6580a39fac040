"""Utility helpers to build and parse EMV-style TLV payloads."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from .errors import err_invalid_element, err_invalid_tag, err_truncated_element

MAX_VALUE_LENGTH = 99


def check_tag(tag: str) -> str:
    """Return ``tag`` if it is two ASCII digits, raise ``ERR_INVALID_TAG`` otherwise."""

    if len(tag) != 2 or not (tag.isascii() and tag.isdigit()):
        raise err_invalid_tag(tag)
    return tag


def is_template_tag(tag: str) -> bool:
    """Tags whose values are nested templates in a root payload."""

    number = int(tag)
    return 26 <= number <= 51 or number in (62, 64) or 80 <= number <= 99


@dataclass(frozen=True)
class TLVItem:
    tag: str
    value: str

    def serialize(self) -> str:
        check_tag(self.tag)
        if len(self.value) > MAX_VALUE_LENGTH:
            raise err_invalid_element(f"Value of tag {self.tag} is longer than {MAX_VALUE_LENGTH} characters")
        length = f"{len(self.value):02d}"
        return f"{self.tag}{length}{self.value}"


def build_tlv(items: Iterable[TLVItem]) -> str:
    """Serialize iterable of TLV items into EMV string."""

    return "".join(item.serialize() for item in items)


def parse_tlv(payload: str) -> Iterator[TLVItem]:
    """Parse TLV payload string into TLV items.

    A trailing fragment shorter than a tag is ignored. Anything longer that
    does not hold a complete element raises ``ERR_TRUNCATED_ELEMENT``.
    """

    idx = 0
    total = len(payload)
    while idx + 2 <= total:
        tag = check_tag(payload[idx : idx + 2])
        if idx + 4 > total:
            raise err_truncated_element(f"Tag {tag} at offset {idx} has no length")
        raw_length = payload[idx + 2 : idx + 4]
        if not (raw_length.isascii() and raw_length.isdigit()):
            raise err_invalid_element(f"Tag {tag} has non-numeric length {raw_length!r}")
        value_start = idx + 4
        value_end = value_start + int(raw_length)
        if value_end > total:
            raise err_truncated_element(f"Tag {tag} length {raw_length} exceeds payload")
        yield TLVItem(tag=tag, value=payload[value_start:value_end])
        idx = value_end
