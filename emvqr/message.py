"""Recursive EMV merchant-presented QR message.

A QR payload is a sequence of data objects, each coded as a two-digit ID,
a two-digit length and a value of that many characters. A data object is
either primitive (its value is an opaque string) or a template (its value
is itself a sequence of data objects). :class:`QRMessage` holds that tree:
each entry maps a tag to a string or to a nested ``QRMessage``.

Fields anywhere in the tree are addressed by dotted paths such as
``"62.05"`` (tag ``05`` inside the template at tag ``62``).
"""
from __future__ import annotations

import logging
from typing import Iterator, Mapping, Union

from .crc import append_crc, verify_crc
from .errors import (
    err_checksum_mismatch,
    err_invalid_element,
    err_invalid_header,
    err_invalid_path,
    err_payload_too_large,
)
from .tlv import TLVItem, build_tlv, check_tag, is_template_tag, parse_tlv

logger = logging.getLogger("emvqr.message")

# Payload Format Indicator, ID "00", always the first data object.
PAYLOAD_FORMAT_INDICATOR = "01"
PAYLOAD_HEADER = "000201"
# Checksum data object, ID "63", always the last one.
CRC_TAG = "63"
MAX_PAYLOAD_LENGTH = 512

FieldValue = Union[str, "QRMessage"]


class QRMessage:
    """Tree of QR data objects keyed by two-digit tag, in insertion order."""

    def __init__(self, *, root: bool = True) -> None:
        self.entries: dict[str, FieldValue] = {}
        self.is_root = root

    @classmethod
    def parse(cls, payload: str) -> QRMessage:
        """Build a root message from a complete QR payload."""

        message = cls()
        message.unpack(payload)
        return message

    @classmethod
    def from_dict(cls, fields: Mapping[str, object], *, root: bool = True) -> QRMessage:
        """Build a message from nested mappings of tag to string or mapping.

        ``None`` and empty strings are skipped, as with :meth:`set`.
        """

        message = cls(root=root)
        for tag, value in fields.items():
            check_tag(tag)
            if value is None or value == "":
                continue
            if isinstance(value, Mapping):
                message.entries[tag] = cls.from_dict(value, root=False)
            elif isinstance(value, str):
                message.entries[tag] = value
            else:
                raise err_invalid_element(f"Value of tag {tag} must be a string or a template, got {type(value).__name__}")
        return message

    def to_dict(self) -> dict[str, object]:
        return {
            tag: value.to_dict() if isinstance(value, QRMessage) else value
            for tag, value in self.entries.items()
        }

    def copy(self, *, root: bool | None = None) -> QRMessage:
        """Deep copy, optionally changing whether the copy is a root message."""

        clone = QRMessage(root=self.is_root if root is None else root)
        clone.entries = {
            tag: value.copy() if isinstance(value, QRMessage) else value
            for tag, value in self.entries.items()
        }
        return clone

    # Codec

    def pack(self) -> str:
        """Serialize to the TLV string.

        A root message gets the Payload Format Indicator first and the CRC
        last. A template is the plain concatenation of its data objects.
        """

        if not self.is_root:
            return build_tlv(self._items())

        indicator = self.entries.get("00", PAYLOAD_FORMAT_INDICATOR)
        if not isinstance(indicator, str) or len(indicator) != 2:
            raise err_invalid_element("Data element 00 must be exactly 2 characters")
        body = TLVItem(tag="00", value=indicator).serialize() + build_tlv(self._items(skip=("00", CRC_TAG)))
        packed = append_crc(body)
        if len(packed) > MAX_PAYLOAD_LENGTH:
            raise err_payload_too_large(len(packed), MAX_PAYLOAD_LENGTH)
        return packed

    def unpack(self, payload: str) -> None:
        """Replace all entries with the data objects parsed from ``payload``.

        Root payloads are checked for the ``000201`` header and a valid CRC
        before anything else, and known template tags are expanded. On
        error the current entries are left untouched.
        """

        if self.is_root:
            _validate(payload)

        entries: dict[str, FieldValue] = {}
        for item in parse_tlv(payload):
            entries[item.tag] = item.value

        if self.is_root:
            for tag, value in entries.items():
                if is_template_tag(tag):
                    entries[tag] = _template_from(tag, value)

        self.entries = entries

    def unpack_template(self, tag: str) -> None:
        """Expand the primitive value at ``tag`` into a nested template."""

        value = self.entries.get(check_tag(tag))
        if isinstance(value, str):
            self.entries[tag] = _template_from(tag, value)

    # Path access

    def get(self, path: str) -> str | None:
        """Return the value at ``path``; templates come back packed."""

        value = self._lookup(path)
        if isinstance(value, QRMessage):
            return value.pack()
        return value

    def set(self, path: str, value: FieldValue | None) -> None:
        """Store ``value`` at ``path``, creating intermediate templates.

        An empty or missing value removes the field instead.
        """

        if value is None or (isinstance(value, str) and not value):
            self.unset(path)
            return

        *parents, tag = _split_path(path)
        node = self
        for parent_tag in parents:
            child = node.entries.get(parent_tag)
            if not isinstance(child, QRMessage):
                child = QRMessage(root=False)
                node.entries[parent_tag] = child
            node = child

        if isinstance(value, QRMessage):
            value = value.copy(root=False)
        node.entries[tag] = value

    def unset(self, path: str) -> None:
        """Remove the field at ``path``.

        If that leaves its template empty, the template is removed from its
        own parent as well. Paths through primitive values are ignored.
        """

        tags = _split_path(path)
        parent: QRMessage | None = None
        node = self
        for parent_tag in tags[:-1]:
            child = node.entries.get(parent_tag)
            if not isinstance(child, QRMessage):
                return
            parent, node = node, child

        node.entries.pop(tags[-1], None)
        if parent is not None and not node.entries:
            logger.debug("pruning empty template", extra={"tag": tags[-2]})
            del parent.entries[tags[-2]]

    def get_tags(self, path: str | None = None) -> list[str] | None:
        """Tags present at the root, or at the template found at ``path``."""

        if path is None:
            return list(self.entries)
        value = self._lookup(path)
        if isinstance(value, QRMessage):
            return list(value.entries)
        return None

    def _lookup(self, path: str) -> FieldValue | None:
        *parents, tag = _split_path(path)
        node = self
        for parent_tag in parents:
            child = node.entries.get(parent_tag)
            if child is None:
                return None
            if not isinstance(child, QRMessage):
                raise err_invalid_path(path)
            node = child
        return node.entries.get(tag)

    def _items(self, skip: tuple[str, ...] = ()) -> Iterator[TLVItem]:
        for tag, value in self.entries.items():
            check_tag(tag)
            if tag in skip:
                continue
            if isinstance(value, QRMessage):
                value = value.pack()
            yield TLVItem(tag=tag, value=value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QRMessage):
            return NotImplemented
        return self.is_root == other.is_root and list(self.entries.items()) == list(other.entries.items())

    def __repr__(self) -> str:
        kind = "root" if self.is_root else "template"
        return f"QRMessage({kind}, {self.to_dict()!r})"


def _split_path(path: str) -> list[str]:
    return [check_tag(tag) for tag in path.split(".")]


def _template_from(tag: str, value: str) -> QRMessage:
    template = QRMessage(root=False)
    template.unpack(value)
    logger.debug("expanded template", extra={"tag": tag, "fields": len(template.entries)})
    return template


def _validate(payload: str) -> None:
    if not payload.startswith(PAYLOAD_HEADER):
        raise err_invalid_header(f"Payload does not start with {PAYLOAD_HEADER}")
    if not verify_crc(payload):
        raise err_checksum_mismatch()
