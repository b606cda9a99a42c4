#!/usr/bin/python3
"""NDEF record data model: abstract (logical) and raw (wire-level) records"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional

from ndef_errors import RecordOwnershipError

# Flag bitmasks of the record header byte
FLAG_MB = 0x80  # Message Begin
FLAG_ME = 0x40  # Message End
FLAG_CF = 0x20  # Chunk Flag
FLAG_SR = 0x10  # Short Record
FLAG_IL = 0x08  # ID Length present
FLAG_TNF = 0x07  # Type Name Format

MAX_TYPE_LENGTH = 0xFF
MAX_ID_LENGTH = 0xFF
MAX_SHORT_PAYLOAD_LENGTH = 0xFF
MAX_PAYLOAD_LENGTH = 0xFFFFFFFF


class TNF(IntEnum):
    """Type Name Format of a record"""

    EMPTY = 0x00
    WELL_KNOWN = 0x01
    MIME = 0x02
    URI = 0x03
    EXTERNAL = 0x04
    UNKNOWN = 0x05
    UNCHANGED = 0x06
    RESERVED = 0x07


TNF_NAMES: Dict[int, str] = {
    TNF.EMPTY: "Empty",
    TNF.WELL_KNOWN: "NFC Forum well-known type",
    TNF.MIME: "Media type (RFC 2046)",
    TNF.URI: "Absolute URI (RFC 3986)",
    TNF.EXTERNAL: "NFC Forum external type",
    TNF.UNKNOWN: "Unknown",
    TNF.UNCHANGED: "Unchanged",
    TNF.RESERVED: "Reserved",
}


def get_tnf_name(tnf: int) -> str:
    """Get human-readable TNF name"""
    return TNF_NAMES.get(tnf, f"Unknown ({tnf})")


@dataclass
class RecordFields:
    """Fields shared by abstract and raw records"""

    tnf: int = TNF.EMPTY
    record_type: bytes = b""
    payload: bytes = b""
    record_id: Optional[bytes] = None

    def __post_init__(self):
        if 0 <= self.tnf <= FLAG_TNF:
            self.tnf = TNF(self.tnf)
        self.record_type = bytes(self.record_type)
        self.payload = bytes(self.payload)
        # An empty ID is the same as no ID on the wire
        if self.record_id:
            self.record_id = bytes(self.record_id)
        else:
            self.record_id = None

    @property
    def tnf_name(self) -> str:
        return get_tnf_name(self.tnf)

    @property
    def type_str(self) -> str:
        return self.record_type.decode("utf-8", errors="ignore")

    @property
    def id_str(self) -> str:
        return self.record_id.decode("utf-8", errors="ignore") if self.record_id else ""

    @property
    def payload_str(self) -> str:
        return self.payload.decode("utf-8", errors="ignore")

    @property
    def has_id(self) -> bool:
        return self.record_id is not None

    def is_empty(self) -> bool:
        """True for records carrying no type, payload or ID"""
        return self.tnf == TNF.EMPTY or not (
            self.record_type or self.payload or self.record_id
        )


@dataclass
class NDEFRecord(RecordFields):
    """
    Abstract NDEF record without encoding details.

    `raw_index` and `raw_len` locate the raw records this record was assembled
    from or encoded to; both are 0 when no raw records are cached.
    Equality only considers the logical content.
    """

    raw_index: int = field(default=0, compare=False)
    raw_len: int = field(default=0, compare=False)
    _owner: Optional[Any] = field(default=None, repr=False, compare=False)

    @property
    def owned(self) -> bool:
        """Whether a message has adopted this record"""
        return self._owner is not None

    def clone(self) -> "NDEFRecord":
        """Deep copy with no owner"""
        return NDEFRecord(
            tnf=self.tnf,
            record_type=self.record_type,
            payload=self.payload,
            record_id=self.record_id,
            raw_index=self.raw_index,
            raw_len=self.raw_len,
        )

    def destroy(self) -> None:
        """
        Release the type, payload and ID buffers.

        Raises:
            RecordOwnershipError: the record was moved into a message, which
                now owns its buffers
        """
        if self._owner is not None:
            raise RecordOwnershipError(
                "Record is owned by a message and cannot be destroyed directly"
            )
        self._release()

    def _release(self) -> None:
        self.record_type = b""
        self.payload = b""
        self.record_id = None
        self.raw_index = 0
        self.raw_len = 0
        self._owner = None


@dataclass
class RawRecord(RecordFields):
    """Wire-level record: the record fields plus the header flags"""

    message_begin: bool = False
    message_end: bool = False
    chunked: bool = False
    short_record: bool = False
    id_length_present: bool = False
    abs_index: int = 0

    @property
    def flags(self) -> int:
        """Header byte built from the flags and the TNF"""
        flags = self.tnf & FLAG_TNF
        if self.message_begin:
            flags |= FLAG_MB
        if self.message_end:
            flags |= FLAG_ME
        if self.chunked:
            flags |= FLAG_CF
        if self.short_record:
            flags |= FLAG_SR
        if self.id_length_present:
            flags |= FLAG_IL
        return flags

    def to_record(self) -> NDEFRecord:
        """Promote to an abstract record spanning just this raw record"""
        return NDEFRecord(
            tnf=self.tnf,
            record_type=self.record_type,
            payload=self.payload,
            record_id=self.record_id,
            raw_len=1,
        )
