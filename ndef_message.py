#!/usr/bin/python3
"""NDEF message: the record store and the whole-message codec"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

from ndef_buffer import ByteSink
from ndef_codec import decode_record, encode_record
from ndef_errors import MessageClosedError, RecordOwnershipError, TruncatedInputError
from ndef_record import MAX_SHORT_PAYLOAD_LENGTH, NDEFRecord, RawRecord

logger = logging.getLogger(__name__)


class NDEFMessage:
    """
    Ordered collection of abstract records plus the raw records of the last
    encode or decode.

    The raw records are a cache: any structural edit of the abstract records
    drops them and resets every record's raw span. Records inserted with the
    copy variants are duplicated; records inserted with the move variants are
    adopted and may no longer be destroyed by the caller.
    """

    def __init__(self, records: Optional[Iterable[NDEFRecord]] = None):
        self._records: List[NDEFRecord] = []
        self._raw_records: List[RawRecord] = []
        self._closed = False
        if records is not None:
            self.append(*records)

    def __enter__(self) -> "NDEFMessage":
        self._check_open()
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if not self._closed:
            self.close()

    def __len__(self) -> int:
        self._check_open()
        return len(self._records)

    def __iter__(self) -> Iterator[NDEFRecord]:
        self._check_open()
        return iter(tuple(self._records))

    def __getitem__(self, index: int) -> NDEFRecord:
        self._check_open()
        return self._records[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, NDEFMessage):
            return NotImplemented
        return self.records == other.records

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        if self._closed:
            return "NDEFMessage(closed)"
        return (
            f"NDEFMessage(records={len(self._records)}, "
            f"raw_records={len(self._raw_records)})"
        )

    def _check_open(self) -> None:
        if self._closed:
            raise MessageClosedError()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def records(self) -> Tuple[NDEFRecord, ...]:
        """Abstract records, in message order"""
        self._check_open()
        return tuple(self._records)

    @property
    def raw_records(self) -> Tuple[RawRecord, ...]:
        """Raw records of the last encode or decode"""
        self._check_open()
        return tuple(self._raw_records)

    # Insertion

    def insert(self, index: int, *records: NDEFRecord) -> None:
        """Insert copies of `records` at `index`; an out-of-range index appends"""
        self._insert(index, records, move=False)

    def append(self, *records: NDEFRecord) -> None:
        """Append copies of `records`"""
        self._insert(len(self._records), records, move=False)

    def insert_move(self, index: int, *records: NDEFRecord) -> None:
        """
        Insert `records` themselves at `index`; an out-of-range index, negative
        included, appends.

        On success the message owns the records; on failure they are untouched
        and still belong to the caller.
        """
        self._insert(index, records, move=True)

    def append_move(self, *records: NDEFRecord) -> None:
        """Append `records` themselves, see insert_move()"""
        self._insert(len(self._records), records, move=True)

    def _insert(self, index: int, records: Iterable[NDEFRecord], move: bool) -> None:
        self._check_open()
        batch = list(records)
        for record in batch:
            if not isinstance(record, NDEFRecord):
                raise TypeError(f"Expected NDEFRecord, got {type(record).__name__}")
            if move and record.owned:
                raise RecordOwnershipError("Record is already owned by a message")
        if move and len({id(record) for record in batch}) != len(batch):
            raise RecordOwnershipError("Same record moved more than once")

        if move:
            adopted = batch
        else:
            adopted = []
            try:
                for record in batch:
                    adopted.append(record.clone())
            except MemoryError:
                for record in adopted:
                    record._release()  # pylint: disable=protected-access
                raise

        if not 0 <= index <= len(self._records):
            index = len(self._records)
        # Opens a gap at `index`; existing records keep their relative order
        self._records[index:index] = adopted

        for record in adopted:
            record._owner = self  # pylint: disable=protected-access
        self.raw_clear()

    # Removal

    def splice(self, index: int, count: int = 1) -> int:
        """
        Remove `count` records starting at `index` and release their buffers.

        Returns:
            Number of records removed
        """
        self._check_open()
        if count <= 0 or not 0 <= index < len(self._records):
            return 0
        removed = self._records[index : index + count]
        del self._records[index : index + count]
        for record in removed:
            record._release()  # pylint: disable=protected-access
        self.raw_clear()
        logger.debug("Spliced %d record(s) at index %d", len(removed), index)
        return len(removed)

    def clear(self) -> None:
        """Delete all abstract and raw records"""
        self._check_open()
        records, self._records = self._records, []
        for record in records:
            record._release()  # pylint: disable=protected-access
        self._raw_records = []

    def raw_clear(self) -> None:
        """Delete all raw records but keep the abstract ones"""
        self._check_open()
        self._raw_records = []
        for record in self._records:
            record.raw_index = 0
            record.raw_len = 0

    # Lifecycle

    def clone(self) -> "NDEFMessage":
        """Deep copy of both the abstract and the raw records"""
        self._check_open()
        out = NDEFMessage()
        records = [record.clone() for record in self._records]
        for record in records:
            record._owner = out  # pylint: disable=protected-access
        out._records = records
        out._raw_records = [dataclasses.replace(raw) for raw in self._raw_records]
        return out

    def close(self) -> None:
        """Release every record; the message is unusable afterwards"""
        self.clear()
        self._closed = True

    # Codec

    @classmethod
    def decode(cls, data: bytes) -> "DecodeResult":
        return decode_message(data)

    def encode(self) -> bytes:
        return encode_message(self)

    def _load_raw(self, raw_records: List[RawRecord]) -> bool:
        """
        Replace the contents with records assembled from decoded raw records.

        A chunked raw record opens a run that the next non-chunked or
        end-flagged raw record closes; the run becomes one abstract record
        with the TNF, type and ID of its first raw record and the joined
        payload of all of them.

        Returns:
            True when the input ended inside an open chunk run
        """
        records: List[NDEFRecord] = []
        run_start: Optional[int] = None
        parts: List[bytes] = []

        def flush(end: int) -> None:
            head = raw_records[run_start]
            records.append(
                NDEFRecord(
                    tnf=head.tnf,
                    record_type=head.record_type,
                    payload=b"".join(parts),
                    record_id=head.record_id,
                    raw_index=run_start,
                    raw_len=end - run_start + 1,
                )
            )

        for i, raw in enumerate(raw_records):
            raw.abs_index = len(records)
            if run_start is None and not raw.chunked:
                record = raw.to_record()
                record.raw_index = i
                records.append(record)
                continue
            if run_start is None:
                run_start = i
                parts = []
            parts.append(raw.payload)
            if not raw.chunked or raw.message_end:
                flush(i)
                run_start = None

        dangling = run_start is not None
        if dangling:
            logger.warning(
                "Message ends inside a chunked record (%d raw records)",
                len(raw_records) - run_start,
            )
            flush(len(raw_records) - 1)

        for record in records:
            record._owner = self  # pylint: disable=protected-access
        self._records = records
        self._raw_records = raw_records
        return dangling


@dataclass
class DecodeResult:
    """Outcome of decoding a byte stream"""

    message: NDEFMessage
    consumed: int
    partial: bool


def decode_message(data: bytes) -> DecodeResult:
    """
    Decode all NDEF records in `data`.

    Decoding stops at the first record that does not parse; everything before
    it stays decoded and the result is flagged partial.
    """
    data = bytes(data)
    raw_records: List[RawRecord] = []
    offset = 0
    partial = False

    while offset < len(data):
        try:
            record, offset = decode_record(data, offset)
        except TruncatedInputError as e:
            logger.debug("Stopped decoding at offset %d: %s", offset, e)
            partial = True
            break
        raw_records.append(record)

    message = NDEFMessage()
    if message._load_raw(raw_records):  # pylint: disable=protected-access
        partial = True

    if partial:
        logger.warning(
            "Decoding is partial (%d of %d bytes consumed)", offset, len(data)
        )
    return DecodeResult(message=message, consumed=offset, partial=partial)


def encode_message(message: NDEFMessage) -> bytes:
    """
    Encode every abstract record of `message` into one byte string.

    Begin/end flags mark the first and last record, short records are used
    whenever the payload fits a single length byte, and nothing is chunked.
    The raw records are cached on the message only when every record encoded.
    """
    records = message.records
    message.raw_clear()

    sink = ByteSink()
    raw_records: List[RawRecord] = []
    last = len(records) - 1
    for i, record in enumerate(records):
        raw = RawRecord(
            tnf=record.tnf,
            record_type=record.record_type,
            payload=record.payload,
            record_id=record.record_id,
            message_begin=i == 0,
            message_end=i == last,
            chunked=False,
            short_record=len(record.payload) <= MAX_SHORT_PAYLOAD_LENGTH,
            id_length_present=record.record_id is not None,
            abs_index=i,
        )
        encode_record(sink, raw)
        raw_records.append(raw)

    message._raw_records = raw_records  # pylint: disable=protected-access
    for i, record in enumerate(records):
        record.raw_index = i
        record.raw_len = 1
    return sink.getvalue()
