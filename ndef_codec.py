#!/usr/bin/python3
"""Binary layout of a single NDEF record"""

import logging
import struct
from typing import Tuple

from ndef_buffer import ByteSink
from ndef_errors import NDEFEncodeError, TruncatedInputError
from ndef_record import (
    FLAG_CF,
    FLAG_IL,
    FLAG_MB,
    FLAG_ME,
    FLAG_SR,
    FLAG_TNF,
    MAX_ID_LENGTH,
    MAX_PAYLOAD_LENGTH,
    MAX_SHORT_PAYLOAD_LENGTH,
    MAX_TYPE_LENGTH,
    RawRecord,
)

logger = logging.getLogger(__name__)

MIN_RECORD_LENGTH = 3


def header_length(flags: int) -> int:
    """Size of the header fields (flags, lengths) implied by a flags byte"""
    length = 3 if flags & FLAG_SR else 6
    if flags & FLAG_IL:
        length += 1
    return length


def decode_record(data: bytes, offset: int = 0) -> Tuple[RawRecord, int]:
    """
    Decode a single NDEF record starting at `offset`.

    Layout: flags, type length, payload length (1 byte for short records,
    else 4 bytes big-endian), [ID length], type, payload, [ID].

    Returns:
        (record, new_offset)

    Raises:
        TruncatedInputError: fewer bytes remain than the header declares.
            Nothing is consumed in that case.
    """
    available = len(data) - offset
    if available < MIN_RECORD_LENGTH:
        logger.debug(
            "Decode error: Not enough data (%d bytes; expected %d+ bytes)",
            available,
            MIN_RECORD_LENGTH,
        )
        raise TruncatedInputError(available, MIN_RECORD_LENGTH)

    # Read the TNF and flags byte
    tnf_flags = data[offset]
    pos = offset + 1

    required = header_length(tnf_flags)
    if available < required:
        logger.debug(
            "Decode error: Not enough data (%d bytes; expected %d+ bytes)",
            available,
            required,
        )
        raise TruncatedInputError(available, required)

    type_length = data[pos]
    pos += 1

    if tnf_flags & FLAG_SR:
        payload_length = data[pos]
        pos += 1
    else:
        (payload_length,) = struct.unpack_from(">I", data, pos)
        pos += 4

    id_length = 0
    if tnf_flags & FLAG_IL:
        id_length = data[pos]
        pos += 1

    required = (pos - offset) + type_length + payload_length + id_length
    if available < required:
        logger.debug(
            "Decode error: Not enough data (%d bytes; expected %d bytes)",
            available,
            required,
        )
        raise TruncatedInputError(available, required)

    record_type = data[pos : pos + type_length]
    pos += type_length

    payload = data[pos : pos + payload_length]
    pos += payload_length

    record_id = data[pos : pos + id_length]
    pos += id_length

    record = RawRecord(
        tnf=tnf_flags & FLAG_TNF,
        record_type=record_type,
        payload=payload,
        record_id=record_id,
        message_begin=bool(tnf_flags & FLAG_MB),
        message_end=bool(tnf_flags & FLAG_ME),
        chunked=bool(tnf_flags & FLAG_CF),
        short_record=bool(tnf_flags & FLAG_SR),
        id_length_present=bool(tnf_flags & FLAG_IL),
    )
    return record, pos


def check_record(raw: RawRecord) -> None:
    """Reject raw records whose fields do not fit their flags"""
    if not 0 <= raw.tnf <= FLAG_TNF:
        raise NDEFEncodeError(f"TNF out of range: {raw.tnf}")
    if len(raw.record_type) > MAX_TYPE_LENGTH:
        raise NDEFEncodeError(
            f"Type too long ({len(raw.record_type)} bytes; max {MAX_TYPE_LENGTH})"
        )
    if len(raw.payload) > MAX_PAYLOAD_LENGTH:
        raise NDEFEncodeError(f"Payload too long ({len(raw.payload)} bytes)")
    if raw.short_record and len(raw.payload) > MAX_SHORT_PAYLOAD_LENGTH:
        raise NDEFEncodeError(
            f"Short record with {len(raw.payload)} byte payload "
            f"(max {MAX_SHORT_PAYLOAD_LENGTH})"
        )
    if raw.record_id:
        if not raw.id_length_present:
            raise NDEFEncodeError("Record has an ID but no ID length flag")
        if len(raw.record_id) > MAX_ID_LENGTH:
            raise NDEFEncodeError(
                f"ID too long ({len(raw.record_id)} bytes; max {MAX_ID_LENGTH})"
            )


def encode_record(sink: ByteSink, raw: RawRecord) -> int:
    """
    Encode a single NDEF record into `sink`, mirroring decode_record's layout.

    The payload length width follows the record's own short_record flag.
    On failure the sink is rolled back to its length before the call.

    Returns:
        Number of bytes written
    """
    try:
        check_record(raw)
    except NDEFEncodeError as e:
        logger.error("Encode error: %s", e)
        raise

    mark = sink.mark()
    try:
        sink.append(raw.flags)
        sink.append(len(raw.record_type))
        if raw.short_record:
            sink.append(len(raw.payload))
        else:
            sink.extend(struct.pack(">I", len(raw.payload)))
        if raw.id_length_present:
            sink.append(len(raw.record_id or b""))
        sink.extend(raw.record_type)
        sink.extend(raw.payload)
        if raw.record_id:
            sink.extend(raw.record_id)
    except Exception:
        sink.rollback(mark)
        raise

    return len(sink) - mark
