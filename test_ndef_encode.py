#!/usr/bin/python3
"""Test NDEF record and message encoding"""

import logging
import sys

import pytest

from ndef_buffer import ByteSink
from ndef_codec import encode_record
from ndef_errors import NDEFEncodeError
from ndef_message import NDEFMessage, decode_message, encode_message
from ndef_record import NDEFRecord, RawRecord, TNF

# Configure logging for the test
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


@pytest.fixture
def sample_records():
    """Records covering every TNF-independent layout variation"""
    return [
        NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"U", payload=b"\x04example.com"),
        NDEFRecord(tnf=TNF.MIME, record_type=b"text/plain", payload=b"x" * 300),
        NDEFRecord(tnf=TNF.EXTERNAL, record_type=b"a.com:t", payload=b"p", record_id=b"id"),
        NDEFRecord(tnf=TNF.EMPTY),
        NDEFRecord(tnf=TNF.UNKNOWN, payload=b"\x00" * 255),
    ]


def test_byte_sink_rollback():
    sink = ByteSink()
    sink.extend(b"abc")
    mark = sink.mark()
    sink.append(0x64)
    sink.extend(b"ef")
    sink.rollback(mark)

    assert sink.getvalue() == b"abc"
    assert len(sink) == 3


def test_encode_uri_message():
    record = NDEFRecord(
        tnf=TNF.WELL_KNOWN, record_type=b"U", payload=b"\x02example.com"
    )
    message = NDEFMessage([record])

    assert message.encode() == b"\xd1\x01\x0cU\x02example.com"


def test_payload_255_uses_short_record():
    message = NDEFMessage([NDEFRecord(tnf=TNF.UNKNOWN, payload=b"\xaa" * 255)])
    data = encode_message(message)

    assert data[:3] == b"\xd5\x00\xff"
    assert len(data) == 3 + 255
    assert message.raw_records[0].short_record


def test_payload_256_uses_long_length_field():
    message = NDEFMessage([NDEFRecord(tnf=TNF.UNKNOWN, payload=b"\xaa" * 256)])
    data = encode_message(message)

    assert data[:6] == b"\xc5\x00\x00\x00\x01\x00"
    assert len(data) == 6 + 256
    assert not message.raw_records[0].short_record


def test_encode_record_with_id():
    record = NDEFRecord(
        tnf=TNF.WELL_KNOWN, record_type=b"U", payload=b"\x01abc", record_id=b"id1"
    )

    assert NDEFMessage([record]).encode() == bytes.fromhex("d9010403") + b"U\x01abcid1"


def test_encode_sets_begin_and_end_flags(sample_records):
    message = NDEFMessage(sample_records[:3])
    message.encode()
    raw = message.raw_records

    assert [r.message_begin for r in raw] == [True, False, False]
    assert [r.message_end for r in raw] == [False, False, True]
    assert not any(r.chunked for r in raw)
    assert [r.id_length_present for r in raw] == [False, False, True]
    assert [r.abs_index for r in raw] == [0, 1, 2]
    assert [(r.raw_index, r.raw_len) for r in message] == [(0, 1), (1, 1), (2, 1)]


def test_encode_empty_message():
    message = NDEFMessage()

    assert message.encode() == b""
    assert message.raw_records == ()


def test_round_trip(sample_records):
    message = NDEFMessage(sample_records)
    result = decode_message(message.encode())

    assert not result.partial
    assert result.message == message
    for decoded, original in zip(result.message, sample_records):
        assert decoded.tnf == original.tnf
        assert decoded.record_type == original.record_type
        assert decoded.payload == original.payload
        assert decoded.record_id == original.record_id


def test_short_record_flag_with_large_payload_is_rejected():
    sink = ByteSink()
    sink.extend(b"prefix")
    raw = RawRecord(tnf=TNF.UNKNOWN, payload=b"x" * 256, short_record=True)

    with pytest.raises(NDEFEncodeError):
        encode_record(sink, raw)
    assert sink.getvalue() == b"prefix"


def test_id_without_id_length_flag_is_rejected():
    raw = RawRecord(tnf=TNF.UNKNOWN, payload=b"x", record_id=b"id", short_record=True)

    with pytest.raises(NDEFEncodeError):
        encode_record(ByteSink(), raw)


def test_encode_record_reports_length():
    sink = ByteSink()
    raw = RawRecord(
        tnf=TNF.MIME,
        record_type=b"a/b",
        payload=b"xy",
        message_begin=True,
        message_end=True,
        short_record=True,
    )

    assert encode_record(sink, raw) == 8
    assert sink.getvalue() == b"\xd2\x03\x02a/bxy"


@pytest.mark.parametrize(
    "bad_record",
    [
        NDEFRecord(tnf=TNF.MIME, record_type=b"t" * 256),
        NDEFRecord(tnf=TNF.UNKNOWN, record_id=b"i" * 256),
        NDEFRecord(tnf=9),
    ],
)
def test_failed_encode_leaves_no_raw_records(sample_records, bad_record):
    message = NDEFMessage([sample_records[0], bad_record, sample_records[1]])

    with pytest.raises(NDEFEncodeError):
        message.encode()
    assert message.raw_records == ()
    assert all(r.raw_len == 0 for r in message)
