#!/usr/bin/python3
"""Test URI record construction and decoding"""

import logging
import sys

import pytest

from ndef_errors import InvalidAbbreviationError
from ndef_message import NDEFMessage, decode_message
from ndef_record import NDEFRecord, TNF
from ndef_uri import (
    URI_ABBREVIATIONS,
    find_abbreviation,
    get_uri,
    is_uri,
    new_raw_uri,
    new_uri,
)

# Configure logging for the test
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def uri_record(payload: bytes) -> NDEFRecord:
    return NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"U", payload=payload)


def test_abbreviation_table():
    assert len(URI_ABBREVIATIONS) == 0x24
    assert URI_ABBREVIATIONS[0x02] == "https://www."
    assert URI_ABBREVIATIONS[0x23] == "urn:nfc:"


def test_new_uri_abbreviates():
    record = new_uri("https://www.example.com")

    assert is_uri(record)
    assert record.payload == b"\x02example.com"
    assert get_uri(record) == "https://www.example.com"


def test_new_uri_prefers_longest_prefix():
    assert find_abbreviation("ftp://ftp.example.com") == (0x08, "example.com")
    assert find_abbreviation("urn:epc:id:sgtin") == (0x1E, "sgtin")
    assert find_abbreviation("urn:x") == (0x13, "x")
    assert find_abbreviation("gopher://x") == (0x00, "gopher://x")


def test_new_raw_uri_keeps_string():
    record = new_raw_uri("https://www.example.com")

    assert record.payload == b"\x00https://www.example.com"
    assert get_uri(record) == "https://www.example.com"


@pytest.mark.parametrize(
    "uri",
    ["tel:+15551234", "mailto:someone@example.com", "http://", "https://ünïcode.example/"],
)
def test_uri_survives_message_round_trip(uri):
    data = NDEFMessage([new_uri(uri)]).encode()
    logger.info("%s encodes to %s", uri, data.hex())
    record = decode_message(data).message[0]

    assert get_uri(record) == uri


def test_get_uri_of_other_record():
    assert get_uri(NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"T", payload=b"\x02en")) is None
    assert get_uri(NDEFRecord(tnf=TNF.MIME, record_type=b"U", payload=b"\x01x")) is None
    assert not is_uri(uri_record(b""))


def test_get_uri_invalid_abbreviation():
    with pytest.raises(InvalidAbbreviationError) as excinfo:
        get_uri(uri_record(b"\x24example"))

    assert excinfo.value.index == 0x24


def test_get_uri_stops_at_nul():
    assert get_uri(uri_record(b"\x05123\x00junk")) == "tel:123"
