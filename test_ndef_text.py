#!/usr/bin/python3
"""Test text record construction and decoding"""

import logging
import sys

import pytest

from ndef_errors import NDEFEncodeError
from ndef_record import NDEFRecord, TNF
from ndef_text import NDEFText, get_text, is_text, new_text

# Configure logging for the test
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def test_new_text():
    record = new_text(NDEFText(lang="en", text="Hello"))

    assert record.tnf == TNF.WELL_KNOWN
    assert record.record_type == b"T"
    assert record.payload == b"\x02enHello"
    assert is_text(record)


def test_get_text():
    record = new_text(NDEFText(lang="en-US", text="Grüße"))
    logger.info("Text payload: %s", record.payload.hex())

    assert get_text(record) == NDEFText(lang="en-US", text="Grüße")


def test_get_text_utf16_flag():
    record = NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"T", payload=b"\x82enhi")
    text = get_text(record)

    assert text.utf16
    assert text.lang == "en"


@pytest.mark.parametrize(
    "text",
    [
        NDEFText(lang="en", text=""),
        NDEFText(lang="e", text="Hello"),
        NDEFText(lang="", text="Hello"),
        NDEFText(lang=None, text="Hello"),
        NDEFText(lang="x" * 64, text="Hello"),
        NDEFText(lang="ëñ", text="Hello"),
    ],
)
def test_new_text_rejects_invalid_input(text):
    with pytest.raises(NDEFEncodeError):
        new_text(text)


def test_is_text_requires_minimum_payload():
    assert not is_text(NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"T", payload=b"\x02en"))
    assert not is_text(NDEFRecord(tnf=TNF.MIME, record_type=b"T", payload=b"\x02enHi"))
    assert get_text(NDEFRecord(tnf=TNF.WELL_KNOWN, record_type=b"U", payload=b"\x02enHi")) is None
