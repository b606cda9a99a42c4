#!/usr/bin/python3
"""Text well-known records (type "T")"""

from dataclasses import dataclass
from typing import Optional

from ndef_errors import NDEFEncodeError
from ndef_record import NDEFRecord, TNF

TEXT_RECORD_TYPE = b"T"

STATUS_UTF16 = 0x80
STATUS_LANG_LENGTH = 0x3F

MIN_LANG_LENGTH = 2
MIN_TEXT_PAYLOAD_LENGTH = 4


@dataclass
class NDEFText:
    """Language code and text of a text record"""

    lang: str
    text: str
    # Payload was flagged UTF-16; `text` then holds a lossy UTF-8 reading
    utf16: bool = False


def is_text(record: NDEFRecord) -> bool:
    """Check if this is a text record"""
    return (
        record.tnf == TNF.WELL_KNOWN
        and record.record_type == TEXT_RECORD_TYPE
        and len(record.payload) >= MIN_TEXT_PAYLOAD_LENGTH
    )


def get_text(record: NDEFRecord) -> Optional[NDEFText]:
    """Get language and text of a text record, or None for any other record"""
    if not is_text(record):
        return None

    status = record.payload[0]
    lang_len = status & STATUS_LANG_LENGTH
    lang = record.payload[1 : 1 + lang_len]
    text = record.payload[1 + lang_len :]

    return NDEFText(
        lang=lang.decode("ascii", errors="ignore"),
        text=text.decode("utf-8", errors="ignore"),
        utf16=bool(status & STATUS_UTF16),
    )


def new_text(text: NDEFText) -> NDEFRecord:
    """
    Create a UTF-8 text record.

    Raises:
        NDEFEncodeError: missing or too short/long language, or empty text
    """
    if not text.lang or not text.text:
        raise NDEFEncodeError("Text record needs both a language and text")
    try:
        lang = text.lang.encode("ascii")
    except UnicodeEncodeError as e:
        raise NDEFEncodeError(f"Language code is not ASCII: {text.lang!r}") from e
    if not MIN_LANG_LENGTH <= len(lang) <= STATUS_LANG_LENGTH:
        raise NDEFEncodeError(
            f"Language code must be {MIN_LANG_LENGTH}-{STATUS_LANG_LENGTH} "
            f"bytes, got {len(lang)}"
        )

    return NDEFRecord(
        tnf=TNF.WELL_KNOWN,
        record_type=TEXT_RECORD_TYPE,
        payload=bytes([len(lang)]) + lang + text.text.encode("utf-8"),
    )
