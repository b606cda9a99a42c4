#!/usr/bin/python3
"""URI well-known records (type "U") with prefix abbreviation"""

import logging
from typing import Optional, Tuple

from ndef_errors import InvalidAbbreviationError
from ndef_record import NDEFRecord, TNF

logger = logging.getLogger(__name__)

URI_RECORD_TYPE = b"U"

# Index is the identifier code stored in the first payload byte
URI_ABBREVIATIONS: Tuple[str, ...] = (
    "",
    "http://www.",
    "https://www.",
    "http://",
    "https://",
    "tel:",
    "mailto:",
    "ftp://anonymous:anonymous@",
    "ftp://ftp.",
    "ftps://",
    "sftp://",
    "smb://",
    "nfs://",
    "ftp://",
    "dav://",
    "news:",
    "telnet://",
    "imap:",
    "rtsp://",
    "urn:",
    "pop:",
    "sip:",
    "sips:",
    "tftp:",
    "btspp://",
    "btl2cap://",
    "btgoep://",
    "tcpobex://",
    "irdaobex://",
    "file://",
    "urn:epc:id:",
    "urn:epc:tag:",
    "urn:epc:pat:",
    "urn:epc:raw:",
    "urn:epc:",
    "urn:nfc:",
)


def is_uri(record: NDEFRecord) -> bool:
    """Check if this is a URI record"""
    return (
        record.tnf == TNF.WELL_KNOWN
        and record.record_type == URI_RECORD_TYPE
        and len(record.payload) >= 1
    )


def get_uri(record: NDEFRecord) -> Optional[str]:
    """
    Get the full URI of a URI record, or None for any other record.

    The suffix ends at the payload end or at the first NUL byte.

    Raises:
        InvalidAbbreviationError: the identifier code is not in the table
    """
    if not is_uri(record):
        return None

    uri_code = record.payload[0]
    if uri_code >= len(URI_ABBREVIATIONS):
        raise InvalidAbbreviationError(uri_code)

    suffix = record.payload[1:].split(b"\x00", 1)[0]
    return URI_ABBREVIATIONS[uri_code] + suffix.decode("utf-8", errors="ignore")


def find_abbreviation(uri: str) -> Tuple[int, str]:
    """
    Find the longest table entry that prefixes `uri`.

    Returns:
        (identifier code, remaining suffix); code 0 when nothing matches
    """
    match = 0
    match_len = 0
    for code, prefix in enumerate(URI_ABBREVIATIONS):
        if len(prefix) > match_len and uri.startswith(prefix):
            match = code
            match_len = len(prefix)
    return match, uri[match_len:]


def _new_uri(uri_code: int, suffix: str) -> NDEFRecord:
    return NDEFRecord(
        tnf=TNF.WELL_KNOWN,
        record_type=URI_RECORD_TYPE,
        payload=bytes([uri_code]) + suffix.encode("utf-8"),
    )


def new_uri(uri: str) -> NDEFRecord:
    """Create a URI record, abbreviating the longest known prefix"""
    uri_code, suffix = find_abbreviation(uri)
    logger.debug("URI %r abbreviated with code 0x%02X", uri, uri_code)
    return _new_uri(uri_code, suffix)


def new_raw_uri(uri: str) -> NDEFRecord:
    """Create a URI record holding `uri` verbatim (identifier code 0)"""
    return _new_uri(0, uri)
