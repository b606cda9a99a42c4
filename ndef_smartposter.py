#!/usr/bin/python3
"""Smart poster well-known records (type "Sp"): a nested NDEF message"""

import logging
from dataclasses import dataclass
from typing import Optional

import ndef_config
from ndef_errors import InvalidAbbreviationError, NDEFEncodeError, NestingDepthError
from ndef_message import NDEFMessage, decode_message
from ndef_record import NDEFRecord, TNF
from ndef_text import NDEFText, get_text, is_text, new_text
from ndef_uri import get_uri, is_uri, new_uri

logger = logging.getLogger(__name__)

SMARTPOSTER_RECORD_TYPE = b"Sp"


@dataclass
class NDEFSmartPoster:
    """Inner message of a smart poster with its first URI and text entries"""

    message: Optional[NDEFMessage] = None
    uri: Optional[str] = None
    text: Optional[NDEFText] = None

    def to_record(self) -> NDEFRecord:
        return new_smartposter(self.message, self.uri, self.text)

    def close(self) -> None:
        """Release the inner message"""
        if self.message is not None and not self.message.closed:
            self.message.close()


def is_smartposter(record: NDEFRecord) -> bool:
    """Check if this is a smart poster record"""
    return (
        record.tnf == TNF.WELL_KNOWN
        and record.record_type == SMARTPOSTER_RECORD_TYPE
        and len(record.payload) > 0
    )


def get_smartposter(record: NDEFRecord, depth: int = 0) -> Optional[NDEFSmartPoster]:
    """
    Decode the inner message of a smart poster record, or None for any other
    record.

    `depth` is the nesting level of `record` itself, 0 for a top-level record.

    Raises:
        NestingDepthError: the inner message would sit deeper than
            NDEF_MAX_NESTING
    """
    if not is_smartposter(record):
        return None
    if depth + 1 > ndef_config.NDEF_MAX_NESTING:
        raise NestingDepthError(depth + 1, ndef_config.NDEF_MAX_NESTING)

    result = decode_message(record.payload)
    if result.partial:
        logger.warning(
            "Smart poster payload only partially decoded (%d of %d bytes)",
            result.consumed,
            len(record.payload),
        )
    poster = NDEFSmartPoster(message=result.message)

    for inner in result.message:
        if not is_uri(inner):
            continue
        try:
            poster.uri = get_uri(inner)
        except InvalidAbbreviationError as e:
            logger.warning("Skipping URI record in smart poster: %s", e)
            continue
        break

    for inner in result.message:
        if is_text(inner):
            poster.text = get_text(inner)
            break

    return poster


def new_smartposter(
    message: Optional[NDEFMessage] = None,
    uri: Optional[str] = None,
    text: Optional[NDEFText] = None,
) -> NDEFRecord:
    """
    Create a smart poster record.

    `message` is copied, never modified. A URI record and a text record are
    appended to the copy unless it already holds one of that kind.

    Raises:
        NDEFEncodeError: the poster would be empty, or a part is invalid
    """
    inner = message.clone() if message is not None else NDEFMessage()
    try:
        has_uri = any(is_uri(record) for record in inner)
        has_text = any(is_text(record) for record in inner)

        if uri and not has_uri:
            inner.append_move(new_uri(uri))
        if text is not None and not has_text:
            inner.append_move(new_text(text))

        if not len(inner):
            raise NDEFEncodeError("Smart poster needs a message, a URI or text")
        payload = inner.encode()
    finally:
        inner.close()

    return NDEFRecord(
        tnf=TNF.WELL_KNOWN,
        record_type=SMARTPOSTER_RECORD_TYPE,
        payload=payload,
    )
