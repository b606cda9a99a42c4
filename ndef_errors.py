#!/usr/bin/python3
"""Exceptions raised by the NDEF codec"""


class NDEFError(Exception):
    """Base class for all NDEF codec errors"""


class NDEFDecodeError(NDEFError, ValueError):
    """Raised when bytes cannot be interpreted as NDEF data"""


class TruncatedInputError(NDEFDecodeError):
    """Not enough bytes left for the fields a record header declares"""

    def __init__(self, available: int, required: int):
        super().__init__(
            f"Not enough data ({available} bytes; expected {required} bytes)"
        )
        self.available = available
        self.required = required


class InvalidAbbreviationError(NDEFDecodeError):
    """A URI record references a slot outside the abbreviation table"""

    def __init__(self, index: int):
        super().__init__(f"Invalid URI abbreviation index 0x{index:02X}")
        self.index = index


class NDEFEncodeError(NDEFError, ValueError):
    """Raised when a record cannot be encoded as given"""


class RecordOwnershipError(NDEFError):
    """A record was used in a way its current owner does not allow"""


class MessageClosedError(NDEFError, RuntimeError):
    """An NDEF message was used after it was closed"""

    def __init__(self):
        super().__init__("NDEF message is closed")


class NestingDepthError(NDEFError):
    """Smart poster nesting went deeper than the configured limit"""

    def __init__(self, depth: int, limit: int):
        super().__init__(f"Nesting depth {depth} exceeds limit of {limit}")
        self.depth = depth
        self.limit = limit
