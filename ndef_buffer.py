#!/usr/bin/python3
"""Append-only byte buffer used while encoding NDEF data"""

from typing import Iterable, Union


class ByteSink:
    """Growable output buffer with rollback to an earlier length"""

    def __init__(self):
        self._buf = bytearray()

    def __len__(self) -> int:
        return len(self._buf)

    def append(self, value: int) -> None:
        """Append a single byte (0-255)"""
        self._buf.append(value)

    def extend(self, data: Union[bytes, bytearray, Iterable[int]]) -> None:
        """Append several bytes"""
        self._buf.extend(data)

    def mark(self) -> int:
        """Current length, to be handed back to rollback()"""
        return len(self._buf)

    def rollback(self, mark: int) -> None:
        """Drop everything written after `mark`"""
        del self._buf[mark:]

    def getvalue(self) -> bytes:
        return bytes(self._buf)
