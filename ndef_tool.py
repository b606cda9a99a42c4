#!/usr/bin/python3
"""Inspect and build NDEF messages from the command line"""

import argparse
import logging
import sys
from typing import List, Optional

import ndef_config
from ndef_errors import InvalidAbbreviationError, NDEFError, NestingDepthError
from ndef_message import NDEFMessage, decode_message
from ndef_record import NDEFRecord
from ndef_smartposter import get_smartposter, is_smartposter, new_smartposter
from ndef_text import NDEFText, get_text, is_text, new_text
from ndef_uri import get_uri, is_uri, new_raw_uri, new_uri

# Configure logging
logging.basicConfig(
    level=getattr(logging, ndef_config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

HEXDUMP_COLUMNS = 16


def hexdump(data: bytes, indent: int = 0) -> List[str]:
    """Hex and ASCII columns, 16 bytes per line"""
    lines = []
    for start in range(0, len(data), HEXDUMP_COLUMNS):
        row = data[start : start + HEXDUMP_COLUMNS]
        hex_part = " ".join(f"{b:02x}" for b in row)
        if len(data) > HEXDUMP_COLUMNS:
            hex_part = hex_part.ljust(HEXDUMP_COLUMNS * 3 - 1)
        ascii_part = "".join(chr(b) if 0x20 <= b <= 0x7E else "." for b in row)
        lines.append(f"{' ' * indent}{hex_part}  {ascii_part}")
    return lines


def _describe_field(label: str, data: bytes, indent: int) -> List[str]:
    pad = " " * indent
    if len(data) <= HEXDUMP_COLUMNS:
        plural = "" if len(data) == 1 else "s"
        return [f"{pad}{label} {len(data)} byte{plural}{hexdump(data, 2)[0]}"]
    return [f"{pad}{label} {len(data)} bytes:"] + hexdump(data, indent + 2)


def describe_record(record: NDEFRecord, depth: int = 0, indent: int = 0) -> List[str]:
    """Hierarchical description of one record"""
    pad = " " * indent
    if record.is_empty():
        return [f"{pad}(empty record)"]

    lines = [f"{pad}NDEF record:"]
    indent += 2
    pad = " " * indent
    lines.append(f"{pad}TNF:   {int(record.tnf)} ({record.tnf_name})")
    if record.record_id:
        lines.extend(_describe_field("ID:   ", record.record_id, indent))
    if record.record_type:
        lines.extend(_describe_field("Type: ", record.record_type, indent))

    show_payload = True
    if is_smartposter(record):
        lines.append(f"{pad}Note:  Record is smart poster")
        try:
            poster = get_smartposter(record, depth)
        except NestingDepthError:
            lines.append(f"{pad}(recursion limited)")
            return lines
        try:
            if poster.uri is not None or poster.text is not None:
                lines.extend(describe_message(poster.message, depth + 1, indent))
                show_payload = False
        finally:
            poster.close()

    elif is_uri(record):
        lines.append(f"{pad}Note:  Record is URI")
        try:
            lines.append(f"{pad}URI:   {get_uri(record)}")
            show_payload = False
        except InvalidAbbreviationError as e:
            lines.append(f"{pad}Error: {e}")

    elif is_text(record):
        lines.append(f"{pad}Note:  Record is text")
        text = get_text(record)
        lines.append(f"{pad}Lang:  {text.lang}")
        lines.append(f"{pad}Text:  {text.text}")
        show_payload = False

    if show_payload:
        if record.payload:
            lines.extend(_describe_field("Payload:", record.payload, indent))
        else:
            lines.append(f"{pad}Payload: empty")
    return lines


def describe_message(message: NDEFMessage, depth: int = 0, indent: int = 0) -> List[str]:
    """Hierarchical description of a message, nested smart posters included"""
    pad = " " * indent
    if depth > ndef_config.NDEF_MAX_NESTING:
        return [f"{pad}(recursion limited)"]

    count = len(message)
    if count:
        lines = [f"{pad}NDEF message: {count} record{'' if count == 1 else 's'}"]
    else:
        lines = [f"{pad}NDEF message: empty"]
    for record in message:
        lines.extend(describe_record(record, depth, indent + 2))
    return lines


def parse_hex(text: str) -> bytes:
    """Accept "d10101...", "D1:01:01" or "d1 01 01" """
    return bytes.fromhex(text.replace(":", "").replace(" ", ""))


def _print_encoded(record: NDEFRecord) -> None:
    with NDEFMessage() as message:
        message.append_move(record)
        print(message.encode().hex())


def cmd_decode(args: argparse.Namespace) -> int:
    try:
        data = parse_hex(args.data)
    except ValueError:
        logger.error("Invalid hex string: %s", args.data)
        return 1

    logger.debug("Decoding %d bytes: %s", len(data), data.hex())
    result = decode_message(data)
    with result.message as message:
        for line in describe_message(message):
            print(line)
    if result.partial:
        logger.warning(
            "Only %d of %d bytes could be decoded", result.consumed, len(data)
        )
    return 0


def cmd_uri(args: argparse.Namespace) -> int:
    _print_encoded(new_raw_uri(args.uri) if args.raw else new_uri(args.uri))
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    _print_encoded(new_text(NDEFText(lang=args.lang, text=args.text)))
    return 0


def cmd_poster(args: argparse.Namespace) -> int:
    text = None
    if args.text is not None:
        text = NDEFText(lang=args.lang, text=args.text)
    _print_encoded(new_smartposter(uri=args.uri, text=text))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ndef-tool", description="Decode and encode NDEF messages"
    )
    commands = parser.add_subparsers(dest="command", required=True)

    decode = commands.add_parser("decode", help="describe a hex-encoded message")
    decode.add_argument("data", help="message bytes as hex")
    decode.set_defaults(func=cmd_decode)

    uri = commands.add_parser("uri", help="encode a URI record")
    uri.add_argument("uri")
    uri.add_argument("--raw", action="store_true", help="do not abbreviate")
    uri.set_defaults(func=cmd_uri)

    text = commands.add_parser("text", help="encode a text record")
    text.add_argument("lang")
    text.add_argument("text")
    text.set_defaults(func=cmd_text)

    poster = commands.add_parser("poster", help="encode a smart poster record")
    poster.add_argument("--uri")
    poster.add_argument("--lang", default="en")
    poster.add_argument("--text")
    poster.set_defaults(func=cmd_poster)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except NDEFError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
