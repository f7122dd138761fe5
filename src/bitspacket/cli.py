"""
Command-line entry point.

Usage:
    bitspacket message.hex
    echo D2FE28 | bitspacket
    bitspacket --versions message.hex
    bitspacket --tree -v message.hex
"""

import argparse
import logging
import sys
from typing import List, Optional

from . import __version__
from .bitstream import BitReader
from .decoder import PacketDecoder
from .errors import BitsError
from .packet import format_tree, version_sum

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bitspacket",
        description="Decode a hex-encoded BITS message and evaluate it.",
    )
    parser.add_argument(
        "input", nargs="?", default="-",
        help="file holding the hex message ('-' or omitted for stdin)",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--versions", action="store_true", help="print the sum of all version headers")
    mode.add_argument("--tree", action="store_true", help="print the decoded packet tree")
    parser.add_argument("-v", "--verbose", action="store_true", help="log each packet as it is decoded")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r") as f:
        return f.read()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        reader = BitReader.from_hex(_read_input(args.input))
    except (OSError, ValueError) as e:
        print(f"error: cannot read hex input: {e}", file=sys.stderr)
        return 1

    decoder = PacketDecoder(reader)
    try:
        if args.versions or args.tree:
            packet = decoder.read_packet()
            print(version_sum(packet) if args.versions else format_tree(packet))
        else:
            print(decoder.evaluate())
    except BitsError as e:
        logger.debug("decode failed at depth %d", e.depth)
        print(f"error: {e}", file=sys.stderr)
        return 1
    except (ValueError, IndexError) as e:
        # operator applied to the wrong number of sub-packets
        print(f"error: malformed packet: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
