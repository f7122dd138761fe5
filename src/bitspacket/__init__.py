"""
bitspacket - decoder and evaluator for BITS messages.

A BITS message is a hex-encoded, bit-packed tree of packets. Leaves carry
integer literals; every other packet applies an arithmetic or comparison
operator to its children. Decoding the outermost packet yields one integer.
"""

from importlib.metadata import version as _get_version, PackageNotFoundError

try:
    __version__ = _get_version("bits-packet")
except PackageNotFoundError:
    # Package not installed (running from source)
    __version__ = "0.0.0-dev"

from .errors import (
    BitsError,
    EndOfStreamError,
    UnknownOperatorError,
)
from .bitstream import BitReader
from .operators import PacketType, LengthType, OPERATORS, apply_operator, get_operator
from .packet import (
    LiteralPacket,
    OperatorPacket,
    Packet,
    evaluate,
    iter_packets,
    version_sum,
    format_tree,
)
from .decoder import PacketDecoder, evaluate_hex, decode_hex
from .bitwriter import BitWriter, encode_literal, encode_packet, literal, operator, to_hex

__all__ = [
    "__version__",
    # Main interface
    "PacketDecoder",
    "evaluate_hex",
    "decode_hex",
    "BitReader",
    # Errors
    "BitsError",
    "EndOfStreamError",
    "UnknownOperatorError",
    # Packet model
    "PacketType",
    "LengthType",
    "OPERATORS",
    "apply_operator",
    "get_operator",
    "LiteralPacket",
    "OperatorPacket",
    "Packet",
    "evaluate",
    "iter_packets",
    "version_sum",
    "format_tree",
    # Encoding
    "BitWriter",
    "encode_literal",
    "encode_packet",
    "literal",
    "operator",
    "to_hex",
]
