"""
BITS encoder.

The inverse of the decoder: writes literal and operator packets MSB-first,
in either sub-packet framing mode, and packs the result into bytes.
"""

from typing import Dict, List, Sequence

import numpy as np

from .operators import LengthType, PacketType
from .packet import LiteralPacket, OperatorPacket, Packet, iter_packets

VERSION_BITS = 3
TYPE_BITS = 3
COUNT_BITS = 11
LENGTH_BITS = 15
HEADER_BITS = VERSION_BITS + TYPE_BITS


class BitWriter:
    """Accumulates bits MSB-first and packs them into zero-padded bytes."""

    def __init__(self):
        self._bits: List[int] = []

    @property
    def bit_length(self) -> int:
        return len(self._bits)

    def write_bits(self, value: int, length: int):
        """Write 'length' bits of value (MSB-first)."""
        if value < 0 or value >> length:
            raise ValueError(f"{value} does not fit in {length} bits")
        for i in range(length - 1, -1, -1):
            self._bits.append((value >> i) & 1)

    def extend(self, other: "BitWriter"):
        """Append every bit written to another writer."""
        self._bits.extend(other._bits)

    def to_bytes(self) -> bytes:
        """Pack the bits, padding the final byte with zeros."""
        return np.packbits(np.array(self._bits, dtype=np.uint8)).tobytes()

    def to_hex(self) -> str:
        return self.to_bytes().hex().upper()


def encode_literal(writer: BitWriter, value: int):
    """Write value as 5-bit groups, continuation bit set on all but the last."""
    if value < 0:
        raise ValueError(f"Literals are unsigned, got {value}")
    nibbles = []
    while True:
        nibbles.append(value & 0xF)
        value >>= 4
        if not value:
            break
    nibbles.reverse()
    for i, nibble in enumerate(nibbles):
        more = 1 if i < len(nibbles) - 1 else 0
        writer.write_bits((more << 4) | nibble, 5)


def _literal_bits(value: int) -> int:
    return HEADER_BITS + 5 * max(1, (value.bit_length() + 3) // 4)


def _bit_sizes(packet: Packet) -> Dict[int, int]:
    """Encoded size of every packet in the tree, keyed by id()."""
    sizes: Dict[int, int] = {}
    # Reversed pre-order visits every child before its parent
    for p in reversed(list(iter_packets(packet))):
        if isinstance(p, LiteralPacket):
            sizes[id(p)] = _literal_bits(p.value)
        else:
            framing = COUNT_BITS if p.length_type == LengthType.PACKET_COUNT else LENGTH_BITS
            sizes[id(p)] = HEADER_BITS + 1 + framing + sum(sizes[id(c)] for c in p.children)
    return sizes


def encode_packet(writer: BitWriter, packet: Packet):
    """Write a packet tree, each operator in its recorded framing mode."""
    sizes = _bit_sizes(packet)
    stack = [packet]
    while stack:
        p = stack.pop()
        writer.write_bits(p.version, VERSION_BITS)
        writer.write_bits(int(p.type), TYPE_BITS)

        if isinstance(p, LiteralPacket):
            encode_literal(writer, p.value)
            continue

        writer.write_bits(int(p.length_type), 1)
        if p.length_type == LengthType.PACKET_COUNT:
            writer.write_bits(len(p.children), COUNT_BITS)
        else:
            writer.write_bits(sizes[id(p)] - HEADER_BITS - 1 - LENGTH_BITS, LENGTH_BITS)
        stack.extend(reversed(p.children))


def literal(value: int, version: int = 0) -> LiteralPacket:
    return LiteralPacket(version, value)


def operator(
    type: PacketType,
    children: Sequence[Packet],
    length_type: LengthType = LengthType.PACKET_COUNT,
    version: int = 0,
) -> OperatorPacket:
    if type == PacketType.LITERAL:
        raise ValueError("Literal packets have no children")
    return OperatorPacket(version, PacketType(type), list(children), LengthType(length_type))


def to_hex(packet: Packet) -> str:
    """Encode a packet tree as upper-case hex text."""
    writer = BitWriter()
    encode_packet(writer, packet)
    return writer.to_hex()
