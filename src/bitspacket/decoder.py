"""
Recursive BITS packet decoder.

Packet layout (bit widths):

    version(3) type(3) payload

    literal (type 4):  one or more 5-bit groups, 1 continuation bit + 4 value
                       bits, the last group has its continuation bit clear
    operator:          length_type(1) then
                         1 -> count(11)   followed by exactly `count` packets
                         0 -> length(15)  followed by packets filling `length` bits

``evaluate`` folds each packet into its value as soon as it has been read, so
no tree is ever held in memory. ``read_packet`` walks the same bits but keeps
the structure for inspection. Both keep open operator packets on an explicit
stack, so nesting depth is bounded by the input only.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Tuple

from .bitstream import BitReader
from .errors import LITERAL_CONTEXT, SUBPACKET_CONTEXT, BitsError
from .operators import LengthType, PacketType, apply_operator, get_operator
from .packet import LiteralPacket, OperatorPacket, Packet

logger = logging.getLogger(__name__)


@dataclass
class _OpenOperator:
    """An operator packet whose sub-packets are still being read."""
    version: int
    type_code: int
    length_type: LengthType
    count: int = 0  # PACKET_COUNT: number of sub-packets
    end: int = 0    # TOTAL_BITS: bit offset where the region closes
    children: List[Any] = field(default_factory=list)

    def is_complete(self, offset: int) -> bool:
        if self.length_type == LengthType.PACKET_COUNT:
            return len(self.children) >= self.count
        return offset >= self.end


class PacketDecoder:
    """Decodes one packet, and transitively its sub-packets, from a BitReader."""

    VERSION_BITS = 3
    TYPE_BITS = 3
    GROUP_BITS = 5
    COUNT_BITS = 11
    LENGTH_BITS = 15

    def __init__(self, reader: BitReader):
        self.br = reader

    def evaluate(self) -> int:
        """Decode one packet and return its value."""
        return self._decode(
            lambda version, value: value,
            lambda op: apply_operator(op.type_code, op.children),
        )

    def read_packet(self) -> Packet:
        """Decode one packet into an explicit LiteralPacket/OperatorPacket tree."""
        return self._decode(LiteralPacket, self._build_operator)

    def read_literal(self) -> int:
        """
        Read a literal payload: 5-bit groups, high bit set while more follow,
        low 4 bits appended to the value.
        """
        value = 0
        more = True
        while more:
            group = self.br.read_bits(self.GROUP_BITS)
            more = (group & 0b10000) != 0
            value = (value << 4) | (group & 0b01111)
        return value

    def _decode(
        self,
        make_literal: Callable[[int, int], Any],
        make_operator: Callable[[_OpenOperator], Any],
    ) -> Any:
        """
        Read one packet depth-first. Operators stay on ``stack`` until their
        framing says they are complete; then they are closed with
        ``make_operator`` and handed to the enclosing operator.

        A failure is labelled once per open ancestor, i.e. once per sub-packet
        boundary between the failing packet and the outermost one.
        """
        stack: List[_OpenOperator] = []
        try:
            while True:
                version, type_code = self._read_header()
                if type_code == PacketType.LITERAL:
                    item = make_literal(version, self._read_literal_value())
                else:
                    op = self._open_operator(version, type_code)
                    if not op.is_complete(self.br.offset):
                        stack.append(op)
                        continue
                    item = self._close(op, make_operator)

                while stack:
                    parent = stack[-1]
                    parent.children.append(item)
                    if not parent.is_complete(self.br.offset):
                        break
                    stack.pop()
                    item = self._close(parent, make_operator)
                else:
                    return item
        except BitsError as e:
            for _ in stack:
                e.annotate(SUBPACKET_CONTEXT)
            raise

    def _build_operator(self, op: _OpenOperator) -> OperatorPacket:
        get_operator(op.type_code)
        return OperatorPacket(op.version, PacketType(op.type_code), op.children, op.length_type)

    def _close(self, op: _OpenOperator, make_operator: Callable[[_OpenOperator], Any]) -> Any:
        if op.length_type == LengthType.TOTAL_BITS and self.br.offset > op.end:
            logger.warning(
                "Sub-packets overran their region: consumed up to bit %d, declared end %d",
                self.br.offset, op.end,
            )
        return make_operator(op)

    def _read_literal_value(self) -> int:
        try:
            value = self.read_literal()
        except BitsError as e:
            e.annotate(LITERAL_CONTEXT)
            raise
        logger.debug("literal %d ends at bit %d", value, self.br.offset)
        return value

    def _read_header(self) -> Tuple[int, int]:
        start = self.br.offset
        version = self.br.read_bits(self.VERSION_BITS)
        type_code = self.br.read_bits(self.TYPE_BITS)
        logger.debug("packet at bit %d: version=%d type=%d", start, version, type_code)
        return version, type_code

    def _open_operator(self, version: int, type_code: int) -> _OpenOperator:
        """Read the length-type flag and the count or length that follows it."""
        length_type = LengthType(self.br.read_bit())
        op = _OpenOperator(version, type_code, length_type)
        if length_type == LengthType.PACKET_COUNT:
            op.count = self.br.read_bits(self.COUNT_BITS)
            logger.debug("operator with %d sub-packets", op.count)
        else:
            length = self.br.read_bits(self.LENGTH_BITS)
            op.end = self.br.offset + length
            logger.debug("operator with %d bits of sub-packets", length)
        return op


def evaluate_hex(text: str) -> int:
    """Decode a hex-encoded message and return the value of its outermost packet."""
    return PacketDecoder(BitReader.from_hex(text)).evaluate()


def decode_hex(text: str) -> Packet:
    """Decode a hex-encoded message into a packet tree."""
    return PacketDecoder(BitReader.from_hex(text)).read_packet()
