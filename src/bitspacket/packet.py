"""
Explicit packet tree.

The decoder normally folds packets into values as it parses them. When the
intermediate structure is needed (tree dumps, version sums, re-encoding) it
builds these instead, and the passes below walk them.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple, Union

from .operators import LengthType, PacketType, apply_operator


@dataclass
class LiteralPacket:
    """Packet carrying a single integer."""
    version: int
    value: int

    @property
    def type(self) -> PacketType:
        return PacketType.LITERAL


@dataclass
class OperatorPacket:
    """Packet combining its children with a type-selected operator."""
    version: int
    type: PacketType
    children: List["Packet"] = field(default_factory=list)
    length_type: LengthType = LengthType.PACKET_COUNT


Packet = Union[LiteralPacket, OperatorPacket]



def _walk(packet: Packet) -> Iterator[Tuple[Packet, int]]:
    """Pre-order walk yielding (packet, depth), driven by an explicit stack."""
    stack = [(packet, 0)]
    while stack:
        p, depth = stack.pop()
        yield p, depth
        if isinstance(p, OperatorPacket):
            stack.extend((child, depth + 1) for child in reversed(p.children))


def _values(packet: Packet) -> Dict[int, int]:
    """Value of every packet in the tree, keyed by id()."""
    values: Dict[int, int] = {}
    # Reversed pre-order visits every child before its parent
    for p in reversed([p for p, _ in _walk(packet)]):
        if isinstance(p, LiteralPacket):
            values[id(p)] = p.value
        else:
            values[id(p)] = apply_operator(p.type, [values[id(c)] for c in p.children])
    return values


def evaluate(packet: Packet) -> int:
    """Evaluate a packet tree to its integer value."""
    return _values(packet)[id(packet)]


def iter_packets(packet: Packet) -> Iterator[Packet]:
    """Depth-first, pre-order walk over a packet and its descendants."""
    for p, _ in _walk(packet):
        yield p


def version_sum(packet: Packet) -> int:
    """Sum of the version headers of every packet in the tree."""
    return sum(p.version for p in iter_packets(packet))


def format_tree(packet: Packet, indent: str = "  ") -> str:
    """Render an indented, one-packet-per-line dump of the tree."""
    values = _values(packet)
    lines = []
    for p, depth in _walk(packet):
        pad = indent * depth
        if isinstance(p, LiteralPacket):
            lines.append(f"{pad}literal v{p.version} = {p.value}")
        else:
            mode = "bits" if p.length_type == LengthType.TOTAL_BITS else "count"
            lines.append(
                f"{pad}{p.type.name.lower()} v{p.version} "
                f"[{len(p.children)} by {mode}] = {values[id(p)]}"
            )
    return "\n".join(lines)
