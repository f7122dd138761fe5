"""
Packet type codes and the operator table.

Every non-literal packet combines the values of its sub-packets with one of
seven pure functions selected by its 3-bit type code. The literal code (4)
carries a value of its own and has no operator.
"""

import math
from enum import IntEnum
from typing import Callable, Dict, Sequence, Union

from .errors import UnknownOperatorError


class PacketType(IntEnum):
    """3-bit packet type codes."""
    SUM = 0
    PRODUCT = 1
    MINIMUM = 2
    MAXIMUM = 3
    LITERAL = 4
    GREATER_THAN = 5
    LESS_THAN = 6
    EQUAL_TO = 7


class LengthType(IntEnum):
    """Sub-packet framing selected by the length-type flag."""
    TOTAL_BITS = 0    # 15-bit length of the sub-packet region
    PACKET_COUNT = 1  # 11-bit number of sub-packets


Operator = Callable[[Sequence[int]], int]


def _greater_than(values: Sequence[int]) -> int:
    return 1 if values[0] > values[1] else 0


def _less_than(values: Sequence[int]) -> int:
    return 1 if values[0] < values[1] else 0


def _equal_to(values: Sequence[int]) -> int:
    return 1 if values[0] == values[1] else 0


OPERATORS: Dict[PacketType, Operator] = {
    PacketType.SUM: sum,
    PacketType.PRODUCT: math.prod,
    PacketType.MINIMUM: min,
    PacketType.MAXIMUM: max,
    PacketType.GREATER_THAN: _greater_than,
    PacketType.LESS_THAN: _less_than,
    PacketType.EQUAL_TO: _equal_to,
}

# Operators defined only for two operands
BINARY_OPERATORS = {PacketType.GREATER_THAN, PacketType.LESS_THAN, PacketType.EQUAL_TO}


def get_operator(type_code: Union[int, PacketType]) -> Operator:
    """Look up the operator for a type code, raising UnknownOperatorError."""
    try:
        return OPERATORS[PacketType(type_code)]
    except (ValueError, KeyError):
        raise UnknownOperatorError(int(type_code)) from None


def apply_operator(type_code: Union[int, PacketType], values: Sequence[int]) -> int:
    """Combine sub-packet values with the operator for ``type_code``."""
    return get_operator(type_code)(values)
