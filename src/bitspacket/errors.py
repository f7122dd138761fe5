"""
Exceptions raised while decoding BITS packets.

Errors are never recovered inside the decoder. Each recursive boundary a
failure passes through appends a short label to ``context`` and re-raises
the same exception object, so the caller sees the original kind together
with the path that led to it:

    while decoding sub-packet: while decoding literal: end of stream at bit 27
"""

from typing import List, Optional

LITERAL_CONTEXT = "while decoding literal"
SUBPACKET_CONTEXT = "while decoding sub-packet"


class BitsError(Exception):
    """Base class for every decoding failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.context: List[str] = []

    def annotate(self, label: str) -> "BitsError":
        """Record one more enclosing boundary (innermost first)."""
        self.context.append(label)
        return self

    @property
    def depth(self) -> int:
        """Number of sub-packet boundaries the error crossed."""
        return sum(1 for label in self.context if label == SUBPACKET_CONTEXT)

    def __str__(self) -> str:
        return ": ".join(list(reversed(self.context)) + [self.message])


class EndOfStreamError(BitsError, EOFError):
    """The byte source ran out before the requested bits were available."""

    def __init__(self, offset: int, requested: Optional[int] = None):
        message = f"end of stream at bit {offset}"
        if requested is not None:
            message += f" (wanted {requested} bits)"
        super().__init__(message)
        self.offset = offset
        self.requested = requested


class UnknownOperatorError(BitsError):
    """A non-literal packet carries a type code with no operator."""

    def __init__(self, type_code: int):
        super().__init__(f"operator {type_code:X} not found")
        self.type_code = type_code

