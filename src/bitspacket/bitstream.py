import io
from typing import BinaryIO, Union

from .errors import EndOfStreamError

MAX_READ_BITS = 64


class BitReader:
    """
    Reads a byte source bit-by-bit, most significant bit of each byte first.

    Exactly one byte is buffered at a time; the next byte is pulled from the
    source only once every bit of the current one has been consumed. Bits are
    never re-read and there is no look-ahead.
    """

    def __init__(self, source: Union[BinaryIO, bytes, bytearray, memoryview]):
        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))
        self.source = source
        self._buf = 0
        self._balance = 0  # unconsumed bits left in _buf (0 to 7)
        self._offset = 0

    @classmethod
    def from_hex(cls, text: str) -> "BitReader":
        """Build a reader over hex text. Malformed hex raises ValueError."""
        return cls(bytes.fromhex("".join(text.split())))

    @property
    def offset(self) -> int:
        """Total number of bits consumed so far."""
        return self._offset

    def read_bit(self) -> int:
        """Read a single bit."""
        return self.read_bits(1)

    def read_bits(self, n: int) -> int:
        """Read n bits and return them as an unsigned integer."""
        if not 1 <= n <= MAX_READ_BITS:
            raise ValueError(f"Can only read 1 to {MAX_READ_BITS} bits, got {n}")

        val = 0
        for _ in range(n):
            if self._balance == 0:
                chunk = self.source.read(1)
                if not chunk:
                    raise EndOfStreamError(self._offset, requested=n)
                self._buf = chunk[0]
                self._balance = 8

            val = (val << 1) | ((self._buf >> (self._balance - 1)) & 0x01)
            self._balance -= 1
            self._offset += 1
        return val

    def __repr__(self):
        return f"<BitReader offset={self._offset}>"
