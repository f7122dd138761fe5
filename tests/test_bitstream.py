"""
Tests for the MSB-first bit reader and the matching bit writer.
"""

import io

import pytest

from bitspacket.bitstream import BitReader
from bitspacket.bitwriter import BitWriter, encode_literal
from bitspacket.errors import EndOfStreamError


class TestBitReader:
    """Bit-level reads across byte boundaries."""

    def test_nibbles_msb_first(self):
        br = BitReader(b'\xA5')  # 1010 0101
        assert br.read_bits(4) == 0xA
        assert br.read_bits(4) == 0x5
        assert br.offset == 8

    def test_single_bits(self):
        br = BitReader(b'\x80')
        assert br.read_bit() == 1
        assert [br.read_bit() for _ in range(7)] == [0] * 7

    def test_read_spans_byte_boundary(self):
        br = BitReader(b'\x12\x34')
        assert br.read_bits(12) == 0x123
        assert br.read_bits(4) == 0x4

    def test_read_64_bits(self):
        br = BitReader(bytes(range(1, 9)))
        assert br.read_bits(64) == 0x0102030405060708
        assert br.offset == 64

    @pytest.mark.parametrize("n", [0, -1, 65])
    def test_out_of_range_width_rejected(self, n):
        with pytest.raises(ValueError):
            BitReader(b'\xff').read_bits(n)

    def test_offset_counts_every_bit(self):
        br = BitReader(b'\xff\xff\xff')
        for n in (3, 3, 1, 11, 5):
            br.read_bits(n)
        assert br.offset == 23

    def test_pulls_one_byte_at_a_time(self):
        source = io.BytesIO(b'\x01\x02\x03')
        br = BitReader(source)
        br.read_bits(3)
        assert source.tell() == 1
        br.read_bits(5)
        assert source.tell() == 1
        br.read_bit()
        assert source.tell() == 2

    def test_empty_source_raises(self):
        with pytest.raises(EndOfStreamError) as exc_info:
            BitReader(b'').read_bits(1)
        assert exc_info.value.offset == 0

    def test_exhausted_mid_read_raises(self):
        br = BitReader(b'\xff')
        br.read_bits(5)
        with pytest.raises(EndOfStreamError) as exc_info:
            br.read_bits(5)
        assert exc_info.value.offset == 8
        assert exc_info.value.requested == 5

    def test_end_of_stream_is_eof_error(self):
        with pytest.raises(EOFError):
            BitReader(b'').read_bit()

    def test_memoryview_source(self):
        data = bytearray(b"\x00\xA5")
        br = BitReader(memoryview(data)[1:])
        assert br.read_bits(8) == 0xA5

    def test_from_hex_ignores_whitespace(self):
        br = BitReader.from_hex(" D2 FE\n28\n")
        assert br.read_bits(24) == 0xD2FE28

    @pytest.mark.parametrize("text", ["D2F", "ZZ"])
    def test_from_hex_rejects_malformed(self, text):
        with pytest.raises(ValueError):
            BitReader.from_hex(text)


class TestBitWriter:
    """Bit packing for fixtures and re-encoding."""

    def test_pads_final_byte_with_zeros(self):
        w = BitWriter()
        w.write_bits(0b101, 3)
        assert w.bit_length == 3
        assert w.to_bytes() == b'\xa0'

    def test_multi_byte(self):
        w = BitWriter()
        w.write_bits(0x123, 12)
        w.write_bits(0x4, 4)
        assert w.to_hex() == "1234"

    def test_empty_writer(self):
        assert BitWriter().to_bytes() == b''

    def test_value_too_wide_rejected(self):
        with pytest.raises(ValueError):
            BitWriter().write_bits(8, 3)

    def test_negative_value_rejected(self):
        with pytest.raises(ValueError):
            BitWriter().write_bits(-1, 4)

    def test_extend(self):
        a, b = BitWriter(), BitWriter()
        a.write_bits(0b1, 1)
        b.write_bits(0b0000001, 7)
        a.extend(b)
        assert a.to_bytes() == b'\x81'

    def test_literal_groups(self):
        # 2021 = 0111 1110 0101
        w = BitWriter()
        encode_literal(w, 2021)
        assert w.bit_length == 15
        br = BitReader(w.to_bytes())
        assert br.read_bits(15) == 0b101111111000101

    def test_zero_literal_is_one_group(self):
        w = BitWriter()
        encode_literal(w, 0)
        assert w.bit_length == 5

    def test_writer_output_reads_back(self):
        w = BitWriter()
        w.write_bits(6, 3)
        w.write_bits(1500, 11)
        w.write_bits(1, 1)
        br = BitReader(w.to_bytes())
        assert br.read_bits(3) == 6
        assert br.read_bits(11) == 1500
        assert br.read_bit() == 1
