"""Tests for the endian-aware byte cursor."""

from jpegmeta.cursor import BIG_ENDIAN, LITTLE_ENDIAN, ByteCursor


class TestSequentialReads:
    def test_next_byte_advances(self):
        c = ByteCursor(b'\x01\x02')
        assert c.next_byte() == 1
        assert c.position == 1
        assert c.next_byte() == 2

    def test_next_byte_past_end(self):
        c = ByteCursor(b'\x01')
        c.next_byte()
        assert c.next_byte() is None
        assert c.position == 1

    def test_length(self):
        assert ByteCursor(b'abc').length() == 3
        assert len(ByteCursor(b'')) == 0


class TestRandomAccess:
    def test_random_reads_do_not_move_position(self):
        c = ByteCursor(b'\x00\x01\x02\x03\x04\x05')
        c.byte_at(3)
        c.short_at(1)
        c.long_at(2)
        assert c.position == 0

    def test_short_big_endian_default(self):
        c = ByteCursor(b'\x12\x34')
        assert c.endian is None
        assert c.short_at(0) == 0x1234

    def test_short_little_endian(self):
        c = ByteCursor(b'\x12\x34', LITTLE_ENDIAN)
        assert c.short_at(0) == 0x3412

    def test_long_both_orders(self):
        data = b'\x01\x02\x03\x04'
        assert ByteCursor(data, BIG_ENDIAN).long_at(0) == 0x01020304
        assert ByteCursor(data, LITTLE_ENDIAN).long_at(0) == 0x04030201

    def test_long_high_bit_stays_unsigned(self):
        c = ByteCursor(b'\xff\xff\xff\xfe', BIG_ENDIAN)
        assert c.long_at(0) == 0xFFFFFFFE

    def test_out_of_range_reads_zero(self):
        c = ByteCursor(b'\xff')
        assert c.byte_at(5) == 0
        assert c.byte_at(-1) == 0
        assert c.short_at(0) == 0xFF00
        assert c.long_at(100) == 0


class TestSlice:
    def test_slice_inherits_endian(self):
        c = ByteCursor(b'\x00\x01\x02\x03', LITTLE_ENDIAN)
        s = c.slice(2, 4)
        assert s.endian == LITTLE_ENDIAN
        assert s.short_at(0) == 0x0302
        assert s.position == 0

    def test_slice_clamps_bounds(self):
        c = ByteCursor(b'abcdef')
        assert c.slice(4, 100).tobytes() == b'ef'
        assert c.slice(10, 20).tobytes() == b''
        assert c.slice(3, 1).tobytes() == b''

    def test_slice_is_zero_copy(self):
        data = bytearray(b'abcdef')
        s = ByteCursor(data).slice(1, 3)
        data[1] = ord('X')
        assert s.tobytes() == b'Xc'

    def test_source_bytes_unchanged(self):
        data = b'\x49\x49\x2a\x00'
        c = ByteCursor(data)
        c.set_byte_order()
        c.slice(0, 2)
        assert c.tobytes() == data


class TestByteOrder:
    def test_detect_little_endian(self):
        c = ByteCursor(b'II\x2a\x00')
        assert c.set_byte_order() == LITTLE_ENDIAN
        assert c.has_valid_magic()

    def test_detect_big_endian(self):
        c = ByteCursor(b'MM\x00\x2a')
        assert c.set_byte_order() == BIG_ENDIAN
        assert c.has_valid_magic()

    def test_unknown_byte_order(self):
        c = ByteCursor(b'IM\x2a\x00')
        assert c.set_byte_order() is None

    def test_magic_checked_in_declared_order(self):
        # Little-endian marker with big-endian magic bytes
        c = ByteCursor(b'II\x00\x2a')
        c.set_byte_order()
        assert not c.has_valid_magic()
