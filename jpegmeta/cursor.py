"""Endian-aware byte cursor over an in-memory buffer.

Random-access reads never move the cursor; only ``next_byte`` advances it.
Reads outside the range return 0 so that malformed offsets degrade into
zero values instead of exceptions.
"""

from typing import Optional, Union

BIG_ENDIAN = '>'
LITTLE_ENDIAN = '<'

BytesLike = Union[bytes, bytearray, memoryview]


class ByteCursor:
    """A read-only view over a byte range with a byte order and a position."""
    __slots__ = ('data', 'endian', 'position')

    def __init__(self, data: BytesLike, endian: Optional[str] = None):
        self.data = data if isinstance(data, memoryview) else memoryview(data)
        self.endian = endian
        self.position = 0

    def length(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def next_byte(self) -> Optional[int]:
        """Consume one byte. Returns None once the end has been reached."""
        if self.position >= len(self.data):
            return None
        value = self.data[self.position]
        self.position += 1
        return value

    def byte_at(self, offset: int) -> int:
        if 0 <= offset < len(self.data):
            return self.data[offset]
        return 0

    def short_at(self, offset: int) -> int:
        a = self.byte_at(offset)
        b = self.byte_at(offset + 1)
        if self.endian == LITTLE_ENDIAN:
            return (b << 8) | a
        return (a << 8) | b

    def long_at(self, offset: int) -> int:
        b1, b2, b3, b4 = (self.byte_at(offset + i) for i in range(4))
        if self.endian == LITTLE_ENDIAN:
            value = (b4 << 24) | (b3 << 16) | (b2 << 8) | b1
        else:
            value = (b1 << 24) | (b2 << 16) | (b3 << 8) | b4
        return value & 0xFFFFFFFF

    def slice(self, start: int, end: int) -> 'ByteCursor':
        """Return a new cursor over ``[start, end)`` that keeps this byte order."""
        size = len(self.data)
        start = min(max(start, 0), size)
        end = min(max(end, start), size)
        return ByteCursor(self.data[start:end], self.endian)

    def tobytes(self) -> bytes:
        return self.data.tobytes()

    # -- TIFF byte order helpers ------------------------------------------

    def set_byte_order(self) -> Optional[str]:
        """Detect byte order from the first two bytes (``II`` or ``MM``)."""
        a, b = self.byte_at(0), self.byte_at(1)
        if a == 0x49 and b == 0x49:
            self.endian = LITTLE_ENDIAN
        elif a == 0x4D and b == 0x4D:
            self.endian = BIG_ENDIAN
        else:
            self.endian = None
        return self.endian

    def has_valid_magic(self) -> bool:
        """Check the TIFF magic number 42 at bytes 2-3 under the current byte order."""
        return self.short_at(2) == 0x002A
